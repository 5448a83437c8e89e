"""Auction draft state - single source of truth for picks and budgets."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

from src.draft_manager.config import (
    DEFAULT_LEAGUE_SIZE,
    DEFAULT_ROSTER_SPOTS_PER_TEAM,
    DEFAULT_TEAM_BUDGET,
    MIN_BID,
)
from src.inflation_engine.models import (
    BudgetContext,
    DraftedPlayer,
    Projection,
    parse_tier,
    to_projections,
)

logger = logging.getLogger(__name__)


@dataclass
class TeamRoster:
    """A single team's purchases and budget."""

    team_id: int
    team_name: str
    budget: int
    spent: int = 0
    player_ids: List[str] = field(default_factory=list)

    def remaining_budget(self) -> int:
        return self.budget - self.spent

    def open_slots(self, roster_spots: int) -> int:
        return max(roster_spots - len(self.player_ids), 0)

    def max_bid(self, roster_spots: int) -> int:
        """Highest legal bid, keeping $1 for every other open slot."""
        open_slots = self.open_slots(roster_spots)
        if open_slots == 0:
            return 0
        return max(self.remaining_budget() - MIN_BID * (open_slots - 1), 0)

    def add_player(self, player_id: str, price: int):
        self.player_ids.append(player_id)
        self.spent += price

    def remove_player(self, player_id: str, price: int):
        """Remove player from roster and refund the price (for undo)."""
        self.player_ids.remove(player_id)
        self.spent -= price


@dataclass
class AuctionPick:
    """Represents a single auction purchase."""

    pick_number: int
    team_id: int
    player_id: str
    price: int
    timestamp: str
    positions: List[str] = field(default_factory=list)
    tier: Optional[str] = None
    is_manual_entry: bool = False

    @classmethod
    def create(
        cls,
        pick_number: int,
        team_id: int,
        player_id: str,
        price: int,
        positions: Optional[List[str]] = None,
        tier: Optional[str] = None,
        is_manual_entry: bool = False,
    ):
        return cls(
            pick_number=pick_number,
            team_id=team_id,
            player_id=player_id,
            price=price,
            timestamp=datetime.now().isoformat(),
            positions=list(positions or []),
            tier=tier,
            is_manual_entry=is_manual_entry,
        )

    def to_drafted_player(self) -> DraftedPlayer:
        return DraftedPlayer(
            player_id=self.player_id,
            auction_price=self.price,
            positions=tuple(self.positions),
            tier=parse_tier(self.tier),
            is_manual_entry=self.is_manual_entry,
        )


@dataclass
class LeagueConfig:
    """Auction league settings."""

    league_id: str
    league_size: int = DEFAULT_LEAGUE_SIZE
    team_budget: int = DEFAULT_TEAM_BUDGET
    roster_spots_per_team: int = DEFAULT_ROSTER_SPOTS_PER_TEAM

    def total_budget(self) -> int:
        return self.league_size * self.team_budget

    def total_roster_spots(self) -> int:
        return self.league_size * self.roster_spots_per_team


@dataclass
class DraftState:
    """Complete auction draft state."""

    draft_id: str
    league_config: LeagueConfig
    draft_start_time: str
    teams: List[TeamRoster]
    picks: List[AuctionPick]
    player_pool: Dict[str, Projection]
    is_complete: bool = False
    completed_at: Optional[str] = None
    _listeners: List[Callable[[], None]] = field(
        default_factory=list, repr=False, compare=False
    )

    @classmethod
    def create_new(
        cls,
        league_config: LeagueConfig,
        team_names: List[str],
        projections: Iterable,
    ) -> "DraftState":
        """Factory method to create a new auction draft."""
        if len(team_names) != league_config.league_size:
            raise ValueError(
                f"team_names length ({len(team_names)}) must match "
                f"league_size ({league_config.league_size})"
            )

        teams = [
            TeamRoster(team_id=i, team_name=name, budget=league_config.team_budget)
            for i, name in enumerate(team_names)
        ]
        player_pool = {p.player_id: p for p in to_projections(projections)}

        return cls(
            draft_id=str(uuid.uuid4()),
            league_config=league_config,
            draft_start_time=datetime.now().isoformat(),
            teams=teams,
            picks=[],
            player_pool=player_pool,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def picks_made(self) -> int:
        return len(self.picks)

    @property
    def current_pick(self) -> int:
        """Number the next purchase will get (1-based)."""
        return len(self.picks) + 1

    def get_team(self, team_id: int) -> Optional[TeamRoster]:
        if 0 <= team_id < len(self.teams):
            return self.teams[team_id]
        return None

    def get_projection(self, player_id: str) -> Optional[Projection]:
        return self.player_pool.get(player_id)

    def drafted_ids(self) -> set:
        return {pick.player_id for pick in self.picks}

    def is_player_available(self, player_id: str) -> bool:
        return player_id in self.player_pool and player_id not in self.drafted_ids()

    def projections(self) -> List[Projection]:
        """The full pool, drafted and undrafted."""
        return list(self.player_pool.values())

    def available_players(self) -> List[Projection]:
        drafted = self.drafted_ids()
        return [p for p in self.player_pool.values() if p.player_id not in drafted]

    def total_spent(self) -> int:
        return sum(team.spent for team in self.teams)

    # ------------------------------------------------------------------
    # DraftStateProvider
    # ------------------------------------------------------------------

    def drafted_players(self) -> List[DraftedPlayer]:
        return [pick.to_drafted_player() for pick in self.picks]

    def budget_context(self) -> BudgetContext:
        total_spots = self.league_config.total_roster_spots()
        return BudgetContext(
            total_budget=self.league_config.total_budget(),
            spent=self.total_spent(),
            total_roster_spots=total_spots,
            slots_remaining=total_spots - len(self.picks),
        )

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register *callback* for pick changes; returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def notify_listeners(self):
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Draft change listener failed")

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def check_if_complete(self) -> bool:
        """A draft is complete once every roster spot is filled."""
        self.is_complete = len(self.picks) >= self.league_config.total_roster_spots()

        if self.is_complete and not self.completed_at:
            self.completed_at = datetime.now().isoformat()
        elif not self.is_complete:
            self.completed_at = None

        return self.is_complete
