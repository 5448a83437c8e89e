"""Data models for the inflation engine.

Input records (``DraftedPlayer``, ``Projection``, ``BudgetContext``) are
frozen: the engine never mutates what callers hand it. The output
``InflationSnapshot`` is frozen too and is replaced wholesale on every
recompute.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from src.inflation_engine.config import POSITIONS


class PlayerTier(str, Enum):
    """Percentile-derived value band within the projection pool."""

    ELITE = "ELITE"
    MID = "MID"
    LOWER = "LOWER"


PLAYER_TIERS = (PlayerTier.ELITE, PlayerTier.MID, PlayerTier.LOWER)


def is_position(value) -> bool:
    """Whether *value* is one of the recognized position codes."""
    return isinstance(value, str) and value in POSITIONS


def parse_tier(value) -> Optional[PlayerTier]:
    """Convert a tier given as enum or string (any case) to ``PlayerTier``.

    Unknown or empty values return None so the caller falls back to the
    next tier source.
    """
    if isinstance(value, PlayerTier):
        return value
    if isinstance(value, str) and value:
        try:
            return PlayerTier(value.upper())
        except ValueError:
            return None
    return None


def resolve_positions(
    positions: Optional[Iterable[str]], position: Optional[str] = None
) -> Tuple[str, ...]:
    """Pick the position list for a record: ``positions`` if non-empty,
    else the single ``position``, else nothing.

    Codes are returned as given; unrecognized codes are filtered later by
    the calculators, which ignore them.
    """
    if positions:
        return tuple(positions)
    if position:
        return (position,)
    return ()


def _first_present(data: Mapping, *keys, default=None):
    for key in keys:
        if key in data:
            return data[key]
    return default


def _positions_field(value) -> Tuple[str, ...]:
    """Normalize a record's ``positions`` value; a bare string is one code."""
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class DraftedPlayer:
    """A player already bought in the auction."""

    player_id: str
    auction_price: float
    positions: Tuple[str, ...] = ()
    position: Optional[str] = None
    tier: Optional[PlayerTier] = None
    # Analytics only. Calculations treat manual and synced picks identically.
    is_manual_entry: bool = False

    def eligible_positions(self) -> Tuple[str, ...]:
        return resolve_positions(self.positions, self.position)

    @classmethod
    def from_dict(cls, data: Mapping) -> "DraftedPlayer":
        """Build from a collaborator record (snake_case or camelCase keys)."""
        return cls(
            player_id=_first_present(data, "player_id", "playerId"),
            auction_price=_first_present(data, "auction_price", "auctionPrice", default=0),
            positions=_positions_field(_first_present(data, "positions")),
            position=_first_present(data, "position"),
            tier=parse_tier(_first_present(data, "tier")),
            is_manual_entry=bool(
                _first_present(data, "is_manual_entry", "isManualEntry", default=False)
            ),
        )


@dataclass(frozen=True)
class Projection:
    """A candidate in the full player pool, drafted or not."""

    player_id: str
    projected_value: Optional[float]
    positions: Tuple[str, ...] = ()
    position: Optional[str] = None
    tier: Optional[PlayerTier] = None

    @property
    def value(self) -> float:
        """Projected value with a missing projection treated as $0."""
        return self.projected_value if self.projected_value is not None else 0

    def eligible_positions(self) -> Tuple[str, ...]:
        return resolve_positions(self.positions, self.position)

    @classmethod
    def from_dict(cls, data: Mapping) -> "Projection":
        """Build from a collaborator record (snake_case or camelCase keys)."""
        return cls(
            player_id=_first_present(data, "player_id", "playerId", "id"),
            projected_value=_first_present(data, "projected_value", "projectedValue"),
            positions=_positions_field(_first_present(data, "positions")),
            position=_first_present(data, "position"),
            tier=parse_tier(_first_present(data, "tier")),
        )


@dataclass(frozen=True)
class BudgetContext:
    """League-wide budget snapshot; recomputed by the caller on every call."""

    total_budget: float
    spent: float
    total_roster_spots: int
    slots_remaining: int


@dataclass(frozen=True)
class BudgetDepletionResult:
    """Depletion multiplier plus the budget figures it was derived from."""

    multiplier: float
    spent: float
    remaining: float
    slots_remaining: int


def create_default_position_rates() -> Dict[str, float]:
    return {position: 0.0 for position in POSITIONS}


def create_default_tier_rates() -> Dict[PlayerTier, float]:
    return {tier: 0.0 for tier in PLAYER_TIERS}


@dataclass(frozen=True)
class InflationSnapshot:
    """Everything the engine derives from one set of draft inputs."""

    overall_rate: float = 0.0
    position_rates: Dict[str, float] = field(default_factory=create_default_position_rates)
    tier_rates: Dict[PlayerTier, float] = field(default_factory=create_default_tier_rates)
    budget_depleted: float = 0.0
    budget_depletion: Optional[BudgetDepletionResult] = None
    players_remaining: int = 0
    adjusted_values: Dict[str, int] = field(default_factory=dict)
    is_calculating: bool = False
    last_updated: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def budget_depletion_multiplier(self) -> float:
        if self.budget_depletion is None:
            return 1.0
        return self.budget_depletion.multiplier


def create_default_inflation_state(total_players: int) -> InflationSnapshot:
    """Zeroed snapshot for a draft that is about to start."""
    return InflationSnapshot(players_remaining=total_players)


@dataclass(frozen=True)
class RateHistoryEntry:
    """Overall inflation at a given pick, in percentage points (12.5 = 12.5%)."""

    pick_number: int
    rate: float
    timestamp: float


@dataclass(frozen=True)
class TrendResult:
    direction: str  # "heating", "cooling" or "stable"
    change: float  # percentage points
    pick_window: int


def to_drafted_players(records: Iterable) -> List[DraftedPlayer]:
    """Accept ``DraftedPlayer`` instances or plain dict records."""
    return [r if isinstance(r, DraftedPlayer) else DraftedPlayer.from_dict(r) for r in records]


def to_projections(records: Iterable) -> List[Projection]:
    """Accept ``Projection`` instances or plain dict records."""
    return [r if isinstance(r, Projection) else Projection.from_dict(r) for r in records]
