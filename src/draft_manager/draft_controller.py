"""Draft controller - orchestrates auction purchases and state updates."""

import logging
from typing import Dict, List, Optional

from src.draft_manager.draft_rules import DraftRules, ValidationError
from src.draft_manager.draft_state import AuctionPick, DraftState, TeamRoster
from src.inflation_engine.models import Projection, is_position

logger = logging.getLogger(__name__)


class DraftController:
    """Main controller for auction draft tracking.

    Coordinates DraftRules (validation) and DraftState (state mutation),
    and notifies DraftState listeners after every change so inflation can
    be recalculated.
    """

    def __init__(self, draft_state: DraftState):
        self.draft_state = draft_state
        self.rules = DraftRules(draft_state)

    def make_pick(
        self,
        team_id: int,
        player_id: str,
        price: int,
        is_manual_entry: bool = False,
    ) -> AuctionPick:
        """Validate and record an auction purchase.

        Args:
            team_id: ID of the team that won the auction.
            player_id: ID of the player bought.
            price: Winning bid in whole dollars.
            is_manual_entry: True when entered by hand rather than synced.
                Recorded for analytics only.

        Returns:
            The AuctionPick record.

        Raises:
            ValidationError: If the purchase is illegal (unknown team or
                player, player already drafted, bad price, roster full,
                over budget, draft complete).
        """
        if self.draft_state.is_complete:
            raise ValidationError("Draft is already complete")

        is_valid, error_msg = self.rules.validate_pick(team_id, player_id, price)
        if not is_valid:
            logger.warning("Invalid pick attempted: %s", error_msg)
            raise ValidationError(error_msg)

        projection = self.draft_state.get_projection(player_id)
        team = self.draft_state.get_team(team_id)

        pick = AuctionPick.create(
            pick_number=self.draft_state.current_pick,
            team_id=team_id,
            player_id=player_id,
            price=price,
            positions=list(projection.eligible_positions()),
            tier=projection.tier.value if projection.tier else None,
            is_manual_entry=is_manual_entry,
        )

        team.add_player(player_id, price)
        self.draft_state.picks.append(pick)

        logger.info(
            "Pick %d: Team %d (%s) buys %s (%s) for $%d%s",
            pick.pick_number,
            team_id,
            team.team_name,
            player_id,
            "/".join(pick.positions) or "no position",
            price,
            " [manual]" if is_manual_entry else "",
        )

        self.draft_state.check_if_complete()
        self.draft_state.notify_listeners()

        return pick

    def undo_last_pick(self) -> AuctionPick:
        """Roll back the most recent purchase and refund the team.

        Raises:
            ValidationError: If no picks have been made.
        """
        if not self.draft_state.picks:
            raise ValidationError("No picks to undo")

        pick = self.draft_state.picks.pop()
        self.draft_state.get_team(pick.team_id).remove_player(pick.player_id, pick.price)

        logger.info(
            "Undid pick %d: %s back in pool, Team %d refunded $%d",
            pick.pick_number, pick.player_id, pick.team_id, pick.price,
        )

        self.draft_state.check_if_complete()
        self.draft_state.notify_listeners()

        return pick

    @property
    def is_complete(self) -> bool:
        """Whether the draft is finished."""
        return self.draft_state.is_complete

    def get_available_players(self, position: Optional[str] = None) -> List[Projection]:
        """Undrafted players, optionally limited to one eligible position.

        Ordered by projected value, highest first.
        """
        if position is not None and not is_position(position):
            raise ValueError(f"Unknown position: {position!r}")

        players = [
            p for p in self.draft_state.available_players()
            if position is None or position in p.eligible_positions()
        ]
        return sorted(players, key=lambda p: p.value, reverse=True)

    def get_budget_summary(self) -> Dict:
        """League and per-team budget figures."""
        roster_spots = self.draft_state.league_config.roster_spots_per_team
        context = self.draft_state.budget_context()

        return {
            "total_budget": context.total_budget,
            "spent": context.spent,
            "remaining": context.total_budget - context.spent,
            "slots_remaining": context.slots_remaining,
            "teams": [self._team_budget(team, roster_spots) for team in self.draft_state.teams],
        }

    @staticmethod
    def _team_budget(team: TeamRoster, roster_spots: int) -> Dict:
        return {
            "team_id": team.team_id,
            "team_name": team.team_name,
            "spent": team.spent,
            "remaining": team.remaining_budget(),
            "open_slots": team.open_slots(roster_spots),
            "max_bid": team.max_bid(roster_spots),
        }
