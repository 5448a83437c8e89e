"""Auction rule enforcement and pick validation."""

from typing import Optional, Tuple

from src.draft_manager.draft_state import DraftState


class ValidationError(Exception):
    """Raised when a pick violates draft rules."""

    pass


class DraftRules:
    """Enforces auction rules: availability, roster space and budget."""

    def __init__(self, draft_state: DraftState):
        self.draft_state = draft_state

    def validate_pick(
        self, team_id: int, player_id: str, price
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate if a purchase is legal.

        Returns:
            (is_valid, error_message) - (True, None) if valid
        """
        # Check 1: Does the team exist?
        team = self.draft_state.get_team(team_id)
        if team is None:
            return False, f"Team {team_id} does not exist"

        # Check 2: Does player exist in the pool?
        if self.draft_state.get_projection(player_id) is None:
            return False, f"Player {player_id} not found in projection pool"

        # Check 3: Is player available?
        if not self.draft_state.is_player_available(player_id):
            return False, f"Player {player_id} has already been drafted"

        # Check 4: Price must be a whole, non-negative dollar amount
        if isinstance(price, bool) or not isinstance(price, int) or price < 0:
            return False, f"Invalid auction price {price!r}: must be a whole dollar amount >= 0"

        # Check 5: Roster space
        roster_spots = self.draft_state.league_config.roster_spots_per_team
        if team.open_slots(roster_spots) == 0:
            return False, f"{team.team_name} roster is full ({roster_spots}/{roster_spots})"

        # Check 6: Budget, keeping $1 for every other open slot
        max_bid = team.max_bid(roster_spots)
        if price > max_bid:
            return False, (
                f"{team.team_name} cannot bid ${price}. "
                f"Max bid is ${max_bid} (${team.remaining_budget()} remaining, "
                f"{team.open_slots(roster_spots)} open slots)"
            )

        return True, None

    def is_draft_complete(self) -> bool:
        """Check if every roster spot is filled."""
        return (
            len(self.draft_state.picks)
            >= self.draft_state.league_config.total_roster_spots()
        )
