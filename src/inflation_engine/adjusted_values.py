"""Inflation-adjusted recommended values for undrafted players.

::

    adjusted = projected_value
        * (1 + position_rate)   # position scarcity
        * (1 + tier_rate)       # tier demand
        * depletion_multiplier  # money left per open slot

rounded half-up to whole dollars and floored at $0.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from src.inflation_engine.models import (
    PlayerTier,
    Projection,
    create_default_position_rates,
    create_default_tier_rates,
    is_position,
)


@dataclass(frozen=True)
class AdjustedValueInputs:
    """The parts of an inflation snapshot that feed adjusted values."""

    position_rates: Mapping[str, float] = field(default_factory=create_default_position_rates)
    tier_rates: Mapping[PlayerTier, float] = field(default_factory=create_default_tier_rates)
    budget_depletion_multiplier: Optional[float] = 1.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _position_rate(player: Projection, position_rates: Mapping[str, float]) -> float:
    # A recognized primary position wins over the eligibility list.
    if is_position(player.position):
        return position_rates.get(player.position, 0.0)
    for pos in player.positions:
        if is_position(pos):
            return position_rates.get(pos, 0.0)
    return 0.0


def _tier_rate(player: Projection, tier_rates: Mapping[PlayerTier, float]) -> float:
    tier = player.tier if player.tier is not None else PlayerTier.MID
    return tier_rates.get(tier, 0.0)


def calculate_single_adjusted_value(
    player: Projection, inputs: AdjustedValueInputs
) -> int:
    """Adjusted value for one player; never negative."""
    multiplier = inputs.budget_depletion_multiplier
    if multiplier is None:
        multiplier = 1.0

    raw = (
        player.value
        * (1 + _position_rate(player, inputs.position_rates))
        * (1 + _tier_rate(player, inputs.tier_rates))
        * multiplier
    )
    return max(0, round_half_up(raw))


def calculate_adjusted_values(
    players: Sequence[Projection], inputs: AdjustedValueInputs
) -> Dict[str, int]:
    """Adjusted value for each player, keyed by ``player_id`` in input order.

    Missing projections count as $0 and a missing tier uses the MID rate.
    The position rate comes from a recognized primary ``position``, else
    from the first recognized code in ``positions``.
    """
    return {
        player.player_id: calculate_single_adjusted_value(player, inputs)
        for player in players
    }
