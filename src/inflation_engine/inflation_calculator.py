"""Overall, per-position and per-tier inflation rates.

Every rate uses the same ratio::

    rate = (actual_spent - projected_value) / projected_value

so 0.15 means players are going for 15% over projection and -0.10 means
10% under. All three functions are pure and never raise on degenerate
data: an empty draft or a non-positive projected total yields 0. That 0 is
ambiguous between "no inflation" and "not enough data"; callers who need
the distinction must look at the input sizes themselves.

The calculations are source-agnostic. Manually entered picks and synced
picks are treated identically.
"""

import logging
from typing import Dict, List, Sequence

from src.inflation_engine.config import POSITIONS
from src.inflation_engine.models import (
    PLAYER_TIERS,
    DraftedPlayer,
    PlayerTier,
    Projection,
    create_default_position_rates,
    create_default_tier_rates,
    is_position,
)
from src.inflation_engine.tier_classifier import (
    get_percentile,
    sorted_projected_values,
    tier_for_percentile,
)

logger = logging.getLogger(__name__)


def _rate(actual: float, projected: float) -> float:
    if projected <= 0:
        return 0.0
    return (actual - projected) / projected


def _projection_lookup(projections: Sequence[Projection]) -> Dict[str, Projection]:
    return {p.player_id: p for p in projections}


# ------------------------------------------------------------------
# Overall
# ------------------------------------------------------------------


def calculate_overall_inflation(
    drafted_players: Sequence[DraftedPlayer],
    projections: Sequence[Projection],
) -> float:
    """Inflation across every drafted player.

    Drafted players without a projection count as $0 projected. Negative
    auction prices are logged as a data-quality problem but still summed.

    Example::

        drafted = [p1 for $30, p2 for $25]
        projections = [p1: 25, p2: 20, p3: 15]
        rate = (55 - 45) / 45  # ~0.222
    """
    if not drafted_players:
        return 0.0

    projected_by_id = {p.player_id: p.value for p in projections}

    total_actual = 0.0
    total_projected = 0.0
    negative_prices = 0

    for player in drafted_players:
        if player.auction_price < 0:
            negative_prices += 1
        total_actual += player.auction_price
        total_projected += projected_by_id.get(player.player_id, 0)

    if negative_prices:
        logger.warning(
            "%d drafted player(s) have a negative auction price; "
            "this points at a data-quality issue upstream",
            negative_prices,
        )

    return _rate(total_actual, total_projected)


# ------------------------------------------------------------------
# Per position
# ------------------------------------------------------------------


def split_by_position(
    player: DraftedPlayer, projected_value: float
) -> Dict[str, tuple]:
    """Evenly split a player's price and projection over its positions.

    Returns:
        Mapping of recognized position to ``(actual_share, projected_share)``.
        Empty when the player has no recognized position.
    """
    valid = [pos for pos in player.eligible_positions() if is_position(pos)]
    if not valid:
        return {}

    actual_share = player.auction_price / len(valid)
    projected_share = projected_value / len(valid)

    shares: Dict[str, tuple] = {}
    for pos in valid:
        prev_actual, prev_projected = shares.get(pos, (0.0, 0.0))
        shares[pos] = (prev_actual + actual_share, prev_projected + projected_share)
    return shares


def calculate_position_inflation(
    drafted_players: Sequence[DraftedPlayer],
    projections: Sequence[Projection],
) -> Dict[str, float]:
    """Inflation per position, each position computed independently.

    A multi-position player contributes ``1/k`` of its price and of its
    projected value to each of its ``k`` recognized positions. Unrecognized
    position codes are ignored; a player with none left is skipped.

    Returns:
        Rate for every position in ``POSITIONS`` (0 where nothing was bought).
    """
    result = create_default_position_rates()
    if not drafted_players:
        return result

    lookup = _projection_lookup(projections)
    actuals = {pos: 0.0 for pos in POSITIONS}
    projected = {pos: 0.0 for pos in POSITIONS}

    for player in drafted_players:
        projection = lookup.get(player.player_id)
        projected_value = projection.value if projection is not None else 0

        for pos, (actual_share, projected_share) in split_by_position(
            player, projected_value
        ).items():
            actuals[pos] += actual_share
            projected[pos] += projected_share

    for pos in POSITIONS:
        if projected[pos] <= 0 and actuals[pos] > 0:
            logger.warning(
                "Position %s has $%.2f actual spending but $0 projected value; "
                "projection data may be missing",
                pos,
                actuals[pos],
            )
        result[pos] = _rate(actuals[pos], projected[pos])

    return result


# ------------------------------------------------------------------
# Per tier
# ------------------------------------------------------------------


def resolve_drafted_tier(
    player: DraftedPlayer,
    projection,
    projected_value: float,
    sorted_values: List[float],
) -> PlayerTier:
    """Tier for a drafted player: its own tier, else the projection's,
    else the percentile of its projected value in the pool."""
    if player.tier is not None:
        return player.tier
    if projection is not None and projection.tier is not None:
        return projection.tier
    return tier_for_percentile(get_percentile(projected_value, sorted_values))


def calculate_tier_inflation(
    drafted_players: Sequence[DraftedPlayer],
    projections: Sequence[Projection],
) -> Dict[PlayerTier, float]:
    """Inflation per tier (ELITE, MID, LOWER), each computed independently.

    The pool is sorted once and reused for every percentile lookup.

    Returns:
        Rate for every tier (0 where nothing was bought).
    """
    result = create_default_tier_rates()
    if not drafted_players:
        return result

    lookup = _projection_lookup(projections)
    sorted_values = sorted_projected_values(projections)

    actuals = {tier: 0.0 for tier in PLAYER_TIERS}
    projected = {tier: 0.0 for tier in PLAYER_TIERS}

    for player in drafted_players:
        projection = lookup.get(player.player_id)
        projected_value = projection.value if projection is not None else 0

        tier = resolve_drafted_tier(player, projection, projected_value, sorted_values)
        actuals[tier] += player.auction_price
        projected[tier] += projected_value

    for tier in PLAYER_TIERS:
        result[tier] = _rate(actuals[tier], projected[tier])

    return result
