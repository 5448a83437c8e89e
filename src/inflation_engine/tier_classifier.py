"""Tier assignment by percentile of projected value.

Tiers model the "run on the bank" pattern of auction drafts: only a few
teams can afford the elite players, the middle of the pool draws the most
competitive bidding, and the bottom deflates as rosters and budgets fill.

Percentile 0 is the most valuable player in the pool:

* **ELITE** - percentile below 10
* **MID** - percentile 10 up to 40
* **LOWER** - percentile 40 and above
"""

from typing import List, Sequence

from src.inflation_engine.config import (
    ELITE_PERCENTILE_CUTOFF,
    MID_PERCENTILE_CUTOFF,
)
from src.inflation_engine.models import PlayerTier, Projection


def sorted_projected_values(projections: Sequence[Projection]) -> List[float]:
    """Projected values of the whole pool, highest first (None -> 0)."""
    return sorted((p.value for p in projections), reverse=True)


def get_percentile(value: float, sorted_values: Sequence[float]) -> float:
    """Percentage of the pool valued strictly above *value*.

    Args:
        value: The projected value to rank.
        sorted_values: Pool values sorted in descending order.

    Returns:
        Percentile in ``[0, 100)``; 0 for an empty pool.
    """
    if not sorted_values:
        return 0

    count_above = 0
    for v in sorted_values:
        if v > value:
            count_above += 1
        else:
            break

    return count_above / len(sorted_values) * 100


def tier_for_percentile(percentile: float) -> PlayerTier:
    if percentile < ELITE_PERCENTILE_CUTOFF:
        return PlayerTier.ELITE
    if percentile < MID_PERCENTILE_CUTOFF:
        return PlayerTier.MID
    return PlayerTier.LOWER


def assign_player_tier(
    projected_value: float, projections: Sequence[Projection]
) -> PlayerTier:
    """Tier of a player with *projected_value* within *projections*.

    Equal values share a tier. An empty pool gives ``LOWER``.
    """
    if not projections:
        return PlayerTier.LOWER

    percentile = get_percentile(projected_value, sorted_projected_values(projections))
    return tier_for_percentile(percentile)
