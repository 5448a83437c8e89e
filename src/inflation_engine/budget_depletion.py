"""Budget depletion modeling.

Compares the money left per open roster slot with the league-wide average
per slot::

    multiplier = (remaining / slots_remaining) / (total_budget / total_roster_spots)

When teams spend faster than slots fill, money per open slot falls below
the average and the multiplier drops below 1 (remaining players should
deflate); when they hold money back it rises above 1.
"""

from src.inflation_engine.config import (
    BUDGET_DEPLETION_MAX_MULTIPLIER,
    BUDGET_DEPLETION_MIN_MULTIPLIER,
)
from src.inflation_engine.models import BudgetContext, BudgetDepletionResult


def calculate_budget_depletion_factor(
    total_budget: float,
    spent: float,
    slots_remaining: int,
    total_roster_spots: int,
) -> BudgetDepletionResult:
    """Depletion multiplier for the current point in the draft.

    Args:
        total_budget: Sum of every team's auction budget.
        spent: Money already spent league-wide.
        slots_remaining: Roster slots still to fill league-wide.
        total_roster_spots: Roster slots league-wide.

    Returns:
        BudgetDepletionResult with the multiplier clamped to
        ``[0.1, 2.0]``. Degenerate leagues (no budget or no roster spots)
        and finished drafts get a neutral 1.0; an exhausted budget gets the
        0.1 floor.
    """
    remaining = total_budget - spent

    if total_budget <= 0 or total_roster_spots <= 0:
        return BudgetDepletionResult(
            multiplier=1.0,
            spent=spent,
            remaining=remaining,
            slots_remaining=slots_remaining,
        )

    if slots_remaining <= 0:
        return BudgetDepletionResult(
            multiplier=1.0,
            spent=spent,
            remaining=remaining,
            slots_remaining=0,
        )

    if remaining <= 0:
        return BudgetDepletionResult(
            multiplier=BUDGET_DEPLETION_MIN_MULTIPLIER,
            spent=spent,
            remaining=0,
            slots_remaining=slots_remaining,
        )

    avg_per_slot = total_budget / total_roster_spots
    current_per_slot = remaining / slots_remaining

    multiplier = current_per_slot / avg_per_slot
    multiplier = max(BUDGET_DEPLETION_MIN_MULTIPLIER, multiplier)
    multiplier = min(BUDGET_DEPLETION_MAX_MULTIPLIER, multiplier)

    return BudgetDepletionResult(
        multiplier=multiplier,
        spent=spent,
        remaining=remaining,
        slots_remaining=slots_remaining,
    )


def calculate_from_context(context: BudgetContext) -> BudgetDepletionResult:
    """Convenience wrapper taking a :class:`BudgetContext`."""
    return calculate_budget_depletion_factor(
        context.total_budget,
        context.spent,
        context.slots_remaining,
        context.total_roster_spots,
    )


def budget_depleted_fraction(context: BudgetContext) -> float:
    """Share of the league budget already spent, in ``[0, 1]``."""
    if context.total_budget <= 0:
        return 0.0
    return min(max(context.spent / context.total_budget, 0.0), 1.0)
