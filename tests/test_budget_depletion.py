"""Tests for the budget depletion multiplier."""

import pytest

from src.inflation_engine.budget_depletion import (
    budget_depleted_fraction,
    calculate_budget_depletion_factor,
    calculate_from_context,
)
from src.inflation_engine.models import BudgetContext


class TestBudgetDepletionFactor:
    def test_mid_draft(self):
        result = calculate_budget_depletion_factor(
            total_budget=2600, spent=500, slots_remaining=200, total_roster_spots=230
        )

        assert result.remaining == 2100
        assert result.spent == 500
        assert result.slots_remaining == 200
        assert result.multiplier == pytest.approx((2100 / 200) / (2600 / 230))
        assert result.multiplier > 0

    def test_draft_start_is_neutral(self):
        result = calculate_budget_depletion_factor(2600, 0, 230, 230)
        assert result.multiplier == pytest.approx(1.0)

    def test_overspending_deflates(self):
        # $2000 gone with only 30 of 230 slots filled
        result = calculate_budget_depletion_factor(2600, 2000, 200, 230)
        assert result.multiplier < 1.0

    def test_clamped_to_max(self):
        # $2500 left for one slot
        result = calculate_budget_depletion_factor(2600, 100, 1, 230)
        assert result.multiplier == 2.0

    def test_clamped_to_min(self):
        # $1 left for 200 slots
        result = calculate_budget_depletion_factor(2600, 2599, 200, 230)
        assert result.multiplier == 0.1

    def test_budget_exhausted(self):
        result = calculate_budget_depletion_factor(2600, 2700, 10, 230)
        assert result.multiplier == 0.1
        assert result.remaining == 0

    def test_draft_finished_is_neutral(self):
        result = calculate_budget_depletion_factor(2600, 2600, 0, 230)
        assert result.multiplier == 1.0
        assert result.slots_remaining == 0

    def test_negative_slots_report_zero(self):
        result = calculate_budget_depletion_factor(2600, 2000, -3, 230)
        assert result.multiplier == 1.0
        assert result.slots_remaining == 0

    @pytest.mark.parametrize(
        "total_budget, total_roster_spots",
        [(0, 230), (-100, 230), (2600, 0), (2600, -5)],
    )
    def test_degenerate_league_is_neutral(self, total_budget, total_roster_spots):
        result = calculate_budget_depletion_factor(total_budget, 100, 50, total_roster_spots)
        assert result.multiplier == 1.0

    @pytest.mark.parametrize(
        "total_budget, spent, slots_remaining, total_roster_spots",
        [
            (2600, 0, 1, 230),
            (2600, 2599.99, 229, 230),
            (1, 0, 1, 1000),
            (1000000, 0, 1, 1),
            (2600, -500, 230, 230),
            (-1, 5, 5, 5),
            (2600, 100, -1, 230),
        ],
    )
    def test_multiplier_always_bounded(self, total_budget, spent, slots_remaining, total_roster_spots):
        result = calculate_budget_depletion_factor(total_budget, spent, slots_remaining, total_roster_spots)
        assert 0.1 <= result.multiplier <= 2.0


class TestContextHelpers:
    def test_from_context_matches_direct_call(self):
        ctx = BudgetContext(total_budget=2600, spent=500, total_roster_spots=230, slots_remaining=200)
        direct = calculate_budget_depletion_factor(2600, 500, 200, 230)
        assert calculate_from_context(ctx) == direct

    def test_depleted_fraction(self):
        ctx = BudgetContext(total_budget=2600, spent=650, total_roster_spots=230, slots_remaining=180)
        assert budget_depleted_fraction(ctx) == pytest.approx(0.25)

    def test_depleted_fraction_clamped(self):
        over = BudgetContext(total_budget=100, spent=150, total_roster_spots=10, slots_remaining=0)
        under = BudgetContext(total_budget=100, spent=-10, total_roster_spots=10, slots_remaining=10)
        assert budget_depleted_fraction(over) == 1.0
        assert budget_depleted_fraction(under) == 0.0

    def test_depleted_fraction_without_budget(self):
        ctx = BudgetContext(total_budget=0, spent=10, total_roster_spots=10, slots_remaining=5)
        assert budget_depleted_fraction(ctx) == 0.0
