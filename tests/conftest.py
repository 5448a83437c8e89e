"""Shared fixtures for the inflation engine test suite."""

import pytest

from src.draft_manager.draft_state import DraftState, LeagueConfig
from src.inflation_engine.models import PlayerTier, Projection


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------


def _make_projection(player_id, value, positions=("OF",), tier=None):
    return Projection(
        player_id=player_id,
        projected_value=value,
        positions=tuple(positions),
        tier=tier,
    )


@pytest.fixture
def small_pool():
    """Ten-player pool across a handful of positions, values 50 down to 5."""
    specs = [
        ("p1", 50, ("SS",), PlayerTier.ELITE),
        ("p2", 45, ("OF",), PlayerTier.MID),
        ("p3", 40, ("SP",), PlayerTier.MID),
        ("p4", 35, ("1B",), PlayerTier.MID),
        ("p5", 30, ("2B", "SS"), PlayerTier.LOWER),
        ("p6", 25, ("C",), PlayerTier.LOWER),
        ("p7", 20, ("RP",), PlayerTier.LOWER),
        ("p8", 15, ("3B",), PlayerTier.LOWER),
        ("p9", 10, ("OF",), PlayerTier.LOWER),
        ("p10", 5, ("UT",), PlayerTier.LOWER),
    ]
    return [_make_projection(pid, value, pos, tier) for pid, value, pos, tier in specs]


@pytest.fixture
def league_config():
    """Two teams, $100 each, three roster spots each."""
    return LeagueConfig(
        league_id="test",
        league_size=2,
        team_budget=100,
        roster_spots_per_team=3,
    )


@pytest.fixture
def draft_state(league_config, small_pool):
    return DraftState.create_new(league_config, ["Aces", "Bombers"], small_pool)
