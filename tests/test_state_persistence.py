"""Tests for state persistence - save/load drafts and inflation state as JSON."""

import json
from datetime import datetime, timezone

import pytest

from src.draft_manager.draft_controller import DraftController
from src.draft_manager.state_persistence import StatePersistence
from src.inflation_engine.engine import InflationEngine
from src.inflation_engine.models import (
    InflationSnapshot,
    PlayerTier,
    RateHistoryEntry,
    create_default_inflation_state,
)


@pytest.fixture
def persistence(tmp_path):
    return StatePersistence(storage_dir=tmp_path)


def _play_picks(draft_state):
    controller = DraftController(draft_state)
    controller.make_pick(0, "p1", 60)
    controller.make_pick(1, "p5", 25, is_manual_entry=True)
    return controller


def _write_inflation_file(persistence, draft_id, data):
    path = persistence.storage_dir / f"inflation_{draft_id}.json"
    path.write_text(json.dumps(data), encoding="utf-8")


# ── Drafts ───────────────────────────────────────────────────────────


class TestDraftRoundTrip:
    def test_save_creates_file(self, persistence, draft_state):
        path = persistence.save_draft(draft_state)
        assert path.exists()
        assert path.name == f"draft_{draft_state.draft_id}.json"

    def test_load_restores_picks_and_budgets(self, persistence, draft_state):
        _play_picks(draft_state)
        persistence.save_draft(draft_state)

        loaded = persistence.load_draft(draft_state.draft_id)

        assert loaded.picks == draft_state.picks
        assert loaded.teams == draft_state.teams
        assert loaded.player_pool == draft_state.player_pool
        assert loaded.league_config == draft_state.league_config
        assert loaded.budget_context() == draft_state.budget_context()

    def test_loaded_draft_can_continue(self, persistence, draft_state):
        _play_picks(draft_state)
        persistence.save_draft(draft_state)

        loaded = persistence.load_draft(draft_state.draft_id)
        pick = DraftController(loaded).make_pick(0, "p2", 20)

        assert pick.pick_number == 3
        assert loaded.get_team(0).spent == 80

    def test_load_missing(self, persistence):
        assert persistence.load_draft("nope") is None

    def test_load_corrupt(self, persistence):
        (persistence.storage_dir / "draft_bad.json").write_text("{oops", encoding="utf-8")
        assert persistence.load_draft("bad") is None

    def test_load_malformed(self, persistence):
        (persistence.storage_dir / "draft_bad.json").write_text('{"draft_id": "bad"}', encoding="utf-8")
        assert persistence.load_draft("bad") is None


class TestListAndDelete:
    def test_list_saved_drafts(self, persistence, draft_state):
        _play_picks(draft_state)
        persistence.save_draft(draft_state)
        (persistence.storage_dir / "draft_corrupt.json").write_text("[", encoding="utf-8")

        drafts = persistence.list_saved_drafts()

        assert len(drafts) == 1
        assert drafts[0]["draft_id"] == draft_state.draft_id
        assert drafts[0]["picks_made"] == 2
        assert drafts[0]["league_size"] == 2

    def test_delete_removes_draft_and_inflation(self, persistence, draft_state):
        persistence.save_draft(draft_state)
        persistence.save_inflation(draft_state.draft_id, create_default_inflation_state(10))

        assert persistence.delete_draft(draft_state.draft_id) is True
        assert list(persistence.storage_dir.iterdir()) == []

    def test_delete_missing(self, persistence):
        assert persistence.delete_draft("nope") is False


# ── Inflation state ──────────────────────────────────────────────────


class TestInflationSerialization:
    def test_adjusted_values_written_as_pairs(self, persistence, draft_state):
        engine = InflationEngine(total_players=10)
        snapshot = engine.update(draft_state.drafted_players(), draft_state.projections())

        path = persistence.save_inflation(draft_state.draft_id, snapshot)
        data = json.loads(path.read_text(encoding="utf-8"))

        assert isinstance(data["adjusted_values"], list)
        assert data["adjusted_values"][0] == ["p1", 50]
        assert [pid for pid, _ in data["adjusted_values"]] == list(snapshot.adjusted_values)

    def test_last_updated_iso_or_null(self, persistence):
        stamped = InflationSnapshot(last_updated=datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc))

        path = persistence.save_inflation("a", stamped)
        assert json.loads(path.read_text())["last_updated"] == "2026-03-02T12:00:00+00:00"

        path = persistence.save_inflation("b", create_default_inflation_state(5))
        assert json.loads(path.read_text())["last_updated"] is None

    def test_round_trip(self, persistence, draft_state):
        _play_picks(draft_state)
        engine = InflationEngine(total_players=10)
        snapshot = engine.update(
            draft_state.drafted_players(), draft_state.projections(), draft_state.budget_context()
        )
        history = [
            RateHistoryEntry(pick_number=1, rate=20.0, timestamp=1.0),
            RateHistoryEntry(pick_number=2, rate=21.25, timestamp=2.0),
        ]

        persistence.save_inflation(draft_state.draft_id, snapshot, history)
        loaded, loaded_history = persistence.load_inflation(draft_state.draft_id, total_players=10)

        assert loaded.overall_rate == pytest.approx(snapshot.overall_rate)
        assert loaded.position_rates == pytest.approx(snapshot.position_rates)
        assert loaded.tier_rates[PlayerTier.ELITE] == pytest.approx(snapshot.tier_rates[PlayerTier.ELITE])
        assert loaded.budget_depleted == pytest.approx(snapshot.budget_depleted)
        assert loaded.players_remaining == snapshot.players_remaining
        assert loaded.adjusted_values == snapshot.adjusted_values
        assert loaded.last_updated == snapshot.last_updated
        assert loaded_history == history


class TestInflationFallbacks:
    def test_missing_file_gives_default(self, persistence):
        snapshot, history = persistence.load_inflation("nope", total_players=42)
        assert snapshot == create_default_inflation_state(42)
        assert history == []

    def test_corrupt_file_gives_default(self, persistence):
        (persistence.storage_dir / "inflation_bad.json").write_text("{", encoding="utf-8")
        snapshot, _ = persistence.load_inflation("bad", total_players=3)
        assert snapshot == create_default_inflation_state(3)

    def test_malformed_fields_fall_back(self, persistence):
        _write_inflation_file(
            persistence,
            "d1",
            {
                "overall_rate": "high",
                "position_rates": {"SS": 0.3, "QB": 9, "OF": "x"},
                "tier_rates": {"elite": 0.1, "BOGUS": 5},
                "players_remaining": None,
                "adjusted_values": {"p1": 10},
                "last_updated": "yesterday",
                "rate_history": [{"pick_number": 1, "rate": 2.0}, {"rate": 3}],
            },
        )

        snapshot, history = persistence.load_inflation("d1", total_players=8)

        assert snapshot.overall_rate == 0
        assert snapshot.position_rates["SS"] == 0.3
        assert snapshot.position_rates["OF"] == 0
        assert "QB" not in snapshot.position_rates
        assert snapshot.tier_rates[PlayerTier.ELITE] == 0.1
        assert snapshot.players_remaining == 8
        assert snapshot.adjusted_values == {}
        assert snapshot.last_updated is None
        assert history == [RateHistoryEntry(pick_number=1, rate=2.0, timestamp=0.0)]

    def test_absent_fields_fall_back(self, persistence):
        _write_inflation_file(persistence, "d2", {"adjusted_values": [["p1", 12], ["bad"], [3, 4]]})

        snapshot, history = persistence.load_inflation("d2", total_players=4)

        assert snapshot.adjusted_values == {"p1": 12}
        assert snapshot.players_remaining == 4
        assert history == []

    def test_restore_into_engine(self, persistence, draft_state):
        _play_picks(draft_state)
        snapshot = InflationEngine().update(draft_state.drafted_players(), draft_state.projections())
        persistence.save_inflation(draft_state.draft_id, snapshot)

        engine = InflationEngine(total_players=10)
        loaded, _ = persistence.load_inflation(draft_state.draft_id, total_players=10)
        engine.restore(loaded)

        assert engine.get_adjusted_value("p2") == snapshot.adjusted_values["p2"]
