"""Tests for draft controller - auction purchases and state management."""

import pytest

from src.draft_manager.draft_controller import DraftController
from src.draft_manager.draft_rules import ValidationError


# ── Making picks ─────────────────────────────────────────────────────


class TestMakePick:
    def test_records_pick(self, draft_state):
        controller = DraftController(draft_state)

        pick = controller.make_pick(0, "p1", 45)

        assert pick.pick_number == 1
        assert pick.team_id == 0
        assert pick.price == 45
        assert pick.positions == ["SS"]
        assert pick.tier == "ELITE"
        assert draft_state.picks == [pick]
        assert draft_state.get_team(0).spent == 45
        assert draft_state.get_team(0).player_ids == ["p1"]

    def test_pick_numbers_increase(self, draft_state):
        controller = DraftController(draft_state)

        first = controller.make_pick(0, "p1", 45)
        second = controller.make_pick(1, "p2", 30)

        assert (first.pick_number, second.pick_number) == (1, 2)

    def test_manual_entry_flag_kept(self, draft_state):
        pick = DraftController(draft_state).make_pick(1, "p3", 12, is_manual_entry=True)
        assert pick.is_manual_entry is True
        assert draft_state.drafted_players()[0].is_manual_entry is True

    def test_invalid_pick_raises(self, draft_state):
        controller = DraftController(draft_state)
        controller.make_pick(0, "p1", 45)

        with pytest.raises(ValidationError, match="already been drafted"):
            controller.make_pick(1, "p1", 50)

        assert len(draft_state.picks) == 1

    def test_over_budget_raises(self, draft_state):
        with pytest.raises(ValidationError, match="Max bid"):
            DraftController(draft_state).make_pick(0, "p1", 100)

    def test_notifies_listeners(self, draft_state):
        calls = []
        draft_state.subscribe(lambda: calls.append(len(draft_state.picks)))

        DraftController(draft_state).make_pick(0, "p1", 45)

        assert calls == [1]

    def test_completes_draft(self, draft_state):
        controller = DraftController(draft_state)
        for i, pid in enumerate(["p1", "p2", "p3", "p4", "p5", "p6"]):
            controller.make_pick(i % 2, pid, 5)

        assert controller.is_complete
        with pytest.raises(ValidationError, match="already complete"):
            controller.make_pick(0, "p7", 1)


# ── Undo ─────────────────────────────────────────────────────────────


class TestUndo:
    def test_undo_refunds_and_restores_player(self, draft_state):
        controller = DraftController(draft_state)
        controller.make_pick(0, "p1", 45)

        undone = controller.undo_last_pick()

        assert undone.player_id == "p1"
        assert draft_state.picks == []
        assert draft_state.get_team(0).spent == 0
        assert draft_state.is_player_available("p1")

    def test_undo_notifies(self, draft_state):
        controller = DraftController(draft_state)
        controller.make_pick(0, "p1", 45)
        calls = []
        draft_state.subscribe(lambda: calls.append(1))

        controller.undo_last_pick()

        assert calls == [1]

    def test_undo_reopens_completed_draft(self, draft_state):
        controller = DraftController(draft_state)
        for i, pid in enumerate(["p1", "p2", "p3", "p4", "p5", "p6"]):
            controller.make_pick(i % 2, pid, 5)

        controller.undo_last_pick()

        assert not controller.is_complete
        assert draft_state.completed_at is None

    def test_undo_without_picks_raises(self, draft_state):
        with pytest.raises(ValidationError, match="No picks"):
            DraftController(draft_state).undo_last_pick()


# ── Queries ──────────────────────────────────────────────────────────


class TestQueries:
    def test_available_players_sorted_by_value(self, draft_state):
        controller = DraftController(draft_state)
        controller.make_pick(0, "p1", 45)

        players = controller.get_available_players()

        assert [p.player_id for p in players][:3] == ["p2", "p3", "p4"]
        assert len(players) == 9

    def test_available_players_by_position(self, draft_state):
        players = DraftController(draft_state).get_available_players("SS")
        assert [p.player_id for p in players] == ["p1", "p5"]

    def test_unknown_position_raises(self, draft_state):
        with pytest.raises(ValueError):
            DraftController(draft_state).get_available_players("QB")

    def test_budget_summary(self, draft_state):
        controller = DraftController(draft_state)
        controller.make_pick(0, "p1", 45)

        summary = controller.get_budget_summary()

        assert summary["total_budget"] == 200
        assert summary["spent"] == 45
        assert summary["remaining"] == 155
        assert summary["slots_remaining"] == 5
        aces = summary["teams"][0]
        assert aces["remaining"] == 55
        assert aces["open_slots"] == 2
        assert aces["max_bid"] == 54
