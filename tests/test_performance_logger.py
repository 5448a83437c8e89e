"""Tests for non-blocking calculation timing."""

import logging
from datetime import datetime, timezone

import pytest

from src.inflation_engine.performance_logger import PerformanceLogEntry, PerformanceLogger


def _add(a, b):
    return a + b


class TestPerformanceLogEntry:
    def test_dict_uses_iso_timestamp(self):
        ts = datetime(2026, 3, 1, 18, 30, tzinfo=timezone.utc)
        entry = PerformanceLogEntry("tier", 12, player_count=40, draft_id="d1", timestamp=ts)

        data = entry.to_dict()

        assert data["timestamp"] == "2026-03-01T18:30:00+00:00"
        assert PerformanceLogEntry.from_dict(data) == entry


class TestWrap:
    def test_result_and_signature_preserved(self):
        perf = PerformanceLogger(sink=lambda e: None)
        wrapped = perf.wrap(_add, "basic")

        assert wrapped(2, b=3) == 5
        assert wrapped.__name__ == "_add"
        perf.flush()

    def test_entry_fields(self):
        entries = []
        perf = PerformanceLogger(sink=entries.append)
        wrapped = perf.wrap(
            _add, "position",
            get_player_count=lambda a, b: a,
            get_draft_id=lambda *args, **kwargs: "draft-7",
        )

        wrapped(4, 1)
        perf.flush()

        assert len(entries) == 1
        entry = entries[0]
        assert entry.calculation_type == "position"
        assert entry.player_count == 4
        assert entry.draft_id == "draft-7"
        assert entry.latency_ms >= 0

    def test_calculation_errors_propagate_without_logging(self):
        entries = []
        perf = PerformanceLogger(sink=entries.append)

        def broken():
            raise ZeroDivisionError("bad math")

        with pytest.raises(ZeroDivisionError):
            perf.wrap(broken, "basic")()
        perf.flush()

        assert entries == []

    def test_failing_extractor_still_logs(self):
        entries = []
        perf = PerformanceLogger(sink=entries.append)

        def bad_count(*args):
            raise KeyError("nope")

        assert perf.wrap(_add, "tier", get_player_count=bad_count)(1, 1) == 2
        perf.flush()

        assert entries[0].player_count is None

    def test_no_sink_is_disabled(self):
        perf = PerformanceLogger()
        assert not perf.enabled
        assert perf.wrap(_add, "basic")(1, 2) == 3


class TestSinkFailures:
    def test_failure_swallowed_silently(self, caplog):
        def broken_sink(entry):
            raise OSError("disk full")

        perf = PerformanceLogger(sink=broken_sink)

        with caplog.at_level(logging.WARNING):
            perf.log(PerformanceLogEntry("basic", 1))
            perf.flush()

        assert "disk full" not in caplog.text

    def test_dev_mode_warns(self, caplog):
        def broken_sink(entry):
            raise OSError("disk full")

        perf = PerformanceLogger(sink=broken_sink, dev_mode=True)

        with caplog.at_level(logging.WARNING):
            perf.log(PerformanceLogEntry("basic", 1))
            perf.flush()

        assert "disk full" in caplog.text


class TestMeasurement:
    def test_stop_logs_and_returns_latency(self):
        entries = []
        perf = PerformanceLogger(sink=entries.append)

        measurement = perf.start_measurement("budget_depletion")
        latency = measurement.stop(player_count=12, draft_id="d2")
        perf.flush()

        assert latency >= 0
        assert entries[0].calculation_type == "budget_depletion"
        assert entries[0].latency_ms == latency
        assert entries[0].draft_id == "d2"

    def test_logger_usable_after_flush(self):
        entries = []
        perf = PerformanceLogger(sink=entries.append)

        perf.log(PerformanceLogEntry("basic", 1))
        perf.flush()
        perf.log(PerformanceLogEntry("basic", 2))
        perf.shutdown()

        assert [e.latency_ms for e in entries] == [1, 2]
