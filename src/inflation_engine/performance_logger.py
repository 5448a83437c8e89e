"""Non-blocking performance logging for inflation calculations.

Timings are handed to a sink on a background worker so the calculation
never waits on them. A failing sink is dropped silently (with a warning in
dev mode): instrumentation must never change a calculation's result or
the engine's ``error`` field.

Usage::

    perf = PerformanceLogger(sink=JsonLinesSink(path))
    tracked = perf.wrap(calculate_overall_inflation, "basic",
                        get_player_count=lambda drafted, _: len(drafted))
    rate = tracked(drafted, projections)
"""

import functools
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

CALCULATION_TYPES = ("basic", "position", "tier", "budget_depletion")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PerformanceLogEntry:
    """One timed calculation."""

    calculation_type: str
    latency_ms: int
    player_count: Optional[int] = None
    draft_id: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict:
        return {
            "calculation_type": self.calculation_type,
            "latency_ms": self.latency_ms,
            "player_count": self.player_count,
            "draft_id": self.draft_id,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "PerformanceLogEntry":
        return cls(
            calculation_type=data["calculation_type"],
            latency_ms=int(data["latency_ms"]),
            player_count=data.get("player_count"),
            draft_id=data.get("draft_id"),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class PerformanceMeasurement:
    """Manual timing span started by :meth:`PerformanceLogger.start_measurement`."""

    def __init__(self, perf_logger: "PerformanceLogger", calculation_type: str):
        self._perf_logger = perf_logger
        self.calculation_type = calculation_type
        self._start = time.perf_counter()

    def stop(self, player_count: Optional[int] = None, draft_id: Optional[str] = None) -> int:
        """End the span, log it, and return the latency in milliseconds."""
        latency_ms = _elapsed_ms(self._start)
        self._perf_logger.log(
            PerformanceLogEntry(
                calculation_type=self.calculation_type,
                latency_ms=latency_ms,
                player_count=player_count,
                draft_id=draft_id,
            )
        )
        return latency_ms


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


class PerformanceLogger:
    """Fire-and-forget reporter of calculation latencies.

    Args:
        sink: Callable receiving each :class:`PerformanceLogEntry`. With no
            sink, logging is a no-op.
        dev_mode: Log sink failures as warnings instead of dropping them
            silently.
    """

    def __init__(
        self,
        sink: Optional[Callable[[PerformanceLogEntry], None]] = None,
        dev_mode: bool = False,
    ):
        self.sink = sink
        self.dev_mode = dev_mode
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.sink is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def log(self, entry: PerformanceLogEntry) -> None:
        """Queue *entry* for the sink and return immediately."""
        if self.sink is None:
            return
        try:
            self._get_executor().submit(self._deliver, entry)
        except Exception as exc:
            self._report_failure(exc)

    def wrap(
        self,
        calculation_fn: Callable,
        calculation_type: str,
        get_player_count: Optional[Callable[..., int]] = None,
        get_draft_id: Optional[Callable[..., Optional[str]]] = None,
    ) -> Callable:
        """Return *calculation_fn* instrumented with timing.

        The wrapped function keeps the original signature and return value.
        Exceptions from the calculation itself propagate untouched; nothing
        is logged for a failed call.
        """

        @functools.wraps(calculation_fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            result = calculation_fn(*args, **kwargs)
            latency_ms = _elapsed_ms(start)

            if self.sink is not None:
                self.log(
                    PerformanceLogEntry(
                        calculation_type=calculation_type,
                        latency_ms=latency_ms,
                        player_count=self._extract(get_player_count, args, kwargs),
                        draft_id=self._extract(get_draft_id, args, kwargs),
                    )
                )
            return result

        return wrapper

    def start_measurement(self, calculation_type: str) -> PerformanceMeasurement:
        return PerformanceMeasurement(self, calculation_type)

    def flush(self) -> None:
        """Block until every queued entry has reached the sink."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def shutdown(self) -> None:
        self.flush()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="inflation-perf"
                )
            return self._executor

    def _deliver(self, entry: PerformanceLogEntry) -> None:
        try:
            self.sink(entry)
        except Exception as exc:
            self._report_failure(exc)

    def _extract(self, extractor, args, kwargs):
        if extractor is None:
            return None
        try:
            return extractor(*args, **kwargs)
        except Exception as exc:
            self._report_failure(exc)
            return None

    def _report_failure(self, exc: Exception) -> None:
        if self.dev_mode:
            logger.warning("Failed to log inflation performance: %s", exc)
