"""Local storage and aggregation of inflation performance logs.

:class:`JsonLinesSink` is a :class:`PerformanceLogger` sink that appends
one JSON object per line; :func:`summarize_performance` turns a batch of
entries into latency percentiles over a trailing window.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from src.inflation_engine.performance_logger import PerformanceLogEntry

logger = logging.getLogger(__name__)


class JsonLinesSink:
    """Append performance entries to a local ``.jsonl`` file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def __call__(self, entry: PerformanceLogEntry) -> None:
        line = json.dumps(entry.to_dict())
        with self._lock:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def read_entries(self) -> List[PerformanceLogEntry]:
        """Read every entry back, skipping lines that fail to parse."""
        if not self.path.exists():
            return []

        entries = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(PerformanceLogEntry.from_dict(json.loads(line)))
                except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
                    logger.warning(
                        "Skipping corrupt performance log line %d in %s: %s",
                        line_no, self.path, e,
                    )
        return entries


@dataclass(frozen=True)
class HourlyLatencyPoint:
    hour: str  # ISO-8601 start of the hour, UTC
    median_latency: float


@dataclass(frozen=True)
class PerformanceSummary:
    median_latency: float = 0.0
    p95_latency: float = 0.0
    p99_latency: float = 0.0
    total_calculations: int = 0
    calculations_per_minute: float = 0.0
    hourly_latencies: List[HourlyLatencyPoint] = field(default_factory=list)


def _as_utc_timestamp(value: Optional[datetime]) -> pd.Timestamp:
    ts = pd.Timestamp(value if value is not None else datetime.now(timezone.utc))
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def summarize_performance(
    entries: Iterable[PerformanceLogEntry],
    now: Optional[datetime] = None,
    window_hours: int = 24,
) -> PerformanceSummary:
    """Latency percentiles and throughput over the trailing window.

    Args:
        entries: Logged calculations, any order.
        now: End of the window. Defaults to the current UTC time.
        window_hours: Window length.

    Returns:
        PerformanceSummary; all zeros when no entry falls in the window.
    """
    records = [e.to_dict() for e in entries]
    if not records:
        return PerformanceSummary()

    df = pd.DataFrame(records)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)

    end = _as_utc_timestamp(now)
    start = end - pd.Timedelta(hours=window_hours)
    df = df[(df["timestamp"] > start) & (df["timestamp"] <= end)]

    if df.empty:
        return PerformanceSummary()

    latency = df["latency_ms"].astype(float)
    hourly = latency.groupby(df["timestamp"].dt.floor("h")).median().sort_index()

    summary = PerformanceSummary(
        median_latency=float(latency.median()),
        p95_latency=float(latency.quantile(0.95)),
        p99_latency=float(latency.quantile(0.99)),
        total_calculations=int(len(df)),
        calculations_per_minute=len(df) / (window_hours * 60),
        hourly_latencies=[
            HourlyLatencyPoint(hour=hour.isoformat(), median_latency=float(value))
            for hour, value in hourly.items()
        ],
    )

    logger.debug(
        "Performance summary over %dh: %d calculations, median %.1fms, p99 %.1fms",
        window_hours, summary.total_calculations,
        summary.median_latency, summary.p99_latency,
    )
    return summary
