"""Per-pick history of the overall inflation rate, used for trend display."""

import logging
import time
from typing import List, Optional

from src.inflation_engine.config import DEFAULT_TREND_WINDOW
from src.inflation_engine.models import InflationSnapshot, RateHistoryEntry, TrendResult
from src.inflation_engine.trend_analyzer import calculate_inflation_trend

logger = logging.getLogger(__name__)


class InflationHistoryTracker:
    """Records the overall rate after each pick.

    Subscribe ``on_snapshot`` to an ``InflationEngine``; ``pick_counter``
    returns the number of picks made so far, which is the pick the
    snapshot belongs to.
    """

    def __init__(self, pick_counter=None):
        self._pick_counter = pick_counter
        self._entries: List[RateHistoryEntry] = []
        self._awaiting_result = False

    @property
    def entries(self) -> List[RateHistoryEntry]:
        return list(self._entries)

    def record(
        self, pick_number: int, rate: float, timestamp: Optional[float] = None
    ) -> RateHistoryEntry:
        """Store *rate* (decimal, 0.125 = 12.5%) for *pick_number*.

        A second record for the same pick replaces the first, so undo and
        re-pick keep one entry per pick. Entries stay ordered by pick.
        """
        entry = RateHistoryEntry(
            pick_number=pick_number,
            rate=rate * 100,
            timestamp=timestamp if timestamp is not None else time.time(),
        )
        self._entries = [e for e in self._entries if e.pick_number != pick_number]
        self._entries.append(entry)
        self._entries.sort(key=lambda e: e.pick_number)
        return entry

    def load(self, entries: List[RateHistoryEntry]):
        """Replace the history, e.g. with entries restored from disk."""
        self._entries = sorted(entries, key=lambda e: e.pick_number)

    def clear(self):
        self._entries = []

    def on_snapshot(self, snapshot: InflationSnapshot):
        """Engine listener: record the result of each full recalculation.

        A recalculation publishes a calculating snapshot first, so only the
        snapshot that follows one is recorded. Budget-only refreshes and
        restored snapshots leave the history alone.
        """
        if snapshot.is_calculating:
            self._awaiting_result = True
            return
        awaiting, self._awaiting_result = self._awaiting_result, False
        if not awaiting or snapshot.error or snapshot.last_updated is None:
            return
        if self._pick_counter is None:
            return

        pick_number = self._pick_counter()
        if pick_number <= 0:
            return
        self.record(pick_number, snapshot.overall_rate, snapshot.last_updated.timestamp())
        logger.debug(
            "Recorded inflation %.2f%% at pick %d", snapshot.overall_rate * 100, pick_number
        )

    def trend(
        self, current_pick: Optional[int] = None, window_size: int = DEFAULT_TREND_WINDOW
    ) -> TrendResult:
        if current_pick is None:
            current_pick = self._entries[-1].pick_number if self._entries else 0
        return calculate_inflation_trend(self._entries, current_pick, window_size)
