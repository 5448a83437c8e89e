"""Keeps an :class:`InflationEngine` in step with a live draft.

The draft-state provider calls :meth:`InflationIntegration.notify_change`
whenever a pick is recorded or undone. Bursts of notifications collapse
into one trailing recompute after the debounce window, and that recompute
reads the provider's *entire current* state at the moment it runs, so it
does not matter how many notifications were coalesced.

Only a pending (not yet started) recompute is ever cancelled. Two
recomputes that overlap both publish, and the one that finishes last
wins.
"""

import logging
import threading
from typing import Callable, Iterable, List, Optional, Protocol

from src.inflation_engine.config import DEFAULT_DEBOUNCE_MS, IDLE_RECALC_THRESHOLD
from src.inflation_engine.engine import InflationEngine
from src.inflation_engine.models import (
    BudgetContext,
    DraftedPlayer,
    InflationSnapshot,
    Projection,
    to_projections,
)
from src.inflation_engine.scheduler import (
    DeferredScheduler,
    ScheduledHandle,
    ThreadingScheduler,
)

logger = logging.getLogger(__name__)


class DraftStateProvider(Protocol):
    """What the integration needs from whoever tracks the draft."""

    def drafted_players(self) -> List[DraftedPlayer]: ...

    def budget_context(self) -> Optional[BudgetContext]: ...

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]: ...


class InflationIntegration:
    """Debounced, full-state recalculation driven by draft change notifications.

    Args:
        engine: The engine whose snapshot is kept current.
        provider: Source of drafted players and budget context.
        projections: The full projection pool for the league.
        scheduler: Deferred-execution backend (defaults to
            :class:`ThreadingScheduler`).
        debounce_ms: Quiet period before a burst of changes is recomputed.
        enabled: When False, change notifications are ignored.
        idle_threshold: Pools at least this large are recomputed on the
            scheduler's idle slot.
    """

    def __init__(
        self,
        engine: InflationEngine,
        provider: DraftStateProvider,
        projections: Iterable,
        scheduler: Optional[DeferredScheduler] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        enabled: bool = True,
        idle_threshold: int = IDLE_RECALC_THRESHOLD,
    ):
        self.engine = engine
        self.provider = provider
        self.scheduler = scheduler or ThreadingScheduler()
        self.debounce_ms = debounce_ms
        self.enabled = enabled
        self.idle_threshold = idle_threshold
        self._projections: List[Projection] = to_projections(projections)
        self._pending: Optional[ScheduledHandle] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Subscribe to the provider and run the initial calculation."""
        if not self.enabled or self._unsubscribe is not None:
            return
        self._unsubscribe = self.provider.subscribe(self.notify_change)
        logger.info(
            "Inflation integration started (%d projections, debounce %dms)",
            len(self._projections),
            self.debounce_ms,
        )
        self.recalculate()

    def stop(self) -> None:
        """Unsubscribe and drop any recompute that has not started yet."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._cancel_pending()

    @property
    def is_running(self) -> bool:
        return self._unsubscribe is not None

    @property
    def has_pending(self) -> bool:
        pending = self._pending
        return pending is not None and not pending.started and not pending.done

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def notify_change(self) -> None:
        """Schedule a trailing recompute, replacing any pending one."""
        if not self.enabled:
            return
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = self.scheduler.schedule_deferred(
                self._run_debounced, delay_s=self.debounce_ms / 1000
            )

    def set_projections(self, projections: Iterable) -> None:
        """Swap the projection pool and schedule a recompute."""
        self._projections = to_projections(projections)
        self.notify_change()

    # ------------------------------------------------------------------
    # Recalculation
    # ------------------------------------------------------------------

    def recalculate(self) -> Optional[InflationSnapshot]:
        """Recompute right now from the provider's current state.

        Returns:
            The published snapshot, or None when there are no projections
            to work with yet.
        """
        projections = self._projections
        if not projections:
            logger.debug("Skipping inflation recalculation: no projections loaded")
            return None

        drafted = self.provider.drafted_players()
        budget_context = self.provider.budget_context()
        return self.engine.update(drafted, projections, budget_context)

    def reset(self) -> InflationSnapshot:
        self._cancel_pending()
        return self.engine.reset_inflation()

    @property
    def is_calculating(self) -> bool:
        return self.engine.is_calculating

    @property
    def last_updated(self):
        return self.engine.last_updated

    @property
    def error(self) -> Optional[str]:
        return self.engine.error

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _run_debounced(self) -> None:
        if len(self._projections) >= self.idle_threshold:
            with self._lock:
                self._pending = self.scheduler.schedule_deferred(self.recalculate, idle=True)
        else:
            self.recalculate()

    def _cancel_pending(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
