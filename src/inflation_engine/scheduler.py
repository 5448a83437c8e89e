"""Deferred execution for debounced recalculation.

:class:`DeferredScheduler` is the seam the recalculation layer depends on;
:class:`ThreadingScheduler` is the default implementation. Delayed work runs
on a ``threading.Timer``; ``idle=True`` work runs on a single low-priority
background worker so large recomputes queue up behind each other instead of
competing with interactive threads.

A handle can be cancelled only until its task starts. Once started, a task
always runs to completion.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ScheduledHandle(Protocol):
    @property
    def started(self) -> bool: ...

    @property
    def done(self) -> bool: ...

    def cancel(self) -> bool: ...


class DeferredScheduler(Protocol):
    def schedule_deferred(
        self, fn: Callable[[], None], delay_s: float = 0.0, idle: bool = False
    ) -> ScheduledHandle: ...


class DeferredTask:
    """A cancellable unit of deferred work."""

    def __init__(self, fn: Callable[[], None]):
        self._fn = fn
        self._lock = threading.Lock()
        self._cancelled = False
        self._started = threading.Event()
        self._finished = threading.Event()
        self._timer: Optional[threading.Timer] = None

    @property
    def started(self) -> bool:
        return self._started.is_set()

    @property
    def done(self) -> bool:
        return self._finished.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Cancel the task if it has not started.

        Returns:
            True if the task will not run, False if it already started.
        """
        with self._lock:
            if self._started.is_set():
                return False
            self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        self._finished.set()
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the task has finished or been cancelled."""
        return self._finished.wait(timeout)

    def run(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._started.set()
        try:
            self._fn()
        except Exception:
            logger.exception("Deferred task failed")
        finally:
            self._finished.set()


class ThreadingScheduler:
    """Default scheduler backed by timers and one idle worker thread."""

    def __init__(self):
        self._idle_executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    def schedule_deferred(
        self, fn: Callable[[], None], delay_s: float = 0.0, idle: bool = False
    ) -> DeferredTask:
        """Run *fn* after *delay_s* seconds, on the idle worker if *idle*."""
        task = DeferredTask(fn)

        if delay_s > 0:
            timer = threading.Timer(delay_s, self._on_timer, args=(task, idle))
            timer.daemon = True
            task._timer = timer
            timer.start()
        elif idle:
            self._get_idle_executor().submit(task.run)
        else:
            # Next available tick: a fresh short-lived thread.
            threading.Thread(target=task.run, name="inflation-recalc", daemon=True).start()

        return task

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            executor, self._idle_executor = self._idle_executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def _on_timer(self, task: DeferredTask, idle: bool) -> None:
        if task.cancelled:
            return
        if idle:
            self._get_idle_executor().submit(task.run)
        else:
            task.run()

    def _get_idle_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._idle_executor is None:
                self._idle_executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="inflation-idle"
                )
            return self._idle_executor
