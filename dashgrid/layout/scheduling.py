"""Cancellable delayed calls for the animation tracker.

Two schedulers share one small interface (``now``, ``call_later``):

  ThreadingScheduler  real wall-clock delays on daemon ``threading.Timer``s.
  ManualScheduler     a virtual clock advanced by the caller; tasks run
                      synchronously inside ``advance``.  Suited to
                      single-threaded event loops and to tests.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from typing import Callable, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""
        ...

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> ScheduledTask: ...


# ── Wall-clock scheduler ───────────────────────────────────────────


class _TimerTask:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ThreadingScheduler:
    """Runs each task on its own daemon timer thread."""

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> _TimerTask:
        timer = threading.Timer(max(0.0, delay_s), fn)
        timer.daemon = True
        task = _TimerTask(timer)
        timer.start()
        return task


# ── Virtual-clock scheduler ────────────────────────────────────────


class _ManualTask:
    def __init__(self, due: float, fn: Callable[[], None]) -> None:
        self.due = due
        self.fn = fn
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Scheduler whose clock only moves when ``advance`` is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _ManualTask]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_s: float, fn: Callable[[], None]) -> _ManualTask:
        task = _ManualTask(self._now + max(0.0, delay_s), fn)
        heapq.heappush(self._queue, (task.due, next(self._seq), task))
        return task

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that are neither run nor cancelled."""
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every task that falls due.

        Returns the number of tasks run.
        """
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = due
            task.fn()
            ran += 1
        self._now = target
        return ran
