"""
Scheduled tasks for polling and notification expiry.

Everything in the console runs on one logical event loop. Timers are the
only source of "concurrency": a repeating task for the change detector and
one one-shot task per notification for its expiry. Callbacks run to
completion once dispatched.

Two schedulers share one interface:
- AsyncioScheduler: real time, on an asyncio event loop
- ManualScheduler: virtual time advanced explicitly, for demos and tests
"""

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

logger = logging.getLogger("scheduler")


class ScheduledTask:
    """
    Handle to a scheduled callback.

    cancel() is idempotent. Once cancelled the callback never runs again,
    including a run that was already due but not yet dispatched.
    """

    def __init__(self, callback: Callable[..., Any], args: tuple = (), interval: Optional[float] = None):
        self.callback = callback
        self.args = args
        self.interval = interval
        self._cancelled = False
        self._on_cancel: Optional[Callable[[], None]] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> bool:
        """Cancel the task. Returns False if it was already cancelled."""
        if self._cancelled:
            return False
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
            self._on_cancel = None
        return True

    def _run(self) -> None:
        if not self._cancelled:
            self.callback(*self.args)


class Scheduler(ABC):
    """Clock plus cancelable one-shot and repeating timers."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        """Run callback(*args) once, delay seconds from now."""

    @abstractmethod
    def call_every(self, interval: float, callback: Callable[[], Any]) -> ScheduledTask:
        """Run callback() every interval seconds, first run one interval from now."""


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop's timers."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        task = ScheduledTask(callback, args)
        handle = self.loop.call_later(max(delay, 0.0), task._run)
        task._on_cancel = handle.cancel
        return task

    def call_every(self, interval: float, callback: Callable[[], Any]) -> ScheduledTask:
        if interval <= 0:
            raise ValueError("interval must be positive")
        task = ScheduledTask(callback, interval=interval)
        self._arm(task, self.loop.time() + interval)
        return task

    def _arm(self, task: ScheduledTask, when: float) -> None:
        def fire() -> None:
            if task.cancelled:
                return
            # Re-arm first so a failing callback does not stop the cycle
            self._arm(task, when + task.interval)
            task._run()

        handle = self.loop.call_at(when, fire)
        task._on_cancel = handle.cancel


class ManualScheduler(Scheduler):
    """
    Scheduler with a virtual clock.

    Time only moves when advance() is called; due callbacks run in time
    order (ties in scheduling order) on the caller's stack.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(5.0, print, "expired")
        scheduler.advance(4.999)   # nothing
        scheduler.advance(0.002)   # prints "expired"
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._seq = itertools.count()
        self._queue: list[tuple[float, int, ScheduledTask]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledTask:
        task = ScheduledTask(callback, args)
        self._push(self._now + max(delay, 0.0), task)
        return task

    def call_every(self, interval: float, callback: Callable[[], Any]) -> ScheduledTask:
        if interval <= 0:
            raise ValueError("interval must be positive")
        task = ScheduledTask(callback, interval=interval)
        self._push(self._now + interval, task)
        return task

    def _push(self, when: float, task: ScheduledTask) -> None:
        heapq.heappush(self._queue, (when, next(self._seq), task))

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due.

        Returns:
            Number of callbacks run.
        """
        if seconds < 0:
            raise ValueError("cannot move time backwards")
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            self._now = when
            if task.repeating:
                self._push(when + task.interval, task)
            task._run()
            ran += 1
        self._now = target
        return ran

    def pending(self) -> int:
        """Number of scheduled, not cancelled runs."""
        return sum(1 for _, _, task in self._queue if not task.cancelled)
