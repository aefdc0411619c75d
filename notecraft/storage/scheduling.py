"""Deferred execution used to debounce storage writes."""

from __future__ import annotations

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Runs a callback once after a delay."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule ``callback`` after ``delay`` seconds and return its handle."""


class AsyncioScheduler(Scheduler):
    """Schedules on an asyncio event loop, the running one by default."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(Scheduler):
    """Fake clock: callbacks only run when :meth:`advance` passes their due time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, _ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            self.now = due
            if not handle.cancelled:
                callback()
        self.now = target


class Debouncer:
    """Trailing-edge debounce: only the last scheduled callback runs.

    At most one timer is outstanding; scheduling again cancels it first.
    """

    def __init__(self, scheduler: Scheduler, delay: float) -> None:
        self.scheduler = scheduler
        self.delay = delay
        self._handle: Optional[TimerHandle] = None
        self._callback: Optional[Callable[[], None]] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        self.cancel()
        self._callback = callback
        self._handle = self.scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None

    def flush(self) -> None:
        """Run the pending callback now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def _fire(self) -> None:
        callback = self._callback
        self._handle = None
        self._callback = None
        if callback is not None:
            callback()


__all__ = ["TimerHandle", "Scheduler", "AsyncioScheduler", "ManualScheduler", "Debouncer"]
