"""
Cancelable scheduled-callback services.

The scheduler never touches wall-clock timers directly; it asks a TimerService
for a callback after a delay. Tests and the Dash demo drive a ManualTimerService
by advancing its virtual clock, asyncio hosts use AsyncioTimerService.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerService(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimerHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimerService:
    """
    Virtual-time timer service.

    Nothing runs until the clock is advanced. Callbacks fire in due-time order,
    ties in scheduling order. Callbacks scheduled while advancing run in the
    same advance() call if they become due inside the window.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self._queue: List[Tuple[float, int, ManualTimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimerHandle:
        handle = ManualTimerHandle(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every callback that became due. Returns the number run."""
        if seconds < 0:
            raise ValueError("Cannot move a timer clock backwards")
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = max(self.now, due)
            handle.callback()
            ran += 1
        self.now = target
        return ran

    def advance_to(self, when: float) -> int:
        return self.advance(max(0.0, when - self.now))

    def run_pending(self) -> int:
        return self.advance(0.0)


class AsyncioTimerService:
    """TimerService backed by an asyncio event loop (call_later handles are cancelable)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)
