# mimi/scheduler.py — timers for feedback delays, countdowns and spawns
import asyncio
import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Set

logger = logging.getLogger(__name__)


class Timer:
    """Handle returned by a scheduler. `cancel()` is idempotent."""

    def __init__(self):
        self.cancelled = False
        self.done = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.done)


class Scheduler:
    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        raise NotImplementedError

    def call_every(self, interval: float, callback: Callable[[], None]) -> Timer:
        """Repeat `callback` every `interval` seconds until the timer is cancelled."""
        handle = _RepeatingTimer()

        def fire():
            if handle.cancelled:
                return
            callback()
            if not handle.cancelled:
                handle.inner = self.call_later(interval, fire)

        handle.inner = self.call_later(interval, fire)
        return handle


class _RepeatingTimer(Timer):
    inner: Optional[Timer] = None

    def cancel(self) -> None:
        super().cancel()
        if self.inner is not None:
            self.inner.cancel()


class AsyncioScheduler(Scheduler):
    """Runs callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        handle = _AsyncioTimer()

        def fire():
            handle.done = True
            callback()

        handle.inner = self.loop.call_later(delay, fire)
        return handle


class _AsyncioTimer(Timer):
    inner: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> None:
        super().cancel()
        if self.inner is not None:
            self.inner.cancel()


class ManualScheduler(Scheduler):
    """Virtual clock. Time only moves when `advance`/`advance_to` is called."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> Timer:
        handle = Timer()
        due = self._now + max(0.0, delay)
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, handle, _ in self._queue if handle.active)

    def advance(self, seconds: float) -> None:
        self.advance_to(self._now + seconds)

    def advance_to(self, target: float) -> None:
        # small epsilon so repeated float additions (0.1 * 10) still land on time
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            handle.done = True
            callback()
        self._now = max(self._now, target)


class WallClockScheduler(ManualScheduler):
    """Manual scheduler pinned to `time.monotonic()`; call `catch_up()` on every UI rerun."""

    def __init__(self):
        super().__init__(start=time.monotonic())

    def catch_up(self) -> None:
        self.advance_to(time.monotonic())


class TimerGroup:
    """All timers that belong to one round, so they can be cleared together."""

    def __init__(self, scheduler: Scheduler):
        self.scheduler = scheduler
        self._timers: Set[Timer] = set()

    def later(self, delay: float, callback: Callable[[], None]) -> Timer:
        def fire():
            self._timers.discard(handle)
            callback()

        handle = self.scheduler.call_later(delay, fire)
        self._timers.add(handle)
        return handle

    def every(self, interval: float, callback: Callable[[], None]) -> Timer:
        handle = self.scheduler.call_every(interval, callback)
        self._timers.add(handle)
        return handle

    def cancel_all(self) -> None:
        if self._timers:
            logger.debug("cancelling %d timers", len(self._timers))
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()

    def __len__(self) -> int:
        return sum(1 for t in self._timers if t.active)
