"""
timers.py — Cancelable timers on an explicitly advanced clock.

Nothing here sleeps or spawns threads. The owner of the loop feeds the
current time in milliseconds to TimerService.advance(); every timer that
has come due fires in deadline order, one at a time, before advance()
returns. The pygame controller feeds pygame.time.get_ticks(); tests feed
a virtual clock.

Classes:
    TimerHandle   — one scheduled callback, one-shot or recurring
    TimerService  — the timer queue
    TickScheduler — owns the single recurring simulation tick
    EffectTimer   — owns the single one-shot effect expiry
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class TimerHandle:
    """A scheduled callback. cancel() is safe to call at any time."""

    def __init__(self, deadline: int, callback: Callable[[], None], interval: int | None):
        self.deadline = deadline
        self.callback = callback
        self.interval = interval
        self.cancelled = False
        self.fired = False

    @property
    def recurring(self) -> bool:
        return self.interval is not None

    @property
    def active(self) -> bool:
        return not self.cancelled and not (self.fired and not self.recurring)

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self):
        kind = f"every {self.interval}ms" if self.recurring else "once"
        return f"TimerHandle(deadline={self.deadline}, {kind}, active={self.active})"


class TimerService:
    """
    Min-heap of pending timers keyed by (deadline, insertion order).

    With coalesce=True a recurring timer that falls a whole interval
    behind (a stalled frame) fires once and is re-anchored to the
    current time instead of replaying every missed period in one burst.
    One-shot timers always fire.
    """

    def __init__(self, now: int = 0, coalesce: bool = False):
        self._now = now
        self.coalesce = coalesce
        self._queue: list[tuple[int, int, TimerHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> int:
        return self._now

    def call_later(self, delay: int, callback: Callable[[], None]) -> TimerHandle:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        handle = TimerHandle(self._now + delay, callback, None)
        self._push(handle)
        return handle

    def call_every(self, interval: int, callback: Callable[[], None]) -> TimerHandle:
        """First call fires one interval from now."""
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        handle = TimerHandle(self._now + interval, callback, interval)
        self._push(handle)
        return handle

    def cancel(self, handle: TimerHandle | None) -> None:
        if handle is not None:
            handle.cancel()

    def advance(self, now: int) -> int:
        """
        Move the clock to `now`, firing everything due on the way.
        The clock reads each timer's deadline while its callback runs, so
        timers scheduled from inside a callback are anchored correctly.
        Returns the number of callbacks fired.
        """
        if now < self._now:
            logger.debug("clock moved backwards (%d -> %d); ignoring", self._now, now)
            return 0

        fired = 0
        while self._queue and self._queue[0][0] <= now:
            deadline, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = deadline
            handle.fired = True
            handle.callback()
            fired += 1
            # the callback may have cancelled its own handle
            if handle.recurring and not handle.cancelled:
                handle.deadline = deadline + handle.interval
                if self.coalesce and handle.deadline <= now:
                    logger.debug("timer fell behind by %dms; skipping missed periods", now - deadline)
                    handle.deadline = now + handle.interval
                self._push(handle)
        self._now = now
        return fired

    def pending(self) -> list[TimerHandle]:
        return [h for _, _, h in sorted(self._queue) if not h.cancelled]

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (handle.deadline, next(self._seq), handle))


class TickScheduler:
    """
    The recurring simulation tick. Holds at most one recurring handle:
    start() always cancels the previous one first.
    """

    def __init__(self, timers: TimerService):
        self.timers = timers
        self._handle: TimerHandle | None = None
        self.interval: int | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self, interval: int, callback: Callable[[], None]) -> TimerHandle:
        self.stop()
        self.interval = interval
        self._handle = self.timers.call_every(interval, callback)
        logger.debug("tick scheduler started at %dms", interval)
        return self._handle

    def restart(self, interval: int) -> None:
        """Restart with the current callback at a new interval."""
        if self._handle is None:
            raise RuntimeError("tick scheduler was never started")
        self.start(interval, self._handle.callback)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            logger.debug("tick scheduler stopped")


class EffectTimer:
    """One-shot expiry for the active food effect."""

    def __init__(self, timers: TimerService):
        self.timers = timers
        self._handle: TimerHandle | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None and self._handle.active

    @property
    def deadline(self) -> int | None:
        return self._handle.deadline if self.active else None

    def arm(self, delay: int, callback: Callable[[], None]) -> TimerHandle:
        self.cancel()
        self._handle = self.timers.call_later(delay, callback)
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
