"""Scheduler implementations for the rate limiters."""

from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable

from absence_grid.core.ports.scheduler import TimerHandle


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    The loop is resolved lazily so the scheduler may be constructed outside a
    running loop and used once the loop is up.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        return self._get_loop().time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        return self._get_loop().call_later(max(0.0, delay_ms) / 1000.0, callback, *args)


@dataclass(slots=True)
class ManualTimer:
    """Timer registered on a ManualScheduler."""

    due_ms: float
    callback: Callable[..., Any]
    args: tuple[Any, ...]
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-clock scheduler.

    Time only moves when advance() is called. Due timers fire in due-time
    order (FIFO on ties) and observe the clock at their due time.
    """

    def __init__(self, start_ms: float = 0.0) -> None:
        self._now_ms = float(start_ms)
        self._timers: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self._now_ms

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(
            due_ms=self._now_ms + max(0.0, delay_ms),
            callback=callback,
            args=args,
        )
        heapq.heappush(self._timers, (timer.due_ms, next(self._seq), timer))
        return timer

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, timer in self._timers if not timer.cancelled)

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward and run every timer that became due.

        Returns the number of callbacks executed.
        """
        if delta_ms < 0:
            raise ValueError("delta_ms must be >= 0")

        target = self._now_ms + delta_ms
        fired = 0

        while self._timers and self._timers[0][0] <= target:
            due_ms, _, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now_ms = due_ms
            timer.callback(*timer.args)
            fired += 1

        self._now_ms = target
        return fired
