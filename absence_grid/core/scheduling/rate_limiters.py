"""Debounce and throttle primitives.

Both gate how often a caller-supplied action runs under a burst of calls
(typically scroll events). Neither alters the result of the gated action,
only how often it is allowed to run. Timers are owned per instance and must
be released with close() when the consumer is torn down.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from absence_grid.core.ports.scheduler import Scheduler, TimerHandle

LOGGER = logging.getLogger(__name__)


class Debounce:
    """Trailing-edge debounce.

    Every call cancels the pending run and schedules a new one ``delay_ms``
    later with the latest arguments. Only the last call of a burst executes,
    exactly once, after the input stream has been quiet for ``delay_ms``.
    """

    def __init__(self, action: Callable[..., Any], delay_ms: float, scheduler: Scheduler) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

        self._action = action
        self._delay_ms = float(delay_ms)
        self._scheduler = scheduler

        self._handle: TimerHandle | None = None
        self._pending_args: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        if self._closed:
            LOGGER.debug("call on closed debounce ignored")
            return

        self.cancel()
        self._pending_args = (args, kwargs)
        self._handle = self._scheduler.call_later(self._delay_ms, self._fire)

    def _fire(self) -> None:
        pending = self._pending_args
        self._handle = None
        self._pending_args = None
        if pending is None or self._closed:
            return
        args, kwargs = pending
        self._action(*args, **kwargs)

    def cancel(self) -> None:
        """Drop the pending run, if any."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_args = None

    def flush(self) -> None:
        """Run the pending call now instead of waiting for the delay."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def close(self) -> None:
        """Cancel the pending run and refuse further calls."""
        self.cancel()
        self._closed = True


class Throttle:
    """Leading-edge throttle.

    The first call in a quiet period executes immediately. Calls within
    ``interval_ms`` of the last execution are dropped (not deferred). Once the
    interval has elapsed the next call executes and restarts the window.
    """

    def __init__(self, action: Callable[..., Any], interval_ms: float, scheduler: Scheduler) -> None:
        if interval_ms < 0:
            raise ValueError("interval_ms must be >= 0")

        self._action = action
        self._interval_ms = float(interval_ms)
        self._scheduler = scheduler

        self._last_run_ms: float | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self, *args: Any, **kwargs: Any) -> bool:
        """Run the action unless throttled. Returns True if it ran."""
        if self._closed:
            LOGGER.debug("call on closed throttle ignored")
            return False

        now = self._scheduler.now_ms()
        if self._last_run_ms is not None and now - self._last_run_ms < self._interval_ms:
            return False

        self._last_run_ms = now
        self._action(*args, **kwargs)
        return True

    def reset(self) -> None:
        """Forget the last execution so the next call runs immediately."""
        self._last_run_ms = None

    def close(self) -> None:
        self._closed = True
