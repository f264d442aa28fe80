"""Timer scheduling protocol used by the rate limiters.

Rate limiters never touch a concrete event loop. They are driven through this
port so any host (asyncio loop, virtual clock, UI toolkit timer) can run them.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None:
        """Cancel the scheduled callback. Cancelling twice is a no-op."""


class Scheduler(Protocol):
    def now_ms(self) -> float:
        """Return a monotonic timestamp in milliseconds."""

    def call_later(self, delay_ms: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run ``callback(*args)`` once after ``delay_ms`` milliseconds."""
