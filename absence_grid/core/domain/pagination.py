"""Incremental row loading.

The pagination state is an explicit immutable value. Pure transition
functions take a state and return the next one; PaginationController owns
the current state plus the resident rows and drives the data provider.

Invariants:
- at most one page request is in flight (idle/loading_more guard);
- loaded_count only grows (except on reset) and never exceeds total_count;
- a completion issued against an older generation (before a reset) is ignored.
"""

# pylint: disable=too-many-instance-attributes
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Sequence

from absence_grid.core.domain.errors import ProviderError
from absence_grid.core.domain.pagination_state_machine import (
    PHASE_IDLE,
    PHASE_LOADING_MORE,
    is_valid_transition,
)
from absence_grid.core.events.events import (
    PageLoadedEvent,
    PageLoadFailedEvent,
    PageRequestedEvent,
    PaginationResetEvent,
    PaginationTransitionEvent,
    StalePageDiscardedEvent,
)

if TYPE_CHECKING:
    from absence_grid.core.domain.types import Entity
    from absence_grid.core.events.event_bus import EventBus
    from absence_grid.core.ports.data_provider import DataProvider

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# State and transitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PaginationState:
    loaded_count: int = 0
    total_count: int = 0
    page_size: int = 50
    phase: str = PHASE_IDLE
    # Bumped on every reset; in-flight requests remember the value they were issued under.
    generation: int = 0

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {self.page_size}")
        if self.total_count < 0:
            raise ValueError(f"total_count must be >= 0, got {self.total_count}")
        if not 0 <= self.loaded_count <= self.total_count:
            raise ValueError(
                f"loaded_count must be within [0, {self.total_count}], got {self.loaded_count}"
            )

    @property
    def has_more(self) -> bool:
        return self.loaded_count < self.total_count

    @property
    def is_loading_more(self) -> bool:
        return self.phase == PHASE_LOADING_MORE


@dataclass(frozen=True, slots=True)
class PageRequest:
    """One page fetch: rows ``[offset, offset + limit)`` under ``generation``."""

    offset: int
    limit: int
    generation: int


def begin_load(state: PaginationState) -> tuple[PaginationState, PageRequest | None]:
    """idle -> loading_more, unless nothing is left or a load is in flight."""
    if not state.has_more or state.is_loading_more:
        return state, None

    limit = min(state.page_size, state.total_count - state.loaded_count)
    request = PageRequest(offset=state.loaded_count, limit=limit, generation=state.generation)
    return replace(state, phase=PHASE_LOADING_MORE), request


def is_current(state: PaginationState, request: PageRequest) -> bool:
    return request.generation == state.generation and state.is_loading_more


def complete_load(
    state: PaginationState,
    request: PageRequest,
    returned_count: int,
) -> PaginationState:
    """loading_more -> idle, advancing loaded_count by what the provider returned.

    Stale completions (issued before a reset) leave the state unchanged.
    """
    if not is_current(state, request):
        return state

    returned = max(0, min(returned_count, request.limit))
    return replace(
        state,
        loaded_count=min(state.total_count, state.loaded_count + returned),
        phase=PHASE_IDLE,
    )


def fail_load(state: PaginationState, request: PageRequest) -> PaginationState:
    """loading_more -> idle without advancing."""
    if not is_current(state, request):
        return state
    return replace(state, phase=PHASE_IDLE)


def reset_state(state: PaginationState, new_total_count: int) -> PaginationState:
    """Start over against a (possibly different) data source."""
    return PaginationState(
        loaded_count=0,
        total_count=new_total_count,
        page_size=state.page_size,
        phase=PHASE_IDLE,
        generation=state.generation + 1,
    )


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class PaginationController:
    """Owns the pagination state and the resident rows.

    All methods run on one event loop. The only suspension point is the
    provider fetch.
    """

    def __init__(self, provider: DataProvider, event_bus: EventBus, *, page_size: int = 50) -> None:
        self._provider = provider
        self._event_bus = event_bus

        self._state = PaginationState(page_size=page_size)
        self._rows: list[Entity] = []
        self._background: set[asyncio.Task[list[Entity] | None]] = set()

    # ---- Read-only views ----
    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def rows(self) -> Sequence[Entity]:
        return tuple(self._rows)

    @property
    def loaded_count(self) -> int:
        return self._state.loaded_count

    @property
    def has_more(self) -> bool:
        return self._state.has_more

    @property
    def is_loading_more(self) -> bool:
        return self._state.is_loading_more

    def row(self, index: int) -> Entity:
        return self._rows[index]

    def resident_rows(self) -> list[Entity]:
        """Live (mutable) resident rows, for interval editing."""
        return self._rows

    # ---- Transitions ----
    def _transition(self, next_state: PaginationState) -> None:
        prev = self._state
        # Observability only: report, never raise.
        if prev.generation == next_state.generation and not is_valid_transition(
            prev.phase, next_state.phase
        ):
            self._event_bus.emit(
                PaginationTransitionEvent(
                    ts_ns=time.time_ns(),
                    generation=next_state.generation,
                    prev_phase=prev.phase,
                    next_phase=next_state.phase,
                )
            )
        self._state = next_state

    def reset(self, new_total_count: int) -> None:
        """Clear resident rows and start over with ``new_total_count`` rows available.

        A load still in flight will be discarded when it completes.
        """
        self._transition(reset_state(self._state, new_total_count))
        self._rows.clear()

        LOGGER.info(
            "pagination reset",
            extra={"total_count": new_total_count, "generation": self._state.generation},
        )
        self._event_bus.emit(
            PaginationResetEvent(
                ts_ns=time.time_ns(),
                generation=self._state.generation,
                total_count=new_total_count,
            )
        )

    async def initialize(self) -> list[Entity] | None:
        """Reset against the provider's current total and load the first page."""
        self.reset(self._provider.total_count())
        return await self.request_more()

    def _begin(self) -> PageRequest | None:
        next_state, request = begin_load(self._state)
        if request is None:
            return None

        self._transition(next_state)
        self._event_bus.emit(
            PageRequestedEvent(
                ts_ns=time.time_ns(),
                generation=request.generation,
                offset=request.offset,
                limit=request.limit,
            )
        )
        return request

    async def _complete(self, request: PageRequest) -> list[Entity] | None:
        try:
            page = await self._provider.fetch_page(request.offset, request.limit)
        except asyncio.CancelledError:
            if is_current(self._state, request):
                self._transition(fail_load(self._state, request))
            raise
        except Exception as exc:
            if is_current(self._state, request):
                self._transition(fail_load(self._state, request))

            LOGGER.warning(
                "page fetch failed",
                extra={"offset": request.offset, "limit": request.limit},
                exc_info=True,
            )
            self._event_bus.emit(
                PageLoadFailedEvent(
                    ts_ns=time.time_ns(),
                    generation=request.generation,
                    offset=request.offset,
                    limit=request.limit,
                    reason=repr(exc),
                )
            )
            raise ProviderError(
                offset=request.offset,
                limit=request.limit,
                reason=repr(exc),
            ) from exc

        if not is_current(self._state, request):
            LOGGER.info(
                "stale page discarded",
                extra={"offset": request.offset, "generation": request.generation},
            )
            self._event_bus.emit(
                StalePageDiscardedEvent(
                    ts_ns=time.time_ns(),
                    request_generation=request.generation,
                    current_generation=self._state.generation,
                    offset=request.offset,
                )
            )
            return None

        rows = list(page)[: request.limit]
        if not rows:
            LOGGER.warning(
                "provider returned an empty page",
                extra={"offset": request.offset, "limit": request.limit},
            )

        self._transition(complete_load(self._state, request, len(rows)))
        self._rows.extend(rows)

        self._event_bus.emit(
            PageLoadedEvent(
                ts_ns=time.time_ns(),
                generation=request.generation,
                offset=request.offset,
                returned=len(rows),
                loaded_count=self._state.loaded_count,
                total_count=self._state.total_count,
            )
        )
        return rows

    async def request_more(self) -> list[Entity] | None:
        """Load the next page.

        Returns the appended rows, or None when the call was a no-op (nothing
        left, a load already in flight) or the page went stale.

        Raises:
            ProviderError: the provider failed. The state is back to idle and
                loaded_count is unchanged; the caller may retry.
        """
        request = self._begin()
        if request is None:
            return None
        return await self._complete(request)

    def request_more_in_background(self) -> asyncio.Task[list[Entity] | None] | None:
        """Start loading the next page without awaiting it.

        The guard runs synchronously, so a second call before the first load
        finishes returns None. Must be called from a running event loop.
        """
        # Resolve the loop first: without one the state must stay idle.
        loop = asyncio.get_running_loop()

        request = self._begin()
        if request is None:
            return None

        task = loop.create_task(self._complete(request))
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task[list[Entity] | None]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and not isinstance(exc, ProviderError):
            LOGGER.error("background page load crashed", exc_info=exc)

    async def wait_idle(self) -> None:
        """Wait for every background load started so far (tests, shutdown)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
