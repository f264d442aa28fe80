"""
Semantic test: pure pagination transitions.

Invariant:
idle -> loading_more -> idle is the only cycle; completions are clamped to
the request and to total_count; stale completions change nothing.
"""

from __future__ import annotations

import pytest

from absence_grid.core.domain.pagination import (
    PageRequest,
    PaginationState,
    begin_load,
    complete_load,
    fail_load,
    is_current,
    reset_state,
)
from absence_grid.core.domain.pagination_state_machine import (
    PHASE_IDLE,
    PHASE_LOADING_MORE,
    is_valid_transition,
)


def test_allowed_phase_transitions() -> None:
    assert is_valid_transition(PHASE_IDLE, PHASE_LOADING_MORE)
    assert is_valid_transition(PHASE_LOADING_MORE, PHASE_IDLE)
    assert is_valid_transition(PHASE_IDLE, PHASE_IDLE)
    assert not is_valid_transition(PHASE_LOADING_MORE, PHASE_LOADING_MORE)
    assert not is_valid_transition("unknown", PHASE_IDLE)


def test_begin_load_issues_bounded_request() -> None:
    state = PaginationState(loaded_count=90, total_count=100, page_size=20)

    loading, request = begin_load(state)

    assert request == PageRequest(offset=90, limit=10, generation=0)
    assert loading.is_loading_more
    assert loading.loaded_count == 90


def test_begin_load_is_noop_while_loading_or_exhausted() -> None:
    loading, _ = begin_load(PaginationState(total_count=100, page_size=20))
    assert begin_load(loading) == (loading, None)

    exhausted = PaginationState(loaded_count=100, total_count=100, page_size=20)
    assert begin_load(exhausted) == (exhausted, None)


def test_complete_load_clamps_returned_count() -> None:
    loading, request = begin_load(PaginationState(total_count=100, page_size=20))
    assert request is not None

    assert complete_load(loading, request, 50).loaded_count == 20
    assert complete_load(loading, request, -3).loaded_count == 0
    assert complete_load(loading, request, 7).phase == PHASE_IDLE


def test_stale_request_changes_nothing() -> None:
    loading, request = begin_load(PaginationState(total_count=100, page_size=20))
    assert request is not None
    fresh = reset_state(loading, 100)

    assert not is_current(fresh, request)
    assert complete_load(fresh, request, 20) is fresh
    assert fail_load(fresh, request) is fresh


def test_fail_load_returns_to_idle_without_progress() -> None:
    loading, request = begin_load(PaginationState(loaded_count=20, total_count=100, page_size=20))
    assert request is not None

    failed = fail_load(loading, request)

    assert failed.phase == PHASE_IDLE
    assert failed.loaded_count == 20


def test_reset_state_bumps_generation_and_keeps_page_size() -> None:
    state = PaginationState(loaded_count=40, total_count=100, page_size=20, generation=3)

    fresh = reset_state(state, 7)

    assert fresh == PaginationState(loaded_count=0, total_count=7, page_size=20, generation=4)
    assert fresh.has_more


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page_size": 0},
        {"total_count": -1},
        {"loaded_count": 5, "total_count": 4},
        {"loaded_count": -1, "total_count": 4},
    ],
)
def test_invalid_state_rejected(kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        PaginationState(**kwargs)
