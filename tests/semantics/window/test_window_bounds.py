"""
Semantic tests: axis window calculation.

Invariant:
For all valid inputs, 0 <= start_index <= end_index + 1 and
end_index <= total_cells - 1. The calculation is a pure function.
"""

from __future__ import annotations

import itertools

import pytest

from absence_grid.core.window.window import (
    AxisWindow,
    clamp_scroll_offset,
    compute_horizontal_window,
    compute_vertical_window,
    compute_window,
    scroll_offset_for_index,
)


def test_row_window_applies_overscan_on_both_sides() -> None:
    window = compute_window(100, 400, 50, 100, 5)

    # floor(100 / 50) - 5 < 0, ceil(500 / 50) + 5 = 15
    assert window == AxisWindow(start_index=0, end_index=15, total_extent=5000)


def test_overscan_larger_than_offset_clamps_start_to_zero() -> None:
    window = compute_window(200, 200, 50, 50, 10)

    assert window.start_index == 0
    assert window.end_index == 18


def test_small_dataset_clamps_end_to_last_cell() -> None:
    window = compute_vertical_window(0, 400, 50, 5, overscan=2)

    assert window.start_index == 0
    assert window.end_index == 4
    assert window.total_extent == 250


def test_horizontal_window_deep_in_the_year() -> None:
    window = compute_horizontal_window(5000, 800, 40, 365, overscan=5)

    assert window.start_index == 120
    assert window.end_index == 150
    assert window.total_extent == 14600


def test_axis_defaults_differ_between_rows_and_columns() -> None:
    rows = compute_vertical_window(1000, 100, 50, 1000)
    columns = compute_horizontal_window(1000, 100, 50, 1000)

    assert rows.start_index == 20 - 5
    assert columns.start_index == 20 - 10


def test_zero_cells_yields_empty_window() -> None:
    window = compute_window(0, 400, 50, 0, 5)

    assert window.is_empty
    assert window.end_index < window.start_index
    assert list(window.indices()) == []
    assert window.count == 0
    assert window.total_extent == 0


def test_offset_beyond_extent_clamps_end_and_never_inverts() -> None:
    window = compute_window(100_000, 400, 50, 10, 5)

    assert window.end_index == 9
    assert window.start_index == window.end_index + 1
    assert window.is_empty


def test_negative_offset_reads_as_top() -> None:
    assert compute_window(-300, 400, 50, 100, 5) == compute_window(0, 400, 50, 100, 5)


def test_identical_arguments_give_identical_results() -> None:
    first = compute_window(1234.5, 640, 32, 365, 10)
    second = compute_window(1234.5, 640, 32, 365, 10)

    assert first == second


def test_bounds_hold_across_parameter_sweep() -> None:
    offsets = [0, 1, 49, 50, 333.3, 4999, 5000, 20_000]
    viewports = [0, 1, 400, 10_000]
    cells = [1, 17, 50]
    totals = [0, 1, 7, 100]
    overscans = [0, 3, 10]

    for offset, viewport, cell, total, overscan in itertools.product(
        offsets, viewports, cells, totals, overscans
    ):
        window = compute_window(offset, viewport, cell, total, overscan)
        assert 0 <= window.start_index <= window.end_index + 1
        assert window.end_index <= total - 1
        if total == 0:
            assert window.is_empty


@pytest.mark.parametrize(
    "args",
    [
        (0, 400, 0, 10, 5),
        (0, 400, -1, 10, 5),
        (0, -1, 50, 10, 5),
        (0, 400, 50, -1, 5),
        (0, 400, 50, 10, -1),
    ],
)
def test_invalid_arguments_are_rejected(args: tuple[float, float, float, int, int]) -> None:
    with pytest.raises(ValueError):
        compute_window(*args)


def test_scroll_offset_clamping() -> None:
    assert clamp_scroll_offset(-10, 400, 5000) == 0.0
    assert clamp_scroll_offset(250, 400, 5000) == 250
    assert clamp_scroll_offset(9000, 400, 5000) == 4600
    # Content shorter than the viewport cannot scroll.
    assert clamp_scroll_offset(100, 400, 300) == 0.0


def test_scroll_offset_for_index() -> None:
    assert scroll_offset_for_index(0, 40) == 0
    assert scroll_offset_for_index(31, 40) == 1240
    assert scroll_offset_for_index(-3, 40) == 0
