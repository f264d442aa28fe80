"""Virtual-scrolling window calculation.

Pure, stateless functions mapping a scroll position to the contiguous index
range worth materializing on one axis. Rows and date columns use the same
algorithm with axis-specific defaults; the grid coordinator combines both
windows into a rectangle.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_ROW_OVERSCAN: int = 5
DEFAULT_COLUMN_OVERSCAN: int = 10


@dataclass(frozen=True, slots=True)
class AxisWindow:
    """Contiguous index range ``[start_index, end_index]`` over one axis.

    The range is empty when ``end_index < start_index``; callers must check
    ``is_empty`` (or iterate ``indices()``) rather than assume a cell exists.
    """

    start_index: int
    end_index: int
    total_extent: float

    @property
    def is_empty(self) -> bool:
        return self.end_index < self.start_index

    @property
    def count(self) -> int:
        return max(0, self.end_index - self.start_index + 1)

    def indices(self) -> range:
        return range(self.start_index, self.end_index + 1)

    def contains(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index


def compute_window(
    scroll_offset: float,
    viewport_extent: float,
    cell_extent: float,
    total_cells: int,
    overscan: int,
) -> AxisWindow:
    """Return the visible index range for one axis.

    start = max(0, floor(offset / cell) - overscan)
    end   = min(total - 1, ceil((offset + viewport) / cell) + overscan)

    Offsets beyond the total extent still clamp ``end_index`` to the last
    cell; ``start_index`` is capped at ``end_index + 1`` so the window is then
    empty rather than inverted.
    """
    if cell_extent <= 0:
        raise ValueError(f"cell_extent must be > 0, got {cell_extent}")
    if viewport_extent < 0:
        raise ValueError(f"viewport_extent must be >= 0, got {viewport_extent}")
    if total_cells < 0:
        raise ValueError(f"total_cells must be >= 0, got {total_cells}")
    if overscan < 0:
        raise ValueError(f"overscan must be >= 0, got {overscan}")

    # Negative offsets (overscroll bounce) read as the top of the axis.
    scroll_offset = max(0.0, scroll_offset)

    start_index = max(0, math.floor(scroll_offset / cell_extent) - overscan)
    end_index = min(
        total_cells - 1,
        math.ceil((scroll_offset + viewport_extent) / cell_extent) + overscan,
    )
    start_index = min(start_index, end_index + 1)

    return AxisWindow(
        start_index=start_index,
        end_index=end_index,
        total_extent=total_cells * cell_extent,
    )


def compute_vertical_window(
    scroll_top: float,
    viewport_height: float,
    row_height: float,
    total_rows: int,
    overscan: int = DEFAULT_ROW_OVERSCAN,
) -> AxisWindow:
    """Row window (vertical axis)."""
    return compute_window(scroll_top, viewport_height, row_height, total_rows, overscan)


def compute_horizontal_window(
    scroll_left: float,
    viewport_width: float,
    cell_width: float,
    total_dates: int,
    overscan: int = DEFAULT_COLUMN_OVERSCAN,
) -> AxisWindow:
    """Date-column window (horizontal axis)."""
    return compute_window(scroll_left, viewport_width, cell_width, total_dates, overscan)


def clamp_scroll_offset(target: float, viewport_extent: float, total_extent: float) -> float:
    """Clamp a requested scroll offset to ``[0, max(0, total - viewport)]``."""
    max_offset = max(0.0, total_extent - viewport_extent)
    return max(0.0, min(max_offset, target))


def scroll_offset_for_index(index: int, cell_extent: float) -> float:
    """Offset that puts cell ``index`` at the leading edge of the viewport."""
    return max(0, index) * cell_extent
