"""Grid coordinator.

Composes the window calculator, the pagination controller and the interval
model: for a scroll position it returns the visible rectangle of resolved
cells and requests more rows when the visible range nears the loaded
boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Iterator

from absence_grid.core.domain.dates import dates_in_year, day_of_year_index, is_weekend
from absence_grid.core.domain.intervals import find_covering
from absence_grid.core.scheduling.rate_limiters import Debounce, Throttle
from absence_grid.core.scheduling.schedulers import AsyncioScheduler
from absence_grid.core.window.window import (
    AxisWindow,
    clamp_scroll_offset,
    compute_horizontal_window,
    compute_vertical_window,
    scroll_offset_for_index,
)

if TYPE_CHECKING:
    from datetime import date

    from absence_grid.core.domain.pagination import PaginationController
    from absence_grid.core.domain.types import Interval
    from absence_grid.core.ports.scheduler import Scheduler
    from absence_grid.grid.grid_config import GridConfig

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Viewport:
    """Scroll offsets plus the visible size of the grid body."""

    scroll_top: float
    scroll_left: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class Cell:
    """Derived (row, date) pair. Recomputed on demand, never stored."""

    row_index: int
    column_index: int
    entity_id: str
    day: date
    is_weekend: bool
    interval: Interval | None

    @property
    def is_absent(self) -> bool:
        return self.interval is not None


@dataclass(frozen=True, slots=True)
class GridView:
    """Visible rectangle with resolved cells (row-major)."""

    row_window: AxisWindow
    column_window: AxisWindow
    cells: tuple[tuple[Cell, ...], ...]

    loaded_count: int
    total_count: int
    prefetch_requested: bool

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def absent_cells(self) -> list[Cell]:
        return [cell for cell in self.iter_cells() if cell.is_absent]


class GridCoordinator:
    """Turns scroll positions into GridViews.

    compute_grid() may start a background page load, so it must run on the
    event loop that owns the pagination controller whenever rows remain to
    be loaded.
    """

    def __init__(
        self,
        pagination: PaginationController,
        config: GridConfig,
        *,
        scheduler: Scheduler | None = None,
        listener: Callable[[GridView], None] | None = None,
    ) -> None:
        self._pagination = pagination
        self._config = config
        self._listener = listener

        self._dates: list[date] = dates_in_year(config.year)
        self._last_view: GridView | None = None

        scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._throttle = Throttle(self._publish, config.throttle_ms, scheduler)
        self._debounce = Debounce(self._publish, config.debounce_ms, scheduler)

    @property
    def dates(self) -> list[date]:
        return list(self._dates)

    @property
    def column_count(self) -> int:
        return len(self._dates)

    @property
    def last_view(self) -> GridView | None:
        return self._last_view

    # ------------------------------------------------------------------
    # Grid computation
    # ------------------------------------------------------------------

    def compute_grid(self, viewport: Viewport) -> GridView:
        cfg = self._config
        loaded_count = self._pagination.loaded_count

        scroll_top = clamp_scroll_offset(
            viewport.scroll_top, viewport.height, loaded_count * cfg.row_height
        )
        scroll_left = clamp_scroll_offset(
            viewport.scroll_left, viewport.width, self.column_count * cfg.cell_width
        )

        raw_rows = compute_vertical_window(
            scroll_top, viewport.height, cfg.row_height, loaded_count, cfg.row_overscan
        )
        columns = compute_horizontal_window(
            scroll_left, viewport.width, cfg.cell_width, self.column_count, cfg.column_overscan
        )

        prefetch_requested = self._maybe_prefetch(raw_rows, loaded_count)

        # Never hand out rows that are not resident yet.
        rows = AxisWindow(
            start_index=raw_rows.start_index,
            end_index=min(raw_rows.end_index, loaded_count - 1),
            total_extent=raw_rows.total_extent,
        )

        cells = tuple(self._resolve_row(row_index, columns) for row_index in rows.indices())

        return GridView(
            row_window=rows,
            column_window=columns,
            cells=cells,
            loaded_count=loaded_count,
            total_count=self._pagination.state.total_count,
            prefetch_requested=prefetch_requested,
        )

    def _maybe_prefetch(self, rows: AxisWindow, loaded_count: int) -> bool:
        if not self._pagination.has_more or self._pagination.is_loading_more:
            return False

        margin = self._config.effective_prefetch_margin
        if rows.end_index < loaded_count - 1 - margin:
            return False

        task = self._pagination.request_more_in_background()
        if task is not None:
            LOGGER.debug(
                "prefetch triggered",
                extra={"end_index": rows.end_index, "loaded_count": loaded_count},
            )
        return task is not None

    def _resolve_row(self, row_index: int, columns: AxisWindow) -> tuple[Cell, ...]:
        entity = self._pagination.row(row_index)
        out: list[Cell] = []
        for column_index in columns.indices():
            day = self._dates[column_index]
            out.append(
                Cell(
                    row_index=row_index,
                    column_index=column_index,
                    entity_id=entity.id,
                    day=day,
                    is_weekend=is_weekend(day),
                    interval=find_covering(entity, day),
                )
            )
        return tuple(out)

    # ------------------------------------------------------------------
    # Scroll handling
    # ------------------------------------------------------------------

    def on_scroll(self, viewport: Viewport) -> None:
        """Feed a raw scroll/resize event.

        The throttle publishes immediately at most once per throttle window;
        the debounce publishes the final position once scrolling settles.
        """
        self._throttle(viewport)
        self._debounce(viewport)

    def _publish(self, viewport: Viewport) -> None:
        view = self.compute_grid(viewport)
        self._last_view = view
        if self._listener is not None:
            self._listener(view)

    def scroll_left_for(self, day: date, viewport_width: float) -> float:
        """Horizontal offset bringing ``day``'s column to the leading edge."""
        if day.year != self._config.year:
            raise ValueError(f"{day.isoformat()} is outside grid year {self._config.year}")
        target = scroll_offset_for_index(day_of_year_index(day), self._config.cell_width)
        return clamp_scroll_offset(
            target, viewport_width, self.column_count * self._config.cell_width
        )

    def close(self) -> None:
        """Release scroll timers. Pending settle updates are dropped."""
        self._throttle.close()
        self._debounce.close()
