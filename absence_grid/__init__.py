"""Public API for the absence_grid package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from absence_grid.core.domain.errors import (
    AbsenceGridError,
    NotFoundError,
    OverlapError,
    ProviderError,
)

# ----------------------------------------------------------------------
# Interval Model
# ----------------------------------------------------------------------
from absence_grid.core.domain.interval_store import IntervalStore
from absence_grid.core.domain.intervals import (
    find_covering,
    insert_interval,
    overlaps,
    query_range,
    remove_interval,
    update_interval,
)

# ----------------------------------------------------------------------
# Pagination
# ----------------------------------------------------------------------
from absence_grid.core.domain.pagination import PaginationController, PaginationState
from absence_grid.core.domain.types import AbsenceType, Entity, Interval, IntervalFields
from absence_grid.core.ports.data_provider import DataProvider

# ----------------------------------------------------------------------
# Rate limiting
# ----------------------------------------------------------------------
from absence_grid.core.scheduling.rate_limiters import Debounce, Throttle
from absence_grid.core.scheduling.schedulers import AsyncioScheduler, ManualScheduler

# ----------------------------------------------------------------------
# Window calculation
# ----------------------------------------------------------------------
from absence_grid.core.window.window import (
    AxisWindow,
    compute_horizontal_window,
    compute_vertical_window,
    compute_window,
)

# ----------------------------------------------------------------------
# Grid API
# ----------------------------------------------------------------------
from absence_grid.grid.coordinator import Cell, GridCoordinator, GridView, Viewport
from absence_grid.grid.grid_config import GridConfig

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Domain types
    "AbsenceType",
    "Entity",
    "Interval",
    "IntervalFields",

    # Errors
    "AbsenceGridError",
    "OverlapError",
    "NotFoundError",
    "ProviderError",

    # Interval model
    "find_covering",
    "overlaps",
    "insert_interval",
    "update_interval",
    "remove_interval",
    "query_range",
    "IntervalStore",

    # Window calculation
    "AxisWindow",
    "compute_window",
    "compute_vertical_window",
    "compute_horizontal_window",

    # Rate limiting
    "Debounce",
    "Throttle",
    "AsyncioScheduler",
    "ManualScheduler",

    # Pagination
    "DataProvider",
    "PaginationController",
    "PaginationState",

    # Grid
    "GridConfig",
    "GridCoordinator",
    "GridView",
    "Viewport",
    "Cell",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("absence-grid")
except PackageNotFoundError:
    __version__ = "0.0.0"
