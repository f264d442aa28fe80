"""Data provider protocol for paged entity loading.

This module defines the boundary between the grid core and whatever supplies
rows (in-memory fixtures, a remote API, generated data). The core assumes
nothing about the implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from absence_grid.core.domain.types import Entity


class DataProvider(Protocol):
    """Opaque paged source of entities."""

    async def fetch_page(self, offset: int, limit: int) -> Sequence[Entity]:
        """Return up to ``limit`` entities starting at ``offset``.

        Any exception raised here is treated as a provider failure.
        """

    def total_count(self) -> int:
        """Return the total number of entities available."""
