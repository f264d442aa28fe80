"""Recoverable error kinds raised by the grid core.

None of these errors is fatal. Each one is raised only after internal state
has been left consistent (no partial interval write, no stuck pagination
phase), so callers may surface it to the user and retry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date

    from absence_grid.core.domain.types import Interval


class AbsenceGridError(Exception):
    """Base class for all grid core errors."""


class OverlapError(AbsenceGridError):
    """A candidate interval would intersect a sibling interval of the same entity."""

    def __init__(
        self,
        *,
        entity_id: str,
        start_date: date,
        end_date: date,
        conflicting: Interval,
    ) -> None:
        self.entity_id = entity_id
        self.start_date = start_date
        self.end_date = end_date
        self.conflicting = conflicting
        super().__init__(
            f"interval {start_date.isoformat()}..{end_date.isoformat()} overlaps "
            f"interval {conflicting.id} "
            f"({conflicting.start_date.isoformat()}..{conflicting.end_date.isoformat()}) "
            f"of entity {entity_id}"
        )


class NotFoundError(AbsenceGridError):
    """A referenced entity or interval id does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")


class ProviderError(AbsenceGridError):
    """The data provider failed to deliver a page."""

    def __init__(self, *, offset: int, limit: int, reason: str) -> None:
        self.offset = offset
        self.limit = limit
        self.reason = reason
        super().__init__(f"page fetch failed (offset={offset}, limit={limit}): {reason}")
