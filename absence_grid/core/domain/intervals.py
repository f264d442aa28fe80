"""Interval model: overlap detection, per-date lookup and range queries.

All functions operate on one entity's interval list (or a sequence of
entities for range queries). Range semantics are inclusive on both ends:
an interval ending on day X and another starting on day X overlap.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from absence_grid.core.domain.errors import NotFoundError, OverlapError
from absence_grid.core.domain.types import Interval, IntervalFields, utc_now

if TYPE_CHECKING:
    from datetime import date

    from absence_grid.core.domain.types import Entity


def _sort(entity: Entity) -> None:
    # Stable: ties keep their relative (creation) order.
    entity.intervals.sort(key=lambda interval: interval.start_date)


def find_covering(entity: Entity, day: date) -> Interval | None:
    """Return the interval of ``entity`` that inclusively contains ``day``.

    Intervals are sorted by start date, so the scan stops at the first interval
    starting after ``day``. If the non-overlap invariant were ever violated the
    first match in sorted order is returned.
    """
    for interval in entity.intervals:
        if interval.start_date > day:
            return None
        if day <= interval.end_date:
            return interval
    return None


def find_overlapping(
    candidate_start: date,
    candidate_end: date,
    entity: Entity,
    exclude_interval_id: str | None = None,
) -> Interval | None:
    """Return the first sibling interval intersecting the candidate range."""
    for interval in entity.intervals:
        if exclude_interval_id is not None and interval.id == exclude_interval_id:
            continue
        if candidate_start <= interval.end_date and candidate_end >= interval.start_date:
            return interval
    return None


def overlaps(
    candidate_start: date,
    candidate_end: date,
    entity: Entity,
    exclude_interval_id: str | None = None,
) -> bool:
    """Return True if ``[candidate_start, candidate_end]`` intersects any interval
    of ``entity`` other than ``exclude_interval_id``."""
    return (
        find_overlapping(candidate_start, candidate_end, entity, exclude_interval_id)
        is not None
    )


def insert_interval(entity: Entity, interval: Interval) -> Interval:
    """Insert ``interval`` into ``entity`` keeping the list sorted.

    Raises:
        ValueError: the interval is owned by another entity.
        OverlapError: the interval intersects an existing sibling.
    """
    if interval.entity_id != entity.id:
        raise ValueError(
            f"interval {interval.id} belongs to entity {interval.entity_id}, not {entity.id}"
        )

    conflicting = find_overlapping(interval.start_date, interval.end_date, entity)
    if conflicting is not None:
        raise OverlapError(
            entity_id=entity.id,
            start_date=interval.start_date,
            end_date=interval.end_date,
            conflicting=conflicting,
        )

    entity.intervals.append(interval)
    _sort(entity)
    return interval


def update_interval(entity: Entity, interval_id: str, fields: IntervalFields) -> Interval:
    """Apply ``fields`` to an existing interval in place.

    The interval is re-validated against its siblings excluding itself, so
    saving an interval with unchanged dates always succeeds. On failure the
    interval is left untouched.

    Raises:
        NotFoundError: no interval with ``interval_id`` exists on the entity.
        OverlapError: the new range intersects a sibling.
    """
    target = entity.get_interval(interval_id)
    if target is None:
        raise NotFoundError("interval", interval_id)

    conflicting = find_overlapping(
        fields.start_date,
        fields.end_date,
        entity,
        exclude_interval_id=interval_id,
    )
    if conflicting is not None:
        raise OverlapError(
            entity_id=entity.id,
            start_date=fields.start_date,
            end_date=fields.end_date,
            conflicting=conflicting,
        )

    target.start_date = fields.start_date
    target.end_date = fields.end_date
    target.category = fields.category
    target.note = fields.note
    target.updated_at = utc_now()

    _sort(entity)
    return target


def remove_interval(entity: Entity, interval_id: str) -> bool:
    """Remove an interval by id. Returns False if it does not exist."""
    for index, interval in enumerate(entity.intervals):
        if interval.id == interval_id:
            del entity.intervals[index]
            return True
    return False


def query_range(entities: Iterable[Entity], range_start: date, range_end: date) -> list[Interval]:
    """Return all intervals intersecting ``[range_start, range_end]``.

    Ordering is entity order, then interval (start date) order.
    """
    out: list[Interval] = []
    for entity in entities:
        for interval in entity.intervals:
            if interval.intersects(range_start, range_end):
                out.append(interval)
    return out
