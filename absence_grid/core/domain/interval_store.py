"""Id-addressed interval CRUD over the resident entities.

The store does not own entities. It reads them from a supplier (typically the
pagination controller's resident rows) and applies the interval model
functions to them, emitting one IntervalChangedEvent per successful write.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING, Callable, Iterable

from absence_grid.core.domain.errors import NotFoundError
from absence_grid.core.domain.intervals import (
    find_covering,
    insert_interval,
    query_range,
    remove_interval,
    update_interval,
)
from absence_grid.core.domain.types import Interval, IntervalFields
from absence_grid.core.events.events import IntervalChangedEvent

if TYPE_CHECKING:
    from datetime import date

    from absence_grid.core.domain.types import Entity
    from absence_grid.core.events.event_bus import EventBus

LOGGER = logging.getLogger(__name__)


def new_interval_id() -> str:
    return f"absence_{uuid.uuid4().hex}"


class IntervalStore:
    """Interval create / update / delete keyed by entity and interval ids."""

    def __init__(
        self,
        entities: Callable[[], Iterable[Entity]],
        event_bus: EventBus,
        *,
        id_factory: Callable[[], str] = new_interval_id,
    ) -> None:
        self._entities = entities
        self._event_bus = event_bus
        self._id_factory = id_factory

    # ---- Lookup ----
    def get_entity(self, entity_id: str) -> Entity | None:
        for entity in self._entities():
            if entity.id == entity_id:
                return entity
        return None

    def _require_entity(self, entity_id: str) -> Entity:
        entity = self.get_entity(entity_id)
        if entity is None:
            raise NotFoundError("entity", entity_id)
        return entity

    def _owner_of(self, interval_id: str) -> Entity | None:
        for entity in self._entities():
            if entity.get_interval(interval_id) is not None:
                return entity
        return None

    def entity_intervals(self, entity_id: str) -> list[Interval]:
        """Return the sorted intervals of an entity (empty if not resident)."""
        entity = self.get_entity(entity_id)
        return [] if entity is None else list(entity.intervals)

    def covering(self, entity_id: str, day: date) -> Interval | None:
        """Return the interval covering ``day`` for an entity, if any."""
        entity = self.get_entity(entity_id)
        if entity is None:
            return None
        return find_covering(entity, day)

    def intervals_in_range(self, range_start: date, range_end: date) -> list[Interval]:
        return query_range(self._entities(), range_start, range_end)

    # ---- Mutations ----
    def create(self, entity_id: str, fields: IntervalFields) -> Interval:
        """Create a new interval for an entity.

        Raises:
            NotFoundError: the entity is not resident.
            OverlapError: the range intersects an existing interval.
        """
        entity = self._require_entity(entity_id)

        interval = Interval(
            id=self._id_factory(),
            entity_id=entity.id,
            start_date=fields.start_date,
            end_date=fields.end_date,
            category=fields.category,
            note=fields.note,
        )
        insert_interval(entity, interval)

        self._emit("created", entity.id, interval.id)
        return interval

    def update(self, interval_id: str, fields: IntervalFields) -> Interval:
        """Update an interval wherever it lives.

        Raises:
            NotFoundError: no resident entity owns ``interval_id``.
            OverlapError: the new range intersects a sibling.
        """
        entity = self._owner_of(interval_id)
        if entity is None:
            raise NotFoundError("interval", interval_id)

        interval = update_interval(entity, interval_id, fields)

        self._emit("updated", entity.id, interval.id)
        return interval

    def delete(self, interval_id: str) -> bool:
        """Delete an interval. Returns False if no resident entity owns it."""
        entity = self._owner_of(interval_id)
        if entity is None:
            LOGGER.debug("delete of unknown interval %s ignored", interval_id)
            return False

        removed = remove_interval(entity, interval_id)
        if removed:
            self._emit("deleted", entity.id, interval_id)
        return removed

    def _emit(self, action: str, entity_id: str, interval_id: str) -> None:
        self._event_bus.emit(
            IntervalChangedEvent(
                ts_ns=time.time_ns(),
                action=action,
                entity_id=entity_id,
                interval_id=interval_id,
            )
        )
