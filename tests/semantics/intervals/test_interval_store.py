"""
Semantic test: id-addressed interval CRUD over resident rows.

Invariant:
Every successful write emits exactly one IntervalChangedEvent; failed
writes emit nothing and change nothing.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from absence_grid.core.domain.errors import NotFoundError, OverlapError
from absence_grid.core.domain.interval_store import IntervalStore
from absence_grid.core.domain.types import AbsenceType, Entity, IntervalFields
from absence_grid.core.events.event_bus import EventBus
from absence_grid.core.events.events import IntervalChangedEvent


class _ListSink:
    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)


def _fields(start: date, end: date, category: AbsenceType = AbsenceType.VACATION) -> IntervalFields:
    return IntervalFields(start_date=start, end_date=end, category=category)


def _store() -> tuple[IntervalStore, list[Entity], _ListSink]:
    rows = [Entity(id="emp-1"), Entity(id="emp-2")]
    sink = _ListSink()
    ids = iter(f"abs-{n}" for n in range(1, 100))
    store = IntervalStore(lambda: rows, EventBus(sinks=[sink]), id_factory=lambda: next(ids))
    return store, rows, sink


def test_create_assigns_identity_and_emits_event() -> None:
    store, rows, sink = _store()

    created = store.create("emp-2", _fields(date(2024, 3, 10), date(2024, 3, 15)))

    assert created.id == "abs-1"
    assert created.entity_id == "emp-2"
    assert created.created_at <= created.updated_at
    assert rows[1].intervals == [created]
    assert sink.events == [
        IntervalChangedEvent(
            ts_ns=sink.events[0].ts_ns,
            action="created",
            entity_id="emp-2",
            interval_id="abs-1",
        )
    ]


def test_create_for_unknown_entity_raises_not_found() -> None:
    store, _, sink = _store()

    with pytest.raises(NotFoundError):
        store.create("emp-404", _fields(date(2024, 1, 1), date(2024, 1, 2)))
    assert sink.events == []


def test_overlapping_create_is_surfaced_and_not_applied() -> None:
    store, rows, sink = _store()
    store.create("emp-1", _fields(date(2024, 3, 10), date(2024, 3, 15)))

    with pytest.raises(OverlapError):
        store.create("emp-1", _fields(date(2024, 3, 12), date(2024, 3, 18)))

    assert len(rows[0].intervals) == 1
    assert len(sink.events) == 1


def test_update_finds_interval_across_entities() -> None:
    store, _, sink = _store()
    created = store.create("emp-2", _fields(date(2024, 5, 1), date(2024, 5, 3)))

    updated = store.update(
        created.id,
        IntervalFields(
            start_date=date(2024, 5, 2),
            end_date=date(2024, 5, 9),
            category=AbsenceType.SICK,
            note="flu",
        ),
    )

    assert updated is created
    assert (updated.start_date, updated.end_date, updated.note) == (
        date(2024, 5, 2),
        date(2024, 5, 9),
        "flu",
    )
    assert [e.action for e in sink.events] == ["created", "updated"]


def test_update_unknown_interval_raises_not_found() -> None:
    store, _, _ = _store()

    with pytest.raises(NotFoundError):
        store.update("abs-missing", _fields(date(2024, 1, 1), date(2024, 1, 1)))


def test_delete_is_non_throwing() -> None:
    store, rows, sink = _store()
    created = store.create("emp-1", _fields(date(2024, 2, 1), date(2024, 2, 1)))

    assert store.delete(created.id) is True
    assert store.delete(created.id) is False
    assert rows[0].intervals == []
    assert [e.action for e in sink.events] == ["created", "deleted"]


def test_lookups() -> None:
    store, _, _ = _store()
    created = store.create("emp-1", _fields(date(2024, 2, 1), date(2024, 2, 5)))

    assert store.get_entity("emp-1").id == "emp-1"
    assert store.get_entity("nope") is None
    assert store.entity_intervals("emp-1") == [created]
    assert store.entity_intervals("nope") == []
    assert store.covering("emp-1", date(2024, 2, 3)) is created
    assert store.covering("emp-2", date(2024, 2, 3)) is None
    assert store.covering("nope", date(2024, 2, 3)) is None
    assert store.intervals_in_range(date(2024, 2, 5), date(2024, 2, 10)) == [created]
