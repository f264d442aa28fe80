"""
Domain event models.

These events represent immutable facts observed while loading rows and
editing intervals. They are consumed by loggers, recorders, and metrics sinks.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PageRequestedEvent:
    ts_ns: int
    generation: int

    offset: int
    limit: int


@dataclass(slots=True)
class PageLoadedEvent:
    ts_ns: int
    generation: int

    offset: int
    returned: int
    loaded_count: int
    total_count: int


@dataclass(slots=True)
class PageLoadFailedEvent:
    ts_ns: int
    generation: int

    offset: int
    limit: int
    reason: str


@dataclass(slots=True)
class StalePageDiscardedEvent:
    ts_ns: int

    request_generation: int
    current_generation: int
    offset: int


@dataclass(slots=True)
class PaginationResetEvent:
    ts_ns: int
    generation: int

    total_count: int


@dataclass(slots=True)
class PaginationTransitionEvent:
    """Emitted when an unexpected phase transition is observed."""

    ts_ns: int
    generation: int

    prev_phase: str
    next_phase: str


@dataclass(slots=True)
class IntervalChangedEvent:
    ts_ns: int

    action: str  # created | updated | deleted
    entity_id: str
    interval_id: str
