"""Core shared data models.

This module defines the canonical Pydantic models used across the system for
entities (calendar rows), their absence intervals and the editable interval
payload. These types are treated as schema definitions and intentionally
prioritize structural clarity over minimal class size.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def utc_now() -> datetime:
    """Return the current UTC timestamp used for created/updated markers."""
    return datetime.now(timezone.utc)


def _coerce_day(value: Any) -> Any:
    # Accept full ISO datetimes ("2024-03-10T00:00:00.000Z") and keep the date part.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


# ---------------------------------------------------------------------------
# Absence categories
# ---------------------------------------------------------------------------


class AbsenceType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    BEREAVEMENT = "bereavement"
    OTHER = "other"


# ---------------------------------------------------------------------------
# Interval models
# ---------------------------------------------------------------------------


class IntervalFields(BaseModel):
    """
    Editable interval payload (create / update).

    Notes:
    - start_date and end_date are inclusive.
    - Both dates must fall within the same calendar year.
    """

    start_date: date = Field(..., description="Inclusive first day of the absence.")
    end_date: date = Field(..., description="Inclusive last day of the absence.")
    category: AbsenceType = Field(..., description="Absence category.")
    note: str | None = Field(default=None, description="Optional free-text annotation.")

    model_config = ConfigDict(extra="forbid")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_iso_day(cls, value: Any) -> Any:
        return _coerce_day(value)

    @field_validator("note", mode="before")
    @classmethod
    def _blank_note_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def validate_date_range(self) -> IntervalFields:
        """
        Enforce:
        - start_date <= end_date
        - start_date and end_date share one calendar year
        """
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        if self.start_date.year != self.end_date.year:
            raise ValueError("start_date and end_date must fall within the same calendar year")
        return self


class Interval(IntervalFields):
    """
    One absence of one entity.

    The interval is exclusively owned by its entity (entity_id). It is mutated
    in place on edit and removed on delete.
    """

    id: str = Field(..., min_length=1, description="Unique interval identifier.")
    entity_id: str = Field(..., min_length=1, description="Owning entity identifier.")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def intersects(self, range_start: date, range_end: date) -> bool:
        return range_start <= self.end_date and range_end >= self.start_date

    def fields(self) -> IntervalFields:
        return IntervalFields(
            start_date=self.start_date,
            end_date=self.end_date,
            category=self.category,
            note=self.note,
        )


# ---------------------------------------------------------------------------
# Entity model
# ---------------------------------------------------------------------------


class Entity(BaseModel):
    """
    A calendar row (e.g. an employee).

    Only the identity matters to the grid core; display attributes are carried
    for collaborators. Intervals are kept sorted by start date ascending.
    """

    id: str = Field(..., min_length=1)

    first_name: str = ""
    last_name: str = ""
    personnel_number: str | None = None

    intervals: list[Interval] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def sort_intervals(self) -> Entity:
        # list.sort is stable: ties keep creation order.
        self.intervals.sort(key=lambda interval: interval.start_date)
        return self

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def get_interval(self, interval_id: str) -> Interval | None:
        for interval in self.intervals:
            if interval.id == interval_id:
                return interval
        return None
