"""Calendar helpers for the date-column axis."""

from __future__ import annotations

from datetime import date, timedelta

# date.weekday(): Monday == 0 ... Sunday == 6
_WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})


def dates_in_year(year: int) -> list[date]:
    """Return every day of ``year`` (365 or 366 columns)."""
    return date_range(date(year, 1, 1), date(year, 12, 31))


def date_range(start: date, end: date) -> list[date]:
    """Return all days from ``start`` to ``end`` inclusive (empty if start > end)."""
    span = (end - start).days
    return [start + timedelta(days=offset) for offset in range(span + 1)]


def is_weekend(day: date) -> bool:
    return day.weekday() in _WEEKEND_DAYS


def week_start(day: date) -> date:
    """Return the Sunday starting the week containing ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_end(day: date) -> date:
    """Return the Saturday ending the week containing ``day``."""
    return week_start(day) + timedelta(days=6)


def days_between(first: date, second: date) -> int:
    """Absolute number of days between two dates."""
    return abs((second - first).days)


def day_of_year_index(day: date) -> int:
    """Zero-based column index of ``day`` within its own year."""
    return (day - date(day.year, 1, 1)).days
