"""
Semantic test: calendar helpers.

Invariant:
The column axis holds every day of the year in order; weeks run Sunday to
Saturday; ranges are inclusive.
"""

from __future__ import annotations

from datetime import date

from absence_grid.core.domain.dates import (
    date_range,
    dates_in_year,
    day_of_year_index,
    days_between,
    is_weekend,
    week_end,
    week_start,
)


def test_year_lengths() -> None:
    assert len(dates_in_year(2023)) == 365
    assert len(dates_in_year(2024)) == 366
    assert dates_in_year(2024)[0] == date(2024, 1, 1)
    assert dates_in_year(2024)[-1] == date(2024, 12, 31)


def test_date_range_is_inclusive() -> None:
    assert date_range(date(2024, 2, 28), date(2024, 3, 1)) == [
        date(2024, 2, 28),
        date(2024, 2, 29),
        date(2024, 3, 1),
    ]
    assert date_range(date(2024, 3, 1), date(2024, 3, 1)) == [date(2024, 3, 1)]
    assert date_range(date(2024, 3, 2), date(2024, 3, 1)) == []


def test_weekend_detection() -> None:
    # 2024-01-06 is a Saturday.
    assert is_weekend(date(2024, 1, 6))
    assert is_weekend(date(2024, 1, 7))
    assert not is_weekend(date(2024, 1, 8))
    assert not is_weekend(date(2024, 1, 5))


def test_week_bounds_sunday_to_saturday() -> None:
    wednesday = date(2024, 1, 10)

    assert week_start(wednesday) == date(2024, 1, 7)
    assert week_end(wednesday) == date(2024, 1, 13)
    assert week_start(date(2024, 1, 7)) == date(2024, 1, 7)
    assert week_end(date(2024, 1, 13)) == date(2024, 1, 13)


def test_day_distances() -> None:
    assert days_between(date(2024, 3, 10), date(2024, 3, 15)) == 5
    assert days_between(date(2024, 3, 15), date(2024, 3, 10)) == 5
    assert day_of_year_index(date(2024, 1, 1)) == 0
    assert day_of_year_index(date(2024, 12, 31)) == 365
    assert day_of_year_index(date(2023, 12, 31)) == 364
