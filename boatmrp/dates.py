"""
Calendar-day helpers.

Every date that enters the engine is normalized to a timezone-naive
``datetime.date`` so that date arithmetic never mixes aware and naive
values.
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

DateLike = Union[date, datetime, str]


def to_civil_date(value: DateLike) -> date:
    """Normalize a date-like value to a calendar day.

    - ``date`` is returned as is
    - ``datetime`` (naive or aware) keeps its own calendar day; the time
      of day is dropped
    - strings must start with an ISO ``YYYY-MM-DD`` date; anything after
      it (a time, an offset) is ignored

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError as e:
            raise ValueError(f"Invalid date: {value!r}") from e
    raise ValueError(f"Invalid date: {value!r}")


def add_days(day: date, days: int) -> date:
    """Shift a date by a (possibly negative) number of days."""
    return day + timedelta(days=days)


def subtract_months(day: date, months: int) -> date:
    """Step back a number of calendar months.

    The day of month is clamped to the last day of the target month
    (March 31 minus one month is February 28/29).
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def months_back_available(day: date) -> int:
    """How many whole months subtract_months can step back from a date.

    January of year 1 is the earliest month a date can fall in.
    """
    return (day.year - 1) * 12 + (day.month - 1)


def first_of_month(day: date) -> date:
    """Return the first day of the date's month."""
    return day.replace(day=1)
