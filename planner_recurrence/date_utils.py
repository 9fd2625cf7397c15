"""Zone-less calendar date helpers used by the recurrence engine."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Any

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta


def normalize_to_day(value: Any) -> date:
    """Reduce a date, datetime or ISO-8601 string to its calendar date.

    Time-of-day and any timezone offset are dropped; the calendar date is
    taken as written, never converted between zones.

    Raises:
        ValueError: If the value is not a date-like object or parsable string
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        try:
            return isoparse(text).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid calendar date: {value!r}") from e
    raise ValueError(f"Unsupported date value: {value!r}")


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def add_weeks(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of a shorter month."""
    return day + relativedelta(months=months)


def add_years(day: date, years: int) -> date:
    """Add calendar years; Feb 29 lands on Feb 28 in a non-leap year."""
    return day + relativedelta(years=years)


def weekday_index(day: date) -> int:
    """Day of week with Sunday as 0 and Saturday as 6."""
    return day.isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end precedes start)."""
    return (end - start).days


def format_day_key(day: date) -> str:
    """Zero-padded YYYY-MM-DD key used in occurrence identifiers."""
    return day.isoformat()
