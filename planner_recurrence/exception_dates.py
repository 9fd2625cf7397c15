"""Exception-date filtering for recurrence expansion."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .date_utils import normalize_to_day


def is_excepted(candidate: Any, exception_dates: Iterable[Any]) -> bool:
    """Check whether a candidate falls on an excluded calendar date.

    Both sides are reduced to their calendar day first, so a datetime
    exception at 10:00 still suppresses a midnight candidate on that day.
    """
    day = normalize_to_day(candidate)
    return any(normalize_to_day(item) == day for item in exception_dates)
