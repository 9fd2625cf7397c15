"""Next-occurrence calculation per recurrence variant."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from .date_utils import (
    add_days,
    add_months,
    add_weeks,
    add_years,
    days_in_month,
    is_leap_year,
    normalize_to_day,
    weekday_index,
)
from .recurrence_models import CustomRule, DailyRule, MonthlyRule, WeeklyRule, YearlyRule

logger = logging.getLogger(__name__)


def can_produce(rule: Any) -> bool:
    """Check whether a rule carries enough information to schedule anything.

    Weekly without weekdays, Monthly without a day, Yearly without month and
    day, and Custom are valid rules that simply produce no dates.
    """
    if isinstance(rule, DailyRule):
        return True
    if isinstance(rule, WeeklyRule):
        return bool(rule.weekdays)
    if isinstance(rule, MonthlyRule):
        return rule.day_of_month is not None
    if isinstance(rule, YearlyRule):
        return rule.month_of_year is not None and rule.day_of_month is not None
    return False


def matches_rule(rule: Any, day: date) -> bool:
    """Check whether `day` satisfies the variant's weekday constraint.

    Only Weekly constrains the seed date; other variants start on the anchor as-is.
    """
    if isinstance(rule, WeeklyRule):
        return weekday_index(day) in rule.weekdays
    return True


def next_occurrence(rule: Any, current: Any) -> Optional[date]:
    """Compute the next candidate strictly after `current`.

    Args:
        rule: Typed recurrence rule
        current: Date of a known (real or hypothetical) occurrence

    Returns:
        Next candidate date, or None if the variant cannot produce one
    """
    day = normalize_to_day(current)

    if isinstance(rule, DailyRule):
        return add_days(day, rule.interval)
    if isinstance(rule, WeeklyRule):
        return _next_weekly(rule, day)
    if isinstance(rule, MonthlyRule):
        return _next_monthly(rule, day)
    if isinstance(rule, YearlyRule):
        return _next_yearly(rule, day)
    if isinstance(rule, CustomRule):
        return None
    raise TypeError(f"Unsupported recurrence rule: {rule!r}")


def _next_weekly(rule: WeeklyRule, day: date) -> Optional[date]:
    if not rule.weekdays:
        return None

    # Scan forward from the day after `day`. Weeks are counted in whole
    # 7-day blocks from `day`; blocks not divisible by the interval are skipped.
    for offset in range(1, 7 * rule.interval + 1):
        candidate = add_days(day, offset)
        weeks_elapsed = offset // 7
        if weeks_elapsed % rule.interval == 0 and weekday_index(candidate) in rule.weekdays:
            return candidate

    fallback = add_weeks(day, rule.interval)
    logger.warning(
        "Weekly scan found no matching day after %s (interval=%d, weekdays=%s); using %s",
        day,
        rule.interval,
        sorted(rule.weekdays),
        fallback,
    )
    return fallback


def _next_monthly(rule: MonthlyRule, day: date) -> Optional[date]:
    if rule.day_of_month is None:
        return None

    target = add_months(day, rule.interval)
    clamped = min(rule.day_of_month, days_in_month(target.year, target.month))
    return target.replace(day=clamped)


def _next_yearly(rule: YearlyRule, day: date) -> Optional[date]:
    if rule.month_of_year is None or rule.day_of_month is None:
        return None

    target_year = add_years(day, rule.interval).year
    if rule.month_of_year == 2 and rule.day_of_month == 29 and not is_leap_year(target_year):
        return date(target_year, 2, 28)

    clamped = min(rule.day_of_month, days_in_month(target_year, rule.month_of_year))
    return date(target_year, rule.month_of_year, clamped)
