"""Boundary between persisted planner records and typed recurrence models.

Stored pattern documents use one flat record for every variant:

    {"type": "monthly", "interval": 1, "daysOfWeek": [], "dayOfMonth": 31,
     "monthOfYear": None,
     "endCondition": {"type": "occurrences", "endDate": None, "maxOccurrences": 5},
     "exceptions": ["2026-03-31"], "instanceModifications": {}}

Fields that do not apply to the record's variant are dropped here, and
malformed values are rejected with the engine's own exception types.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import InvalidPlannerItemError, InvalidQueryWindowError, InvalidRecurrenceRuleError
from .recurrence_models import (
    CustomRule,
    DailyRule,
    EndsAfterCount,
    EndsOnDate,
    MonthlyRule,
    NeverEnds,
    PlannerItem,
    QueryWindow,
    RecurrenceRule,
    RecurrenceVariant,
    WeeklyRule,
    YearlyRule,
)

logger = logging.getLogger(__name__)

_RULE_ADAPTER: TypeAdapter[Any] = TypeAdapter(RecurrenceRule)
_RULE_TYPES = (DailyRule, WeeklyRule, MonthlyRule, YearlyRule, CustomRule)
_VARIANTS = {variant.value for variant in RecurrenceVariant}

_ANCHOR_KEYS = ("schedule_anchor_date", "scheduledDate")
_RULE_KEYS = ("recurrence_rule", "recurrence")


def _end_condition_from_record(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {"kind": "never"}
    if isinstance(raw, (NeverEnds, EndsOnDate, EndsAfterCount)):
        return raw.model_dump()
    if not isinstance(raw, Mapping):
        raise InvalidRecurrenceRuleError(f"endCondition must be a mapping, got {type(raw).__name__}")

    end_type = raw.get("type", "never")
    if end_type == "never":
        return {"kind": "never"}
    if end_type == "date":
        # A date condition without a date never triggers.
        if raw.get("endDate") is None:
            logger.debug("endCondition of type date has no endDate; treating as never")
            return {"kind": "never"}
        return {"kind": "until_date", "until": raw["endDate"]}
    if end_type == "occurrences":
        if not raw.get("maxOccurrences"):
            logger.debug("endCondition of type occurrences has no maxOccurrences; treating as never")
            return {"kind": "never"}
        return {"kind": "after_count", "count": raw["maxOccurrences"]}
    raise InvalidRecurrenceRuleError(f"Unknown endCondition type: {end_type!r}")


def _format_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or 'value'}: {error['msg']}"
        for error in exc.errors()
    )


def rule_from_record(record: Any) -> Any:
    """Build a typed recurrence rule from a stored record.

    Accepts the flat stored shape (keyed by ``type``), the typed shape
    (keyed by ``variant``), or an already-built rule.

    Raises:
        InvalidRecurrenceRuleError: If the record cannot form a valid rule
    """
    if isinstance(record, _RULE_TYPES):
        return record
    if not isinstance(record, Mapping):
        raise InvalidRecurrenceRuleError(f"Recurrence record must be a mapping, got {type(record).__name__}")

    if "variant" in record:
        payload = dict(record)
    else:
        variant = record.get("type")
        if variant not in _VARIANTS:
            raise InvalidRecurrenceRuleError(f"Unknown recurrence type: {variant!r}")

        interval = record.get("interval")
        payload = {
            "variant": variant,
            "interval": 1 if interval is None else interval,
            "end_condition": _end_condition_from_record(record.get("endCondition")),
            "exception_dates": record.get("exceptions") or [],
            "instance_modifications": record.get("instanceModifications") or {},
        }
        if variant == RecurrenceVariant.WEEKLY.value:
            payload["weekdays"] = record.get("daysOfWeek") or []
        elif variant == RecurrenceVariant.MONTHLY.value:
            payload["day_of_month"] = record.get("dayOfMonth")
        elif variant == RecurrenceVariant.YEARLY.value:
            payload["month_of_year"] = record.get("monthOfYear")
            payload["day_of_month"] = record.get("dayOfMonth")

    try:
        return _RULE_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise InvalidRecurrenceRuleError(
            f"Invalid {payload.get('variant')} recurrence: {_format_validation_error(e)}"
        ) from e


def rule_to_record(rule: Any) -> dict[str, Any]:
    """Flatten a typed rule back into the stored record shape."""
    end = rule.end_condition
    if isinstance(end, EndsOnDate):
        end_record = {"type": "date", "endDate": end.until.isoformat(), "maxOccurrences": None}
    elif isinstance(end, EndsAfterCount):
        end_record = {"type": "occurrences", "endDate": None, "maxOccurrences": end.count}
    else:
        end_record = {"type": "never", "endDate": None, "maxOccurrences": None}

    return {
        "type": rule.variant,
        "interval": rule.interval,
        "daysOfWeek": sorted(rule.weekdays) if isinstance(rule, WeeklyRule) else [],
        "dayOfMonth": rule.day_of_month if isinstance(rule, (MonthlyRule, YearlyRule)) else None,
        "monthOfYear": rule.month_of_year if isinstance(rule, YearlyRule) else None,
        "endCondition": end_record,
        "exceptions": [day.isoformat() for day in sorted(rule.exception_dates)],
        "instanceModifications": {
            day.isoformat(): modification.model_dump(exclude_none=True)
            for day, modification in rule.instance_modifications
        },
    }


def item_from_record(record: Any) -> PlannerItem:
    """Build a PlannerItem from a stored task or event record.

    The anchor is read from ``schedule_anchor_date`` or ``scheduledDate``,
    falling back to an event's ``startTime`` (which stays a display field).
    The rule is read from ``recurrence_rule`` or ``recurrence``. Every other
    key is carried as a display field.

    Raises:
        InvalidPlannerItemError: If the id or anchor date is invalid
        InvalidRecurrenceRuleError: If the embedded rule is invalid
    """
    if isinstance(record, PlannerItem):
        return record
    if not isinstance(record, Mapping):
        raise InvalidPlannerItemError(f"Item record must be a mapping, got {type(record).__name__}")

    data = dict(record)
    anchor: Optional[Any] = None
    for key in _ANCHOR_KEYS:
        value = data.pop(key, None)
        if anchor is None and value is not None:
            anchor = value
    if anchor is None and data.get("startTime") is not None:
        anchor = data["startTime"]

    raw_rule: Optional[Any] = None
    for key in _RULE_KEYS:
        value = data.pop(key, None)
        if raw_rule is None and value is not None:
            raw_rule = value
    rule = rule_from_record(raw_rule) if raw_rule is not None else None

    data.update({"schedule_anchor_date": anchor, "recurrence_rule": rule})
    try:
        return PlannerItem.model_validate(data)
    except ValidationError as e:
        raise InvalidPlannerItemError(
            f"Invalid planner item {record.get('id')!r}: {_format_validation_error(e)}"
        ) from e


def window_from_bounds(start: Any, end: Any) -> QueryWindow:
    """Build an inclusive query window, rejecting start > end.

    Raises:
        InvalidQueryWindowError: If either bound is unparsable or start > end
    """
    try:
        return QueryWindow(start=start, end=end)
    except ValidationError as e:
        raise InvalidQueryWindowError(f"Invalid query window: {_format_validation_error(e)}") from e


def coerce_item(item: Any) -> PlannerItem:
    return item_from_record(item)


def coerce_window(window: Any) -> QueryWindow:
    if isinstance(window, QueryWindow):
        return window
    if isinstance(window, date):
        return window_from_bounds(window, window)
    try:
        start, end = window
    except (TypeError, ValueError) as e:
        raise InvalidQueryWindowError(f"Query window must be a (start, end) pair, got {window!r}") from e
    return window_from_bounds(start, end)
