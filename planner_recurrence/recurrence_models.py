"""Data models for recurrence expansion - typed rules, windows and occurrences."""

import copy
from datetime import date
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from .date_utils import format_day_key, normalize_to_day


class RecurrenceVariant(str, Enum):
    """Repeat period of a recurrence rule."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


def _normalize_optional_day(value: Any) -> Any:
    if value is None:
        return None
    return normalize_to_day(value)


# End conditions


class NeverEnds(BaseModel):
    """Recurrence continues indefinitely."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["never"] = "never"


class EndsOnDate(BaseModel):
    """Recurrence stops after the given calendar date (inclusive)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["until_date"] = "until_date"
    until: date = Field(..., description="Last calendar date that may still be emitted")

    @field_validator("until", mode="before")
    @classmethod
    def _normalize_until(cls, value: Any) -> date:
        return normalize_to_day(value)


class EndsAfterCount(BaseModel):
    """Recurrence stops once `count` occurrences have been emitted."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["after_count"] = "after_count"
    count: int = Field(..., ge=1, description="Maximum number of emitted occurrences")


EndCondition = Annotated[
    Union[NeverEnds, EndsOnDate, EndsAfterCount],
    Field(discriminator="kind"),
]


class InstanceModification(BaseModel):
    """Per-date overrides applied to a single generated occurrence."""

    model_config = ConfigDict(frozen=True)

    status: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    def overrides(self) -> dict[str, str]:
        """Return only the override values that are set and non-empty."""
        return {
            name: value
            for name, value in (
                ("status", self.status),
                ("title", self.title),
                ("description", self.description),
            )
            if value
        }


# Recurrence rules


class _RuleBase(BaseModel):
    """Fields shared by every rule variant."""

    model_config = ConfigDict(frozen=True)

    interval: int = Field(default=1, ge=1, description="Repeat every N periods")
    end_condition: EndCondition = Field(default_factory=NeverEnds)
    exception_dates: frozenset[date] = Field(
        default_factory=frozenset, description="Calendar dates excluded from expansion"
    )
    # (date, override) pairs sorted by date; a tuple keeps the rule hashable
    instance_modifications: tuple[tuple[date, InstanceModification], ...] = Field(
        default=(), description="Per-date display overrides"
    )

    @field_validator("exception_dates", mode="before")
    @classmethod
    def _normalize_exception_dates(cls, value: Any) -> frozenset[date]:
        if value is None:
            return frozenset()
        return frozenset(normalize_to_day(item) for item in value)

    @field_validator("instance_modifications", mode="before")
    @classmethod
    def _normalize_modifications(cls, value: Any) -> tuple[tuple[date, Any], ...]:
        """Accept a date-keyed mapping or (date, override) pairs."""
        if value is None:
            return ()
        by_day = {normalize_to_day(key): mod for key, mod in dict(value).items()}
        return tuple(sorted(by_day.items(), key=lambda pair: pair[0]))

    def modification_for(self, day: date) -> Optional[InstanceModification]:
        for modified_day, modification in self.instance_modifications:
            if modified_day == day:
                return modification
        return None


class DailyRule(_RuleBase):
    variant: Literal["daily"] = "daily"


class WeeklyRule(_RuleBase):
    """Every N weeks on the listed weekdays (0=Sunday ... 6=Saturday)."""

    variant: Literal["weekly"] = "weekly"
    weekdays: frozenset[int] = Field(default_factory=frozenset)

    @field_validator("weekdays")
    @classmethod
    def _check_weekdays(cls, value: frozenset[int]) -> frozenset[int]:
        invalid = sorted(day for day in value if not 0 <= day <= 6)
        if invalid:
            raise ValueError(f"Weekday indices must be within 0-6, got {invalid}")
        return value


class MonthlyRule(_RuleBase):
    """Every N months on `day_of_month`, clamped to short months."""

    variant: Literal["monthly"] = "monthly"
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)


class YearlyRule(_RuleBase):
    """Every N years on `month_of_year`/`day_of_month`."""

    variant: Literal["yearly"] = "yearly"
    month_of_year: Optional[int] = Field(default=None, ge=1, le=12)
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)


class CustomRule(_RuleBase):
    """Recognized variant that never produces occurrences."""

    variant: Literal["custom"] = "custom"


RecurrenceRule = Annotated[
    Union[DailyRule, WeeklyRule, MonthlyRule, YearlyRule, CustomRule],
    Field(discriminator="variant"),
]


# Inputs and outputs of the generator


class PlannerItem(BaseModel):
    """Parent task or event. Any extra fields are display fields copied to instances."""

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., min_length=1, description="Identifier of the parent item")
    schedule_anchor_date: Optional[date] = Field(
        default=None, description="Date the schedule is defined relative to"
    )
    recurrence_rule: Optional[RecurrenceRule] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("schedule_anchor_date", mode="before")
    @classmethod
    def _normalize_anchor(cls, value: Any) -> Optional[date]:
        return _normalize_optional_day(value)

    @property
    def display_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class QueryWindow(BaseModel):
    """Inclusive calendar date range [start, end]."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @field_validator("start", "end", mode="before")
    @classmethod
    def _normalize_bounds(cls, value: Any) -> date:
        return normalize_to_day(value)

    @model_validator(mode="after")
    def _check_order(self) -> "QueryWindow":
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")
        return self

    @classmethod
    def single_day(cls, day: Any) -> "QueryWindow":
        normalized = normalize_to_day(day)
        return cls(start=normalized, end=normalized)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class VirtualOccurrence(BaseModel):
    """One generated, never-persisted repetition of a parent item."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    occurrence_id: str
    occurrence_date: date
    display_fields: dict[str, Any] = Field(default_factory=dict)
    # Instances never carry their own recurrence.
    recurrence_rule: None = None
    is_recurring_instance: Literal[True] = True

    @field_serializer("occurrence_date")
    def serialize_occurrence_date(self, value: date) -> str:
        """Serialize the occurrence date as YYYY-MM-DD."""
        return format_day_key(value)

    def as_record(self) -> dict[str, Any]:
        """Flatten into an item-shaped record for list rendering.

        Returns:
            Dictionary with the copied display fields plus instance identity keys
        """
        record = copy.deepcopy(self.display_fields)
        record.update(
            {
                "id": self.occurrence_id,
                "scheduledDate": self.occurrence_date,
                "instanceDate": self.occurrence_date,
                "isRecurringInstance": True,
                "recurringParentId": self.source_id,
                "recurrence": None,
            }
        )
        return record
