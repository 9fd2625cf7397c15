"""Unit tests for the recurrence data models."""

from datetime import date, datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from planner_recurrence.recurrence_models import (
    DailyRule,
    EndsAfterCount,
    EndsOnDate,
    InstanceModification,
    MonthlyRule,
    NeverEnds,
    PlannerItem,
    QueryWindow,
    RecurrenceRule,
    RecurrenceVariant,
    WeeklyRule,
    YearlyRule,
)

pytestmark = pytest.mark.unit


class TestRuleValidation:
    def test_defaults(self) -> None:
        rule = DailyRule()
        assert rule.variant == RecurrenceVariant.DAILY
        assert rule.interval == 1
        assert rule.end_condition == NeverEnds()
        assert rule.exception_dates == frozenset()
        assert rule.instance_modifications == ()

    @pytest.mark.parametrize("interval", [0, -3])
    def test_interval_must_be_positive(self, interval: int) -> None:
        with pytest.raises(ValidationError):
            DailyRule(interval=interval)

    def test_weekday_out_of_range(self) -> None:
        with pytest.raises(ValidationError, match="0-6"):
            WeeklyRule(weekdays={1, 7})

    @pytest.mark.parametrize("day", [0, 32])
    def test_day_of_month_out_of_range(self, day: int) -> None:
        with pytest.raises(ValidationError):
            MonthlyRule(day_of_month=day)

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month: int) -> None:
        with pytest.raises(ValidationError):
            YearlyRule(month_of_year=month, day_of_month=1)

    def test_count_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            EndsAfterCount(count=0)

    def test_rules_are_frozen(self) -> None:
        rule = DailyRule(interval=2)
        with pytest.raises(ValidationError):
            rule.interval = 3

    def test_equal_rules_hash_equal(self) -> None:
        first = WeeklyRule(
            weekdays={1, 5},
            end_condition=EndsAfterCount(count=3),
            exception_dates=["2026-02-09"],
            instance_modifications={"2026-02-02": {"title": "Kickoff"}},
        )
        second = WeeklyRule(
            weekdays=[5, 1],
            end_condition={"kind": "after_count", "count": 3},
            exception_dates=[date(2026, 2, 9)],
            instance_modifications=[(date(2026, 2, 2), InstanceModification(title="Kickoff"))],
        )
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second, DailyRule()}) == 2

    def test_default_rule_is_hashable(self) -> None:
        assert hash(DailyRule()) == hash(DailyRule())

    def test_modifications_cannot_be_changed_in_place(self) -> None:
        rule = DailyRule(instance_modifications={"2026-02-02": {"title": "Moved"}})
        with pytest.raises(TypeError):
            rule.instance_modifications[0] = (date(2026, 2, 3), InstanceModification(title="Other"))
        assert rule.modification_for(date(2026, 2, 3)) is None

    def test_modifications_sorted_by_date(self) -> None:
        rule = DailyRule(instance_modifications={"2026-03-01": {"status": "complete"}, "2026-02-01": {"title": "A"}})
        assert [day for day, _ in rule.instance_modifications] == [date(2026, 2, 1), date(2026, 3, 1)]


class TestDateNormalization:
    def test_exception_dates_accept_mixed_inputs(self) -> None:
        rule = DailyRule(exception_dates=["2026-02-03", datetime(2026, 2, 4, 9, 0), date(2026, 2, 5)])
        assert rule.exception_dates == frozenset({date(2026, 2, 3), date(2026, 2, 4), date(2026, 2, 5)})

    def test_until_is_normalized(self) -> None:
        assert EndsOnDate(until="2026-05-01T23:59:00").until == date(2026, 5, 1)

    def test_modification_keys_are_normalized(self) -> None:
        rule = DailyRule(instance_modifications={"2026-02-02T08:00:00": {"title": "Moved"}})
        modification = rule.modification_for(date(2026, 2, 2))
        assert modification == InstanceModification(title="Moved")
        assert rule.modification_for(date(2026, 2, 3)) is None


class TestDiscriminatedUnion:
    def test_variant_selects_model(self) -> None:
        adapter = TypeAdapter(RecurrenceRule)
        rule = adapter.validate_python(
            {"variant": "weekly", "weekdays": [1, 3], "end_condition": {"kind": "after_count", "count": 4}}
        )
        assert isinstance(rule, WeeklyRule)
        assert rule.weekdays == frozenset({1, 3})
        assert rule.end_condition == EndsAfterCount(count=4)

    def test_unknown_variant_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TypeAdapter(RecurrenceRule).validate_python({"variant": "hourly"})


class TestInstanceModification:
    def test_overrides_skip_empty_values(self) -> None:
        modification = InstanceModification(status="complete", title="", description=None)
        assert modification.overrides() == {"status": "complete"}


class TestPlannerItem:
    def test_extra_fields_become_display_fields(self) -> None:
        item = PlannerItem(id="t1", schedule_anchor_date="2026-02-01", title="Call Sam", categoryId="work")
        assert item.schedule_anchor_date == date(2026, 2, 1)
        assert item.display_fields == {"title": "Call Sam", "categoryId": "work"}
        assert item.recurrence_rule is None

    def test_integer_id_is_coerced(self) -> None:
        assert PlannerItem(id=42).id == "42"

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PlannerItem(id="")

    def test_bad_anchor_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PlannerItem(id="t1", schedule_anchor_date="next tuesday")


class TestQueryWindow:
    def test_bounds_normalized(self) -> None:
        window = QueryWindow(start="2026-02-01T10:00:00", end=datetime(2026, 2, 3, 1, 0))
        assert (window.start, window.end) == (date(2026, 2, 1), date(2026, 2, 3))

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(ValidationError, match="after end"):
            QueryWindow(start=date(2026, 2, 2), end=date(2026, 2, 1))

    def test_single_day_and_contains(self) -> None:
        window = QueryWindow.single_day("2026-02-01")
        assert window.start == window.end == date(2026, 2, 1)
        assert window.contains(date(2026, 2, 1))
        assert not window.contains(date(2026, 2, 2))
