"""Recurrence instance generation - expands a parent item into virtual occurrences."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from .config_loader import DEFAULT_MAX_INSTANCES, load_config
from .date_utils import add_days, days_between, format_day_key
from .end_conditions import has_ended
from .exception_dates import is_excepted
from .lite_logging import configure_from_config
from .next_occurrence import can_produce, matches_rule, next_occurrence
from .pattern_codec import coerce_item, coerce_window, window_from_bounds
from .recurrence_models import DailyRule, PlannerItem, VirtualOccurrence

logger = logging.getLogger(__name__)


@dataclass
class GeneratorConfig:
    """Settings consumed by the instance generator."""

    max_instances: Optional[int] = DEFAULT_MAX_INSTANCES

    @classmethod
    def from_settings(cls, settings: Any) -> "GeneratorConfig":
        """Extract generator configuration from a settings object.

        Args:
            settings: Config instance, SimpleNamespace or None

        Returns:
            GeneratorConfig with values from settings or defaults
        """
        if settings is None:
            return cls()
        return cls(max_instances=getattr(settings, "max_instances", DEFAULT_MAX_INSTANCES))


class RecurrenceInstanceGenerator:
    """Expands recurrence rules into ordered virtual occurrences.

    Pure and synchronous: every call works on its own inputs and returns a
    freshly built list, so one instance can be shared between callers.
    """

    def __init__(self, settings: Any = None):
        """Initialize generator with configuration settings.

        Args:
            settings: Configuration object with generator settings (optional)
        """
        self.settings = settings
        config = GeneratorConfig.from_settings(settings)
        self.max_instances = config.max_instances
        logger.debug("RecurrenceInstanceGenerator initialized: max_instances=%s", self.max_instances)

    @classmethod
    def from_config_file(cls, path: Optional[str] = None) -> "RecurrenceInstanceGenerator":
        """Build a generator from a YAML/JSON config file and apply its logging settings.

        Args:
            path: Config file path; defaults to ./planner_recurrence.yaml

        Returns:
            Generator configured from the loaded Config
        """
        config = load_config(path)
        configure_from_config(config)
        return cls(config)

    def generate(self, item: Any, window: Any) -> list[VirtualOccurrence]:
        """Generate the occurrences of one parent item inside a query window.

        Args:
            item: PlannerItem or item record mapping
            window: QueryWindow or (start, end) pair

        Returns:
            Occurrences in strictly increasing date order

        Raises:
            InvalidPlannerItemError: If the item record is malformed
            InvalidQueryWindowError: If the window start is after its end
        """
        parent = coerce_item(item)
        query = coerce_window(window)
        rule = parent.recurrence_rule
        anchor = parent.schedule_anchor_date

        if rule is None or anchor is None:
            logger.debug("Item %s has no recurrence schedule", parent.id)
            return []
        if query.end < anchor:
            logger.debug("Window %s..%s ends before anchor %s of item %s", query.start, query.end, anchor, parent.id)
            return []
        if not can_produce(rule):
            logger.debug("Item %s has an incomplete %s rule; no occurrences", parent.id, rule.variant)
            return []

        candidate = anchor if matches_rule(rule, anchor) else next_occurrence(rule, anchor)
        emitted = 0
        if candidate is not None and candidate < query.start:
            candidate, emitted = self._seek(rule, candidate, query.start)

        occurrences: list[VirtualOccurrence] = []
        while (
            candidate is not None
            and candidate <= query.end
            and not has_ended(rule.end_condition, emitted, candidate)
        ):
            if self.max_instances is not None and len(occurrences) >= self.max_instances:
                logger.warning(
                    "Reached maximum recurring instances limit (%d) for item %s; "
                    "window %s..%s may be too wide",
                    self.max_instances,
                    parent.id,
                    query.start,
                    query.end,
                )
                break

            if is_excepted(candidate, rule.exception_dates):
                logger.debug("Skipping exception date %s for item %s", candidate, parent.id)
            else:
                occurrences.append(self._materialize(parent, rule, candidate))
                emitted += 1

            candidate = next_occurrence(rule, candidate)

        logger.debug(
            "Generated %d occurrences for item %s (%s rule) in %s..%s",
            len(occurrences),
            parent.id,
            rule.variant,
            query.start,
            query.end,
        )
        return occurrences

    def expand_items(self, items: Iterable[Any], window: Any) -> list[VirtualOccurrence]:
        """Expand several parent items over one window.

        Returns:
            All occurrences ordered by (occurrence_date, source_id)
        """
        query = coerce_window(window)
        expanded: list[VirtualOccurrence] = []
        for item in items:
            expanded.extend(self.generate(item, query))
        expanded.sort(key=lambda occurrence: (occurrence.occurrence_date, occurrence.source_id))
        return expanded

    def _seek(self, rule: Any, candidate: date, target: date) -> tuple[Optional[date], int]:
        """Advance from the seed to the first candidate on or after `target`.

        Stays phase-locked to the anchor and counts the non-excepted
        candidates passed over, since they consume the occurrence budget.
        """
        if isinstance(rule, DailyRule):
            return self._seek_daily(rule, candidate, target)

        passed = 0
        current: Optional[date] = candidate
        while current is not None and current < target:
            if has_ended(rule.end_condition, passed, current):
                return None, passed
            if not is_excepted(current, rule.exception_dates):
                passed += 1
            current = next_occurrence(rule, current)
        return current, passed

    @staticmethod
    def _seek_daily(rule: DailyRule, candidate: date, target: date) -> tuple[date, int]:
        steps = -(-days_between(candidate, target) // rule.interval)
        landed = add_days(candidate, steps * rule.interval)
        skipped = sum(
            1
            for excluded in rule.exception_dates
            if candidate <= excluded < landed and days_between(candidate, excluded) % rule.interval == 0
        )
        return landed, steps - skipped

    @staticmethod
    def _materialize(parent: PlannerItem, rule: Any, day: date) -> VirtualOccurrence:
        fields = copy.deepcopy(parent.display_fields)
        modification = rule.modification_for(day)
        if modification is not None:
            fields.update(modification.overrides())

        return VirtualOccurrence(
            source_id=parent.id,
            occurrence_id=f"{parent.id}_{format_day_key(day)}",
            occurrence_date=day,
            display_fields=fields,
        )


def generate_instances(item: Any, window: Any, settings: Any = None) -> list[VirtualOccurrence]:
    """Generate virtual occurrences of one item within an inclusive window."""
    return RecurrenceInstanceGenerator(settings).generate(item, window)


def expand_items(items: Iterable[Any], window: Any, settings: Any = None) -> list[VirtualOccurrence]:
    """Generate virtual occurrences of many items, merged in date order."""
    return RecurrenceInstanceGenerator(settings).expand_items(items, window)


def occurrences_on(items: Iterable[Any], day: Any, settings: Any = None) -> list[VirtualOccurrence]:
    """Occurrences of the given items that fall on a single calendar day."""
    return expand_items(items, window_from_bounds(day, day), settings)
