"""Shared fixtures for planner_recurrence tests."""

from datetime import date
from types import SimpleNamespace
from typing import Any, Callable, Optional

import pytest

from planner_recurrence.recurrence_models import PlannerItem


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast, deterministic unit tests")


@pytest.fixture
def simple_settings() -> SimpleNamespace:
    """Lightweight settings object used across generator tests.

    Fields:
      - max_instances: safety ceiling on occurrences per generation call
    """
    return SimpleNamespace(max_instances=1000)


@pytest.fixture
def make_item() -> Callable[..., PlannerItem]:
    """Factory building a PlannerItem with a few display fields."""

    def _make(
        rule: Any = None,
        anchor: Optional[date] = date(2026, 2, 1),
        item_id: str = "task-1",
        **display_fields: Any,
    ) -> PlannerItem:
        fields = {
            "title": "Water plants",
            "description": "Balcony and kitchen",
            "priority": {"letter": "A", "number": 1},
            "categoryId": "home",
        }
        fields.update(display_fields)
        return PlannerItem(
            id=item_id,
            schedule_anchor_date=anchor,
            recurrence_rule=rule,
            **fields,
        )

    return _make
