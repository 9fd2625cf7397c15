"""planner_recurrence - recurrence instance generation for planner tasks and events.

Expands a parent item's recurrence rule into the virtual occurrences that fall
inside a calendar date window. Pure and synchronous; no storage access.
"""

__version__ = "0.1.0"

from .config_loader import Config, load_config
from .errors import (
    InvalidPlannerItemError,
    InvalidQueryWindowError,
    InvalidRecurrenceRuleError,
    RecurrenceError,
)
from .instance_generator import (
    RecurrenceInstanceGenerator,
    expand_items,
    generate_instances,
    occurrences_on,
)
from .lite_logging import configure_from_config, configure_logging, get_logging_status
from .pattern_codec import item_from_record, rule_from_record, rule_to_record, window_from_bounds
from .recurrence_models import (
    CustomRule,
    DailyRule,
    EndsAfterCount,
    EndsOnDate,
    InstanceModification,
    MonthlyRule,
    NeverEnds,
    PlannerItem,
    QueryWindow,
    RecurrenceVariant,
    VirtualOccurrence,
    WeeklyRule,
    YearlyRule,
)

__all__ = [
    "Config",
    "CustomRule",
    "DailyRule",
    "EndsAfterCount",
    "EndsOnDate",
    "InstanceModification",
    "InvalidPlannerItemError",
    "InvalidQueryWindowError",
    "InvalidRecurrenceRuleError",
    "MonthlyRule",
    "NeverEnds",
    "PlannerItem",
    "QueryWindow",
    "RecurrenceError",
    "RecurrenceInstanceGenerator",
    "RecurrenceVariant",
    "VirtualOccurrence",
    "WeeklyRule",
    "YearlyRule",
    "configure_from_config",
    "configure_logging",
    "expand_items",
    "generate_instances",
    "get_logging_status",
    "item_from_record",
    "load_config",
    "occurrences_on",
    "rule_from_record",
    "rule_to_record",
    "window_from_bounds",
]
