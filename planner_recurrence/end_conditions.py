"""End-condition evaluation for recurrence expansion."""

from __future__ import annotations

from datetime import date

from .recurrence_models import EndCondition, EndsAfterCount, EndsOnDate, NeverEnds


def has_ended(end_condition: EndCondition, emitted_count: int, candidate: date) -> bool:
    """Decide whether generation must stop before considering `candidate`.

    Args:
        end_condition: The rule's termination condition
        emitted_count: Occurrences emitted so far (excepted dates are not counted)
        candidate: Calendar date under consideration

    Returns:
        True when no further occurrences may be emitted
    """
    if isinstance(end_condition, NeverEnds):
        return False
    if isinstance(end_condition, EndsOnDate):
        # A candidate exactly on the end date is still included.
        return candidate > end_condition.until
    if isinstance(end_condition, EndsAfterCount):
        return emitted_count >= end_condition.count
    raise TypeError(f"Unsupported end condition: {end_condition!r}")
