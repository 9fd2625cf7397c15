"""Exception hierarchy for recurrence expansion.

Construction problems are raised at the boundary (record parsing, window
building) so the generator itself only ever sees well-formed inputs.
Degenerate rules that simply cannot produce dates are not errors.
"""


class RecurrenceError(Exception):
    """Base exception for all recurrence engine errors."""


class InvalidRecurrenceRuleError(RecurrenceError):
    """Recurrence rule could not be constructed.

    Raised when:
    - interval is below 1
    - a weekday index is outside 0-6
    - day of month / month of year is out of range
    - an occurrence count is below 1
    - the record names an unknown variant or end condition type
    """


class InvalidQueryWindowError(RecurrenceError):
    """Query window is malformed (start after end, or unparsable dates)."""


class InvalidPlannerItemError(RecurrenceError):
    """Parent item record is missing its id or carries an invalid anchor date."""
