from __future__ import annotations


class CalendarEngineError(ValueError):
    """Base class for calendar arithmetic and query failures."""


class InvalidDateError(CalendarEngineError):
    """Raised when components or instants cannot be represented by the calendar."""


class GridOverflowError(CalendarEngineError):
    """Raised when a month does not fit into the fixed 42-cell grid."""


class AmbiguousOverlapError(CalendarEngineError):
    """Raised when an event ends before it starts, so overlap is undefined."""


class EventNotFoundError(KeyError):
    """Raised when the store has no event with the requested id."""


class StoreCorruptedError(RuntimeError):
    """Raised when the calendar state file cannot be decoded."""
