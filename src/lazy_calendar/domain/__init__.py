"""Domain models for calendar grids and events."""

from __future__ import annotations

from .enums import AlarmVisibility, EditorSection
from .errors import (
    AmbiguousOverlapError,
    CalendarEngineError,
    EventNotFoundError,
    GridOverflowError,
    InvalidDateError,
    StoreCorruptedError,
)
from .models import Contact, DateComponents, DayWindow, Event, Location, MonthGrid

__all__ = [
    "AlarmVisibility",
    "AmbiguousOverlapError",
    "CalendarEngineError",
    "Contact",
    "DateComponents",
    "DayWindow",
    "EditorSection",
    "Event",
    "EventNotFoundError",
    "GridOverflowError",
    "InvalidDateError",
    "Location",
    "MonthGrid",
    "StoreCorruptedError",
]
