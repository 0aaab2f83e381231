"""Pure calendar arithmetic and event interval queries."""

from __future__ import annotations

from .clock import CalendarSystem, DateComponentsClock, GregorianCalendar, resolve_time_zone
from .grid import MonthGridBuilder
from .interval_index import (
    AlarmTransition,
    EventIntervalIndex,
    initial_alarm_visibility,
    recompute_alarm_time,
    toggle_alarm,
)

__all__ = [
    "AlarmTransition",
    "CalendarSystem",
    "DateComponentsClock",
    "EventIntervalIndex",
    "GregorianCalendar",
    "MonthGridBuilder",
    "initial_alarm_visibility",
    "recompute_alarm_time",
    "resolve_time_zone",
    "toggle_alarm",
]
