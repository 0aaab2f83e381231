"""Data access layer."""

from __future__ import annotations

from .store import CalendarStore, DEFAULT_CALENDAR_STATE

__all__ = ["CalendarStore", "DEFAULT_CALENDAR_STATE"]
