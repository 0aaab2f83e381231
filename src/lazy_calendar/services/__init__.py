"""Application services orchestrating the store and the calendar engine."""

from __future__ import annotations

from .calendar import CalendarService, DayAgenda
from .context import ServiceContext

__all__ = ["CalendarService", "DayAgenda", "ServiceContext"]
