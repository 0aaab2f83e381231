"""Lazy Calendar: month grids and day agendas for a personal calendar."""

from __future__ import annotations

from .engine import DateComponentsClock, EventIntervalIndex, GregorianCalendar, MonthGridBuilder

__all__ = ["DateComponentsClock", "EventIntervalIndex", "GregorianCalendar", "MonthGridBuilder"]
