"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, CalendarSettings, LoggingSettings, StorageSettings, get_settings

__all__ = ["AppSettings", "CalendarSettings", "LoggingSettings", "StorageSettings", "get_settings"]
