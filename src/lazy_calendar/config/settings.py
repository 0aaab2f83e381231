from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from ..core import DATA_DIR, STATE_FILE

load_dotenv()


@dataclass(frozen=True)
class CalendarSettings:
    time_zone: str
    default_event_duration: timedelta


@dataclass(frozen=True)
class StorageSettings:
    state_file: Path


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_file: Path


@dataclass(frozen=True)
class AppSettings:
    calendar: CalendarSettings
    storage: StorageSettings
    logging: LoggingSettings


def _minutes_from_env(name: str, default_minutes: int) -> timedelta:
    raw = os.getenv(name)
    if not raw:
        return timedelta(minutes=default_minutes)
    try:
        minutes = float(raw)
    except ValueError:
        return timedelta(minutes=default_minutes)
    if minutes < 0:
        return timedelta(minutes=default_minutes)
    return timedelta(minutes=minutes)


def _path_from_env(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    return Path(raw).expanduser() if raw else default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    calendar = CalendarSettings(
        time_zone=os.getenv("LAZY_CALENDAR_TIMEZONE", "UTC"),
        default_event_duration=_minutes_from_env("LAZY_CALENDAR_EVENT_MINUTES", 60),
    )

    storage = StorageSettings(
        state_file=_path_from_env("LAZY_CALENDAR_STATE_FILE", STATE_FILE),
    )

    logging = LoggingSettings(
        level=os.getenv("LAZY_CALENDAR_LOG_LEVEL", "INFO").upper(),
        log_file=_path_from_env("LAZY_CALENDAR_LOG_FILE", DATA_DIR / "lazy_calendar.log"),
    )

    return AppSettings(calendar=calendar, storage=storage, logging=logging)
