"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from lazy_calendar.config import AppSettings, CalendarSettings, LoggingSettings, StorageSettings
from lazy_calendar.data import CalendarStore
from lazy_calendar.domain import Event
from lazy_calendar.engine import DateComponentsClock, EventIntervalIndex, GregorianCalendar, MonthGridBuilder
from lazy_calendar.services import CalendarService, ServiceContext

NEW_YORK = "America/New_York"


@pytest.fixture
def clock():
    """Gregorian clock evaluated in UTC."""
    return DateComponentsClock(GregorianCalendar("UTC"))


@pytest.fixture
def ny_clock():
    return DateComponentsClock(GregorianCalendar(NEW_YORK))


@pytest.fixture
def builder(clock):
    return MonthGridBuilder(clock)


@pytest.fixture
def index(ny_clock):
    return EventIntervalIndex(ny_clock)


@pytest.fixture
def store(tmp_path):
    return CalendarStore(tmp_path / "calendar_state.json")


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        calendar=CalendarSettings(time_zone=NEW_YORK, default_event_duration=timedelta(hours=1)),
        storage=StorageSettings(state_file=tmp_path / "calendar_state.json"),
        logging=LoggingSettings(level="DEBUG", log_file=tmp_path / "lazy_calendar.log"),
    )


@pytest.fixture
def service(settings):
    today = datetime(2024, 3, 10, 15, 30, tzinfo=ZoneInfo(NEW_YORK))
    return CalendarService(ServiceContext(settings), today=today)


@pytest.fixture
def make_event():
    """Factory for events in New York local time."""

    zone = ZoneInfo(NEW_YORK)

    def _make(event_id, start, end, **changes):
        return Event(
            id=event_id,
            date_start=datetime(*start, tzinfo=zone),
            date_end=datetime(*end, tzinfo=zone),
            date_start_time_zone=NEW_YORK,
            date_end_time_zone=NEW_YORK,
            **changes,
        )

    return _make
