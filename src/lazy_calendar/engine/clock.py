"""Calendar component arithmetic.

Everything here is a pure function of its arguments. Weekdays use the
Sunday-first convention: 1=Sunday through 7=Saturday.
"""

from __future__ import annotations

import calendar as pycalendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta, tzinfo
from typing import Optional, Protocol, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..domain import DateComponents, InvalidDateError

TimeZoneLike = Union[str, tzinfo]

MONTHS_IN_YEAR = 12


def resolve_time_zone(value: TimeZoneLike) -> tzinfo:
    """Turn an IANA name (or an existing tzinfo) into a tzinfo."""

    if isinstance(value, tzinfo):
        return value
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise InvalidDateError(f"Unknown time zone: {value!r}") from exc


def sunday_first_weekday(day: date) -> int:
    return day.isoweekday() % 7 + 1


class CalendarSystem(Protocol):
    @property
    def tzinfo(self) -> tzinfo: ...

    def days_in_month(self, year: int, month: int) -> int: ...

    def weekday(self, year: int, month: int, day: int) -> int: ...


@dataclass(frozen=True, slots=True)
class GregorianCalendar:
    """Proleptic Gregorian calendar evaluated in a named time zone."""

    time_zone: str = "UTC"

    @property
    def tzinfo(self) -> tzinfo:
        return resolve_time_zone(self.time_zone)

    def days_in_month(self, year: int, month: int) -> int:
        return pycalendar.monthrange(year, month)[1]

    def weekday(self, year: int, month: int, day: int) -> int:
        return sunday_first_weekday(date(year, month, day))


@dataclass(frozen=True, slots=True)
class DateComponentsClock:
    calendar: CalendarSystem = field(default_factory=GregorianCalendar)

    def zone(self, time_zone: Optional[TimeZoneLike] = None) -> tzinfo:
        if time_zone is None:
            return self.calendar.tzinfo
        return resolve_time_zone(time_zone)

    def components_for(self, instant: datetime, time_zone: Optional[TimeZoneLike] = None) -> DateComponents:
        """Year, month, day and weekday of ``instant`` as seen in ``time_zone``."""

        if instant.tzinfo is None:
            raise InvalidDateError(f"Instant has no time zone: {instant!r}")
        zone = self.zone(time_zone)
        try:
            local = instant.astimezone(zone)
        except (OverflowError, ValueError) as exc:
            raise InvalidDateError(f"Instant cannot be represented: {instant!r}") from exc
        return DateComponents(
            year=local.year,
            month=local.month,
            day=local.day,
            weekday=self._weekday(local.year, local.month, local.day),
        )

    def date_from(self, components: DateComponents) -> datetime:
        """Local midnight of ``components`` in the calendar's zone.

        A day past the end of the month rolls over into the following month
        (February 30 becomes March 1 or 2) instead of being clamped.
        """

        self._check_month(components.year, components.month)
        if components.day < 1:
            raise InvalidDateError(f"Day must be positive, got {components.day}")
        try:
            local_day = date(components.year, components.month, 1) + timedelta(days=components.day - 1)
        except (OverflowError, ValueError) as exc:
            raise InvalidDateError(f"Components cannot be represented: {components!r}") from exc
        return datetime.combine(local_day, time.min, tzinfo=self.calendar.tzinfo)

    def normalize(self, components: DateComponents) -> DateComponents:
        return self.components_for(self.date_from(components))

    def month_start_weekday(self, year: int, month: int) -> int:
        self._check_month(year, month)
        return self._weekday(year, month, 1)

    def days_in_month(self, year: int, month: int) -> int:
        self._check_month(year, month)
        try:
            return self.calendar.days_in_month(year, month)
        except ValueError as exc:
            raise InvalidDateError(f"No such month: {year}-{month}") from exc

    def add_months(self, components: DateComponents, delta: int) -> DateComponents:
        """Page ``delta`` months away; the result is always day 1."""

        year, month_index = divmod(components.year * MONTHS_IN_YEAR + components.month - 1 + delta, MONTHS_IN_YEAR)
        month = month_index + 1
        return DateComponents(year=year, month=month, day=1, weekday=self.month_start_weekday(year, month))

    def _weekday(self, year: int, month: int, day: int) -> int:
        try:
            return self.calendar.weekday(year, month, day)
        except ValueError as exc:
            raise InvalidDateError(f"No such day: {year}-{month}-{day}") from exc

    @staticmethod
    def _check_month(year: int, month: int) -> None:
        if not MINYEAR <= year <= MAXYEAR:
            raise InvalidDateError(f"Year {year} is outside {MINYEAR}..{MAXYEAR}")
        if not 1 <= month <= MONTHS_IN_YEAR:
            raise InvalidDateError(f"Month must be within 1..12, got {month}")


__all__ = [
    "CalendarSystem",
    "DateComponentsClock",
    "GregorianCalendar",
    "TimeZoneLike",
    "resolve_time_zone",
    "sunday_first_weekday",
]
