"""Display helpers for dates and date intervals."""

from __future__ import annotations

import calendar as pycalendar
from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..domain import InvalidDateError
from .clock import TimeZoneLike, resolve_time_zone

UNITS = ("year", "month", "day", "hour", "minute")
DAY_UNITS = ("year", "month", "day")
TIME_UNITS = ("hour", "minute")


def compare_units(
    first: datetime,
    second: datetime,
    units: Sequence[str] = DAY_UNITS,
    time_zone: TimeZoneLike = "UTC",
) -> int:
    """Compare two instants on ``units`` only, both seen from ``time_zone``.

    Returns -1, 0 or 1 like a classic ``cmp``.
    """

    unknown = [unit for unit in units if unit not in UNITS]
    if unknown:
        raise ValueError(f"Unsupported units: {', '.join(unknown)}")
    if first.tzinfo is None or second.tzinfo is None:
        raise InvalidDateError("compare_units needs time zone aware datetimes")
    zone = resolve_time_zone(time_zone)
    left = first.astimezone(zone)
    right = second.astimezone(zone)
    ordered = [unit for unit in UNITS if unit in units]
    left_key = tuple(getattr(left, unit) for unit in ordered)
    right_key = tuple(getattr(right, unit) for unit in ordered)
    return (left_key > right_key) - (left_key < right_key)


def for_time_zone(instant: datetime, time_zone: TimeZoneLike) -> datetime:
    """``instant`` expressed in ``time_zone``, truncated to the minute."""

    if instant.tzinfo is None:
        raise InvalidDateError(f"Instant has no time zone: {instant!r}")
    return instant.astimezone(resolve_time_zone(time_zone)).replace(second=0, microsecond=0)


def format_day(value: datetime) -> str:
    return f"{pycalendar.month_abbr[value.month]} {value.day:02d}, {value.year}"


def format_time(value: datetime) -> str:
    hour = value.hour % 12 or 12
    period = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {period}"


def format_month_title(year: int, month: int) -> str:
    return f"{pycalendar.month_name[month]} {year}"


def _zone_suffix(instant: datetime, time_zone: Optional[str], local_zone: tzinfo) -> str:
    # Wall time where the endpoint was recorded, when that is not the local zone.
    if not time_zone:
        return ""
    zone = resolve_time_zone(time_zone)
    if zone == local_zone:
        return ""
    recorded = instant.astimezone(zone)
    return f" ({format_time(recorded)} {recorded.tzname()})"


def format_interval(
    start: datetime,
    end: datetime,
    start_time_zone: Optional[str] = None,
    end_time_zone: Optional[str] = None,
    local_time_zone: TimeZoneLike = "UTC",
) -> str:
    """Human readable interval in the local zone.

    A start or end recorded in another zone is followed by its wall time
    and abbreviation in that zone.
    """

    local_zone = resolve_time_zone(local_time_zone)
    local_start = start.astimezone(local_zone)
    local_end = end.astimezone(local_zone)
    start_suffix = _zone_suffix(start, start_time_zone, local_zone)
    end_suffix = _zone_suffix(end, end_time_zone, local_zone)

    if compare_units(start, end, DAY_UNITS, local_zone) != 0:
        return (
            f"{format_day(local_start)} {format_time(local_start)}{start_suffix}"
            f" - {format_day(local_end)} {format_time(local_end)}{end_suffix}"
        )

    interval = f"{format_day(local_start)} {format_time(local_start)}{start_suffix}"
    if compare_units(start, end, TIME_UNITS, local_zone) != 0:
        interval += f" - {format_time(local_end)}{end_suffix}"
    return interval


__all__ = [
    "DAY_UNITS",
    "TIME_UNITS",
    "UNITS",
    "compare_units",
    "for_time_zone",
    "format_day",
    "format_interval",
    "format_month_title",
    "format_time",
]
