from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Tuple

from ..domain import AlarmVisibility, AmbiguousOverlapError, DayWindow, Event, InvalidDateError
from .clock import DateComponentsClock, TimeZoneLike

FULL_DAY = timedelta(seconds=60 * 60 * 24)

ALARM_OPTION_ROWS: Tuple[str, ...] = ("alarm_date_toggle", "alarm_time_display")


@dataclass(frozen=True, slots=True)
class AlarmTransition:
    state: AlarmVisibility
    revealed: Tuple[str, ...] = ()
    hidden: Tuple[str, ...] = ()
    reset_alarm_time: bool = False


def initial_alarm_visibility(event: Optional[Event] = None) -> AlarmVisibility:
    if event is None:
        return AlarmVisibility.OFF
    return AlarmVisibility.ON if event.alarm else AlarmVisibility.OFF


def toggle_alarm(state: AlarmVisibility, alarm_on: bool) -> AlarmTransition:
    """Move the alarm switch; turning it off hides the options and resets the time."""

    target = AlarmVisibility.ON if alarm_on else AlarmVisibility.OFF
    if target == state:
        return AlarmTransition(state=state)
    if target is AlarmVisibility.ON:
        return AlarmTransition(state=target, revealed=ALARM_OPTION_ROWS)
    return AlarmTransition(state=target, hidden=ALARM_OPTION_ROWS, reset_alarm_time=True)


def recompute_alarm_time(event: Event, previous_alarm_set_by_user: bool) -> Event:
    """Return ``event`` with the alarm time it should be saved with.

    A disabled alarm never keeps a time. An enabled alarm follows the start
    until the user picks a time of their own.
    """

    if not event.alarm:
        return event.with_changes(alarm_time=None)
    if not previous_alarm_set_by_user or event.alarm_time is None:
        return event.with_changes(alarm_time=event.date_start)
    return event


def as_instant(value: datetime) -> datetime:
    """UTC view of an aware datetime; wall-clock comparison ignores ``fold``."""

    return value.astimezone(timezone.utc)


def check_interval(event: Event) -> None:
    if event.date_start.tzinfo is None or event.date_end.tzinfo is None:
        raise InvalidDateError(f"Event {event.id} has a datetime without a time zone")
    if as_instant(event.date_end) < as_instant(event.date_start):
        raise AmbiguousOverlapError(
            f"Event {event.id} ends ({event.date_end.isoformat()}) before it starts ({event.date_start.isoformat()})"
        )


@dataclass(frozen=True, slots=True)
class EventIntervalIndex:
    clock: DateComponentsClock = field(default_factory=DateComponentsClock)

    def day_window(self, day: date, time_zone: Optional[TimeZoneLike] = None) -> DayWindow:
        """Midnight-to-midnight window of ``day``; the upper bound is 24 elapsed hours later."""

        zone = self.clock.zone(time_zone)
        if isinstance(day, datetime):
            components = self.clock.components_for(day, zone)
            local_day = date(components.year, components.month, components.day)
        else:
            local_day = day
        lower = datetime(local_day.year, local_day.month, local_day.day, tzinfo=zone)
        upper = (lower.astimezone(timezone.utc) + FULL_DAY).astimezone(zone)
        return DayWindow(lower_bound=lower, upper_bound=upper)

    def events_overlapping(self, events: Iterable[Event], window: DayWindow) -> List[Event]:
        """Events whose ``[start, end)`` touches the window, earliest start first.

        Events starting at the same instant keep their input order.
        """

        lower = as_instant(window.lower_bound)
        upper = as_instant(window.upper_bound)
        selected: list[Event] = []
        for event in events:
            check_interval(event)
            if as_instant(event.date_start) < upper and as_instant(event.date_end) >= lower:
                selected.append(event)
        return sorted(selected, key=lambda item: as_instant(item.date_start))

    def events_for_day(
        self, events: Iterable[Event], day: date, time_zone: Optional[TimeZoneLike] = None
    ) -> List[Event]:
        return self.events_overlapping(events, self.day_window(day, time_zone))

    def recompute_alarm_time(self, event: Event, previous_alarm_set_by_user: bool) -> Event:
        return recompute_alarm_time(event, previous_alarm_set_by_user)


__all__ = [
    "ALARM_OPTION_ROWS",
    "AlarmTransition",
    "EventIntervalIndex",
    "FULL_DAY",
    "as_instant",
    "check_interval",
    "initial_alarm_visibility",
    "recompute_alarm_time",
    "toggle_alarm",
]
