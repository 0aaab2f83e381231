"""Immutable state of the event editor and the actions that change it.

Views never mutate the state; they emit one of the action dataclasses below
and the owner replaces its state with ``transition(state, action)``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional, Tuple, Union

from ..domain import AlarmVisibility, EditorSection, Event
from ..engine.clock import resolve_time_zone
from ..engine.interval_index import as_instant, initial_alarm_visibility, recompute_alarm_time, toggle_alarm

DEFAULT_EVENT_DURATION = timedelta(hours=1)


@dataclass(frozen=True, slots=True)
class EditorState:
    date_start: datetime
    date_end: datetime
    name: Optional[str] = None
    event_id: Optional[str] = None
    date_start_time_zone: str = "UTC"
    date_end_time_zone: str = "UTC"
    alarm: bool = False
    alarm_time: Optional[datetime] = None
    alarm_time_set_by_user: bool = False
    alarm_visibility: AlarmVisibility = AlarmVisibility.OFF
    selected: Optional[EditorSection] = None
    contact_ids: Tuple[str, ...] = ()
    location_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return self.event_id is None


@dataclass(frozen=True, slots=True)
class SelectSection:
    section: EditorSection


@dataclass(frozen=True, slots=True)
class DeselectSection:
    pass


@dataclass(frozen=True, slots=True)
class Rename:
    name: Optional[str]


@dataclass(frozen=True, slots=True)
class ChangeDateStart:
    value: datetime


@dataclass(frozen=True, slots=True)
class ChangeDateEnd:
    value: datetime


@dataclass(frozen=True, slots=True)
class ToggleAlarm:
    on: bool


@dataclass(frozen=True, slots=True)
class ChangeAlarmTime:
    value: datetime


@dataclass(frozen=True, slots=True)
class ContactsChanged:
    contact_ids: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class LocationChanged:
    location_id: Optional[str]


@dataclass(frozen=True, slots=True)
class TimeZoneChanged:
    section: EditorSection
    time_zone: str


EditorAction = Union[
    SelectSection,
    DeselectSection,
    Rename,
    ChangeDateStart,
    ChangeDateEnd,
    ToggleAlarm,
    ChangeAlarmTime,
    ContactsChanged,
    LocationChanged,
    TimeZoneChanged,
]


@dataclass(frozen=True, slots=True)
class RowLayout:
    start_picker_expanded: bool
    end_picker_expanded: bool
    alarm_options_visible: bool
    alarm_picker_expanded: bool


def new_editor_state(
    date_start: datetime,
    *,
    time_zone: str = "UTC",
    duration: timedelta = DEFAULT_EVENT_DURATION,
) -> EditorState:
    """Blank editor for a new event starting at ``date_start``."""

    return EditorState(
        date_start=date_start,
        date_end=date_start + duration,
        date_start_time_zone=time_zone,
        date_end_time_zone=time_zone,
        alarm=False,
        alarm_time=date_start,
        alarm_visibility=initial_alarm_visibility(),
    )


def editor_state_for(event: Event) -> EditorState:
    return EditorState(
        event_id=event.id,
        name=event.name,
        date_start=event.date_start,
        date_end=event.date_end,
        date_start_time_zone=event.date_start_time_zone,
        date_end_time_zone=event.date_end_time_zone,
        alarm=event.alarm,
        alarm_time=event.alarm_time or event.date_start,
        alarm_time_set_by_user=event.alarm_time is not None,
        alarm_visibility=initial_alarm_visibility(event),
        contact_ids=event.contact_ids,
        location_id=event.location_id,
    )


def _with_start(state: EditorState, value: datetime) -> EditorState:
    # The end picker never shows a time before the start.
    date_end = value if as_instant(state.date_end) < as_instant(value) else state.date_end
    alarm_time = state.alarm_time
    if not state.alarm or not state.alarm_time_set_by_user:
        alarm_time = value
    return replace(state, date_start=value, date_end=date_end, alarm_time=alarm_time)


def transition(state: EditorState, action: EditorAction) -> EditorState:
    if isinstance(action, SelectSection):
        return replace(state, selected=action.section)
    if isinstance(action, DeselectSection):
        return replace(state, selected=None)
    if isinstance(action, Rename):
        name = action.name.strip() if action.name else None
        return replace(state, name=name or None)
    if isinstance(action, ChangeDateStart):
        return _with_start(state, action.value)
    if isinstance(action, ChangeDateEnd):
        return replace(state, date_end=max(action.value, state.date_start, key=as_instant))
    if isinstance(action, ToggleAlarm):
        moved = toggle_alarm(state.alarm_visibility, action.on)
        updated = replace(
            state,
            alarm=action.on,
            alarm_visibility=moved.state,
            selected=EditorSection.ALARM,
        )
        if moved.reset_alarm_time:
            updated = replace(updated, alarm_time=state.date_start, alarm_time_set_by_user=False)
        return updated
    if isinstance(action, ChangeAlarmTime):
        return replace(state, alarm_time=action.value, alarm_time_set_by_user=True)
    if isinstance(action, ContactsChanged):
        return replace(state, contact_ids=tuple(dict.fromkeys(action.contact_ids)))
    if isinstance(action, LocationChanged):
        return replace(state, location_id=action.location_id)
    if isinstance(action, TimeZoneChanged):
        return _with_time_zone(state, action.section, action.time_zone)
    raise TypeError(f"Unsupported editor action: {action!r}")


def _with_time_zone(state: EditorState, section: EditorSection, time_zone: str) -> EditorState:
    """Keep the wall-clock time and move it to ``time_zone``."""

    zone = resolve_time_zone(time_zone)
    if section is EditorSection.START:
        moved = replace(state, date_start_time_zone=time_zone)
        return _with_start(moved, state.date_start.replace(tzinfo=zone))
    if section is EditorSection.END:
        date_end = state.date_end.replace(tzinfo=zone)
        return replace(state, date_end_time_zone=time_zone, date_end=max(date_end, state.date_start, key=as_instant))
    raise ValueError(f"Section {section.value} has no time zone")


def row_layout(state: EditorState) -> RowLayout:
    alarm_on = state.alarm_visibility is AlarmVisibility.ON
    return RowLayout(
        start_picker_expanded=state.selected is EditorSection.START,
        end_picker_expanded=state.selected is EditorSection.END,
        alarm_options_visible=alarm_on,
        alarm_picker_expanded=alarm_on and state.selected is EditorSection.ALARM,
    )


def to_event(state: EditorState, event_id: str = "") -> Event:
    """Build the event to persist, applying the save-time alarm rules."""

    event = Event(
        id=state.event_id or event_id,
        name=state.name,
        date_start=state.date_start,
        date_start_time_zone=state.date_start_time_zone,
        date_end=state.date_end,
        date_end_time_zone=state.date_end_time_zone,
        alarm=state.alarm,
        alarm_time=state.alarm_time,
        contact_ids=state.contact_ids,
        location_id=state.location_id,
    )
    return recompute_alarm_time(event, state.alarm_time_set_by_user)
