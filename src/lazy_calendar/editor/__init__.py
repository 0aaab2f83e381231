"""Event editor state machine."""

from __future__ import annotations

from .state import (
    ChangeAlarmTime,
    ChangeDateEnd,
    ChangeDateStart,
    ContactsChanged,
    DeselectSection,
    EditorAction,
    EditorState,
    LocationChanged,
    Rename,
    RowLayout,
    SelectSection,
    TimeZoneChanged,
    ToggleAlarm,
    editor_state_for,
    new_editor_state,
    row_layout,
    to_event,
    transition,
)

__all__ = [
    "ChangeAlarmTime",
    "ChangeDateEnd",
    "ChangeDateStart",
    "ContactsChanged",
    "DeselectSection",
    "EditorAction",
    "EditorState",
    "LocationChanged",
    "Rename",
    "RowLayout",
    "SelectSection",
    "TimeZoneChanged",
    "ToggleAlarm",
    "editor_state_for",
    "new_editor_state",
    "row_layout",
    "to_event",
    "transition",
]
