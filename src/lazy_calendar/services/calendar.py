from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from typing import List, Optional, Sequence

from ..domain import Contact, DateComponents, DayWindow, Event, Location, MonthGrid
from ..editor import (
    ChangeAlarmTime,
    ChangeDateEnd,
    ChangeDateStart,
    ContactsChanged,
    EditorAction,
    EditorState,
    LocationChanged,
    Rename,
    ToggleAlarm,
    editor_state_for,
    new_editor_state,
    to_event,
    transition,
)
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DayAgenda:
    day: date
    window: DayWindow
    events: List[Event]


@dataclass(slots=True)
class CalendarService:
    """Owns the month cursor and the open editor, and routes both to the engine."""

    context: ServiceContext
    today: Optional[datetime] = None
    cursor: DateComponents = field(init=False)
    selected_day: Optional[int] = field(default=None, init=False)
    editor: Optional[EditorState] = field(default=None, init=False)

    def __post_init__(self) -> None:
        now = self.today or datetime.now(timezone.utc)
        self.cursor = self.context.clock.components_for(now)

    # Month cursor -----------------------------------------------------------

    def month_grid(self) -> MonthGrid:
        return self.context.grid.build_for(self.cursor)

    def go_to_month(self, year: int, month: int) -> MonthGrid:
        self.cursor = self.context.clock.normalize(DateComponents(year=year, month=month, day=1))
        self.selected_day = None
        return self.month_grid()

    def next_month(self) -> MonthGrid:
        return self._page(1)

    def previous_month(self) -> MonthGrid:
        return self._page(-1)

    def _page(self, delta: int) -> MonthGrid:
        self.cursor = self.context.clock.add_months(self.cursor, delta)
        self.selected_day = None
        logger.debug("Month cursor moved to %d-%02d", self.cursor.year, self.cursor.month)
        return self.month_grid()

    def select_day(self, day: int) -> DayAgenda:
        """Select a non-blank grid cell by day number and list its events."""

        if day not in self.month_grid().cells:
            raise ValueError(f"Day {day} is not in {self.cursor.year}-{self.cursor.month:02d}")
        self.cursor = self.context.clock.normalize(replace(self.cursor, day=day))
        self.selected_day = day
        return self.agenda_for(self.selected_date())

    def select_cell(self, index: int) -> DayAgenda:
        """Select the grid cell at ``index`` (0..41), as a tap on the month view does."""

        day = self.month_grid().day_at(index)
        if day is None:
            raise ValueError(f"Cell {index} of {self.cursor.year}-{self.cursor.month:02d} is blank")
        return self.select_day(day)

    def clear_selection(self) -> None:
        self.selected_day = None
        self.cursor = self.context.clock.normalize(replace(self.cursor, day=1))

    def selected_date(self) -> date:
        return date(self.cursor.year, self.cursor.month, self.selected_day or 1)

    # Queries ----------------------------------------------------------------

    def agenda_for(self, day: date) -> DayAgenda:
        window = self.context.index.day_window(day, self.context.time_zone)
        snapshot = self.context.store.events_in_range(window.lower_bound, window.upper_bound)
        events = self.context.index.events_overlapping(snapshot, window)
        return DayAgenda(day=day, window=window, events=events)

    def contacts_for(self, event: Event) -> List[Contact]:
        return self.context.store.list_contacts(event.contact_ids)

    def location_for(self, event: Event) -> Optional[Location]:
        if event.location_id is None:
            return None
        return self.context.store.get_location(event.location_id)

    # Editor -----------------------------------------------------------------

    def begin_new_event(self, *, at: Optional[datetime] = None) -> EditorState:
        """Open the editor on the selected day (or day 1) at the current time of day."""

        zone = self.context.clock.zone()
        now = (at or datetime.now(timezone.utc)).astimezone(zone)
        start = datetime.combine(self.selected_date(), time(now.hour, now.minute), tzinfo=zone)
        self.editor = new_editor_state(
            start,
            time_zone=self.context.time_zone,
            duration=self.context.settings.calendar.default_event_duration,
        )
        return self.editor

    def begin_edit(self, event_id: str) -> EditorState:
        self.editor = editor_state_for(self.context.store.get_event(event_id))
        return self.editor

    def dispatch(self, action: EditorAction) -> EditorState:
        if self.editor is None:
            raise RuntimeError("No event is being edited.")
        self.editor = transition(self.editor, action)
        return self.editor

    def attach_contacts(self, contacts: Sequence[Contact]) -> EditorState:
        saved = [self.context.store.upsert_contact(contact) for contact in contacts]
        return self.dispatch(ContactsChanged(tuple(contact.id for contact in saved)))

    def attach_location(self, location: Optional[Location]) -> EditorState:
        if location is None:
            return self.dispatch(LocationChanged(None))
        saved = self.context.store.upsert_location(location)
        return self.dispatch(LocationChanged(saved.id))

    def save_edit(self) -> Event:
        if self.editor is None:
            raise RuntimeError("No event is being edited.")
        saved = self.context.store.save_event(
            to_event(self.editor),
            alarm_time_set_by_user=self.editor.alarm_time_set_by_user,
        )
        self.editor = None
        logger.debug("Editor closed after saving %s", saved.id)
        return saved

    def cancel_edit(self) -> None:
        self.editor = None
        # Contacts or locations attached during the edit may now be unreferenced.
        self.context.store.remove_orphans()

    def create_event(
        self,
        name: Optional[str],
        date_start: datetime,
        date_end: datetime,
        *,
        alarm: bool = False,
        alarm_time: Optional[datetime] = None,
    ) -> Event:
        self.begin_new_event(at=date_start)
        for action in self._creation_actions(name, date_start, date_end, alarm, alarm_time):
            self.dispatch(action)
        return self.save_edit()

    @staticmethod
    def _creation_actions(
        name: Optional[str],
        date_start: datetime,
        date_end: datetime,
        alarm: bool,
        alarm_time: Optional[datetime],
    ) -> List[EditorAction]:
        actions: List[EditorAction] = [Rename(name), ChangeDateStart(date_start), ChangeDateEnd(date_end)]
        if alarm:
            actions.append(ToggleAlarm(True))
            if alarm_time is not None:
                actions.append(ChangeAlarmTime(alarm_time))
        return actions

    def delete_event(self, event_id: str) -> bool:
        return self.context.store.delete_event(event_id)
