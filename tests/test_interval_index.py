"""
Tests for day windows, overlap selection and alarm rules.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from lazy_calendar.domain import AlarmVisibility, AmbiguousOverlapError, Event, InvalidDateError
from lazy_calendar.engine import (
    DateComponentsClock,
    EventIntervalIndex,
    GregorianCalendar,
    initial_alarm_visibility,
    recompute_alarm_time,
    toggle_alarm,
)
from lazy_calendar.engine.interval_index import ALARM_OPTION_ROWS

NEW_YORK = ZoneInfo("America/New_York")


class TestDayWindow:
    def test_window_starts_at_local_midnight(self, index):
        window = index.day_window(date(2024, 3, 9))
        assert window.lower_bound == datetime(2024, 3, 9, tzinfo=NEW_YORK)
        assert window.upper_bound == datetime(2024, 3, 10, tzinfo=NEW_YORK)

    def test_window_from_instant_uses_local_day(self, index):
        instant = datetime(2024, 3, 9, 3, 0, tzinfo=timezone.utc)  # 22:00 on the 8th in New York
        window = index.day_window(instant)
        assert window.lower_bound == datetime(2024, 3, 8, tzinfo=NEW_YORK)

    def test_window_spans_24_elapsed_hours_across_dst(self, index):
        window = index.day_window(date(2024, 3, 10))
        assert window.upper_bound.astimezone(timezone.utc) - window.lower_bound.astimezone(timezone.utc) == timedelta(hours=24)
        assert window.upper_bound.astimezone(timezone.utc) == datetime(2024, 3, 11, 5, tzinfo=timezone.utc)
        assert window.upper_bound.astimezone(NEW_YORK).hour == 1

    def test_explicit_time_zone(self, index):
        window = index.day_window(date(2024, 3, 10), "UTC")
        assert window.lower_bound == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_window_contains_is_half_open(self, index):
        window = index.day_window(date(2024, 3, 9))
        assert window.lower_bound in window
        assert window.upper_bound not in window


class TestEventsOverlapping:
    def test_overlap_scenario(self):
        index = EventIntervalIndex(DateComponentsClock(GregorianCalendar("UTC")))
        zone = timezone.utc

        def event(event_id, start, end):
            return Event(id=event_id, date_start=datetime(*start, tzinfo=zone), date_end=datetime(*end, tzinfo=zone))

        crosses_midnight = event("A", (2024, 3, 9, 23, 0), (2024, 3, 10, 1, 0))
        starts_inside = event("B", (2024, 3, 10, 23, 59), (2024, 3, 11, 0, 30))
        starts_at_upper = event("C", (2024, 3, 11, 0, 0), (2024, 3, 11, 2, 0))
        ends_before = event("D", (2024, 3, 8), (2024, 3, 9))

        window = index.day_window(date(2024, 3, 10))
        selected = index.events_overlapping([starts_at_upper, ends_before, starts_inside, crosses_midnight], window)
        assert [item.id for item in selected] == ["A", "B"]

    def test_event_spanning_whole_day_is_included(self, index, make_event):
        multi_day = make_event("long", (2024, 3, 9, 12), (2024, 3, 12, 12))
        window = index.day_window(date(2024, 3, 10))
        assert index.events_overlapping([multi_day], window) == [multi_day]

    def test_event_ending_exactly_at_lower_bound_is_included(self, index, make_event):
        ends_at_midnight = make_event("edge", (2024, 3, 9, 22), (2024, 3, 10, 0))
        window = index.day_window(date(2024, 3, 10))
        assert index.events_overlapping([ends_at_midnight], window) == [ends_at_midnight]

    def test_sorted_by_start_with_stable_ties(self, index, make_event):
        ten = make_event("ten", (2024, 3, 10, 10), (2024, 3, 10, 11))
        nine_first = make_event("nine-first", (2024, 3, 10, 9), (2024, 3, 10, 10))
        nine_second = make_event("nine-second", (2024, 3, 10, 9), (2024, 3, 10, 9, 30))
        selected = index.events_for_day([ten, nine_first, nine_second], date(2024, 3, 10))
        assert [item.id for item in selected] == ["nine-first", "nine-second", "ten"]

    def test_events_in_other_zones_compare_on_instant(self, index, make_event):
        tokyo = Event(
            id="tokyo",
            date_start=datetime(2024, 3, 10, 23, 30, tzinfo=ZoneInfo("Asia/Tokyo")),  # 10:30 in New York
            date_end=datetime(2024, 3, 11, 0, 30, tzinfo=ZoneInfo("Asia/Tokyo")),
            date_start_time_zone="Asia/Tokyo",
            date_end_time_zone="Asia/Tokyo",
        )
        nine = make_event("nine", (2024, 3, 10, 9), (2024, 3, 10, 10))
        selected = index.events_for_day([tokyo, nine], date(2024, 3, 10))
        assert [item.id for item in selected] == ["nine", "tokyo"]

    def test_reversed_interval_raises(self, index, make_event):
        broken = make_event("broken", (2024, 3, 10, 10), (2024, 3, 10, 9))
        with pytest.raises(AmbiguousOverlapError):
            index.events_for_day([broken], date(2024, 1, 1))

    def test_repeated_hour_sorts_by_instant(self, index):
        # 2024-11-03 01:00-02:00 happens twice in New York.
        first = Event(
            id="edt_0145",
            date_start=datetime(2024, 11, 3, 1, 45, tzinfo=NEW_YORK),
            date_end=datetime(2024, 11, 3, 1, 50, tzinfo=NEW_YORK),
        )
        second = Event(
            id="est_0115",
            date_start=datetime(2024, 11, 3, 1, 15, fold=1, tzinfo=NEW_YORK),
            date_end=datetime(2024, 11, 3, 1, 20, fold=1, tzinfo=NEW_YORK),
        )
        selected = index.events_for_day([second, first], date(2024, 11, 3))
        assert [item.id for item in selected] == ["edt_0145", "est_0115"]

    def test_interval_across_repeated_hour_is_not_reversed(self, index):
        # 01:45 EDT to 01:15 EST is a 30 minute event.
        event = Event(
            id="fold",
            date_start=datetime(2024, 11, 3, 1, 45, tzinfo=NEW_YORK),
            date_end=datetime(2024, 11, 3, 1, 15, fold=1, tzinfo=NEW_YORK),
        )
        assert index.events_for_day([event], date(2024, 11, 3)) == [event]

    def test_naive_event_is_rejected(self, index):
        naive = Event(id="naive", date_start=datetime(2024, 3, 10, 9), date_end=datetime(2024, 3, 10, 10))
        with pytest.raises(InvalidDateError):
            index.events_for_day([naive], date(2024, 3, 10))

    def test_mixed_naive_and_aware_event_is_rejected(self, index):
        mixed = Event(id="mixed", date_start=datetime(2024, 3, 10, 9), date_end=datetime(2024, 3, 10, 10, tzinfo=NEW_YORK))
        with pytest.raises(InvalidDateError):
            index.events_for_day([mixed], date(2024, 3, 10))

    def test_input_is_not_mutated(self, index, make_event):
        events = [
            make_event("b", (2024, 3, 10, 10), (2024, 3, 10, 11)),
            make_event("a", (2024, 3, 10, 9), (2024, 3, 10, 10)),
        ]
        index.events_for_day(events, date(2024, 3, 10))
        assert [item.id for item in events] == ["b", "a"]


class TestAlarmRules:
    def test_disabled_alarm_clears_time(self, make_event):
        event = make_event(
            "e", (2024, 3, 10, 13), (2024, 3, 10, 15), alarm=True, alarm_time=datetime(2024, 3, 10, 14, tzinfo=NEW_YORK)
        )
        saved = recompute_alarm_time(event.with_changes(alarm=False), previous_alarm_set_by_user=True)
        assert saved.alarm_time is None

    def test_alarm_follows_start_until_user_sets_it(self, make_event):
        event = make_event(
            "e", (2024, 3, 10, 13), (2024, 3, 10, 15), alarm=True, alarm_time=datetime(2024, 3, 10, 12, tzinfo=NEW_YORK)
        )
        moved = event.with_changes(date_start=datetime(2024, 3, 10, 14, tzinfo=NEW_YORK))
        assert recompute_alarm_time(moved, previous_alarm_set_by_user=False).alarm_time == moved.date_start

    def test_user_alarm_time_is_kept(self, index, make_event):
        alarm_time = datetime(2024, 3, 10, 12, tzinfo=NEW_YORK)
        event = make_event("e", (2024, 3, 10, 13), (2024, 3, 10, 15), alarm=True, alarm_time=alarm_time)
        assert index.recompute_alarm_time(event, previous_alarm_set_by_user=True).alarm_time == alarm_time

    def test_returns_new_value(self, make_event):
        event = make_event("e", (2024, 3, 10, 13), (2024, 3, 10, 15), alarm=True)
        result = recompute_alarm_time(event, previous_alarm_set_by_user=False)
        assert result is not event
        assert event.alarm_time is None


class TestAlarmVisibility:
    def test_initial_state(self, make_event):
        assert initial_alarm_visibility() is AlarmVisibility.OFF
        assert initial_alarm_visibility(make_event("e", (2024, 3, 10), (2024, 3, 10), alarm=True)) is AlarmVisibility.ON

    def test_turning_on_reveals_options(self):
        transition = toggle_alarm(AlarmVisibility.OFF, True)
        assert transition.state is AlarmVisibility.ON
        assert transition.revealed == ALARM_OPTION_ROWS
        assert not transition.reset_alarm_time

    def test_turning_off_hides_options_and_resets_time(self):
        transition = toggle_alarm(AlarmVisibility.ON, False)
        assert transition.state is AlarmVisibility.OFF
        assert transition.hidden == ALARM_OPTION_ROWS
        assert transition.reset_alarm_time

    def test_same_state_is_a_no_op(self):
        transition = toggle_alarm(AlarmVisibility.ON, True)
        assert transition.state is AlarmVisibility.ON
        assert transition.revealed == () and transition.hidden == ()
