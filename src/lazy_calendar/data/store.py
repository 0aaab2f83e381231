from __future__ import annotations

import logging
from collections import Counter
from copy import deepcopy
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import orjson

from ..core import STATE_FILE, ensure_data_dir
from ..domain import Contact, Event, EventNotFoundError, Location, StoreCorruptedError
from ..engine.interval_index import as_instant, check_interval, recompute_alarm_time

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

DEFAULT_CALENDAR_STATE: Dict[str, Any] = {
    "events": [],
    "contacts": [],
    "locations": [],
    "counters": {"event": 0, "contact": 0, "location": 0},
    "metadata": {"schema_version": SCHEMA_VERSION},
}


class CalendarStore:
    """JSON file holding events, contacts and locations keyed by stable ids.

    Events reference contacts and locations by id only. Contacts and
    locations that no event references any more are dropped by
    :meth:`remove_orphans`, which runs after every delete.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or STATE_FILE
        self._state: Optional[Dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> None:
        if self._state is not None:
            return
        if not self._path.exists():
            ensure_data_dir(self._path.parent)
            self._state = deepcopy(DEFAULT_CALENDAR_STATE)
            self.persist()
            logger.info("Created calendar state at %s", self._path)
            return
        raw = self._path.read_bytes()
        if not raw.strip():
            self._state = deepcopy(DEFAULT_CALENDAR_STATE)
            return
        try:
            self._state = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            raise StoreCorruptedError(f"Calendar state at {self._path} is not valid JSON") from exc
        if not isinstance(self._state, dict):
            raise StoreCorruptedError(f"Calendar state at {self._path} is not a JSON object")
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_CALENDAR_STATE.items():
            if key not in self._state:
                self._state[key] = deepcopy(value)
        logger.debug("Loaded %d events from %s", len(self._state["events"]), self._path)

    @property
    def data(self) -> Dict[str, Any]:
        self._ensure_materialized()
        assert self._state is not None
        return self._state

    def persist(self) -> None:
        if self._state is None:
            return
        ensure_data_dir(self._path.parent)
        payload = orjson.dumps(self._state, option=orjson.OPT_INDENT_2)
        self._path.write_bytes(payload + b"\n")

    def mutate(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        self._ensure_materialized()
        assert self._state is not None
        result = callback(self._state)
        self.persist()
        return result

    @staticmethod
    def consume_id(state: Dict[str, Any], prefix: str) -> str:
        counters = state.setdefault("counters", {})
        current = counters.get(prefix, 0) + 1
        counters[prefix] = current
        return f"{prefix}_{current:04d}"

    # Events -----------------------------------------------------------------

    def list_events(self) -> List[Event]:
        return [Event.from_record(record) for record in self.data["events"]]

    def get_event(self, event_id: str) -> Event:
        for record in self.data["events"]:
            if record["id"] == event_id:
                return Event.from_record(record)
        raise EventNotFoundError(event_id)

    def events_in_range(self, start: datetime, end: datetime) -> List[Event]:
        """Snapshot of events touching ``[start, end]``, in stored order."""

        lower, upper = as_instant(start), as_instant(end)
        return [
            event
            for event in self.list_events()
            if as_instant(event.date_start) <= upper and as_instant(event.date_end) >= lower
        ]

    def save_event(self, event: Event, *, alarm_time_set_by_user: bool = True) -> Event:
        """Insert or replace ``event``; an empty id gets a fresh one.

        A disabled alarm is saved without an alarm time.
        """

        check_interval(event)
        self._check_references(event)
        prepared = recompute_alarm_time(event, alarm_time_set_by_user)

        def _upsert(state: Dict[str, Any]) -> Event:
            saved = prepared
            if not saved.id:
                saved = saved.with_changes(id=self.consume_id(state, "event"))
            record = saved.to_record()
            events = state["events"]
            for index, existing in enumerate(events):
                if existing["id"] == saved.id:
                    events[index] = record
                    break
            else:
                events.append(record)
            return saved

        saved = self.mutate(_upsert)
        logger.info("Saved event %s (%s)", saved.id, saved.name or "untitled")
        self.remove_orphans()
        return saved

    def delete_event(self, event_id: str) -> bool:
        def _delete(state: Dict[str, Any]) -> bool:
            before = len(state["events"])
            state["events"] = [record for record in state["events"] if record["id"] != event_id]
            return len(state["events"]) != before

        deleted = self.mutate(_delete)
        if deleted:
            logger.info("Deleted event %s", event_id)
            self.remove_orphans()
        return deleted

    def _check_references(self, event: Event) -> None:
        known_contacts = {record["id"] for record in self.data["contacts"]}
        missing = [contact_id for contact_id in event.contact_ids if contact_id not in known_contacts]
        if missing:
            raise KeyError(f"Unknown contact ids: {', '.join(missing)}")
        if event.location_id is not None:
            known_locations = {record["id"] for record in self.data["locations"]}
            if event.location_id not in known_locations:
                raise KeyError(f"Unknown location id: {event.location_id}")

    # Contacts and locations -------------------------------------------------

    def upsert_contact(self, contact: Contact) -> Contact:
        return self._upsert_record("contacts", "contact", contact, Contact.from_record)

    def upsert_location(self, location: Location) -> Location:
        return self._upsert_record("locations", "location", location, Location.from_record)

    def list_contacts(self, contact_ids: Optional[Tuple[str, ...]] = None) -> List[Contact]:
        contacts = [Contact.from_record(record) for record in self.data["contacts"]]
        if contact_ids is None:
            return contacts
        by_id = {contact.id: contact for contact in contacts}
        return [by_id[contact_id] for contact_id in contact_ids if contact_id in by_id]

    def get_location(self, location_id: str) -> Optional[Location]:
        for record in self.data["locations"]:
            if record["id"] == location_id:
                return Location.from_record(record)
        return None

    def _upsert_record(self, key: str, prefix: str, item: Any, factory: Callable[[Dict[str, Any]], Any]) -> Any:
        def _upsert(state: Dict[str, Any]) -> Any:
            record = item.to_record()
            if not record["id"]:
                record["id"] = self.consume_id(state, prefix)
            records = state[key]
            for index, existing in enumerate(records):
                if existing["id"] == record["id"]:
                    records[index] = record
                    break
            else:
                records.append(record)
            return factory(record)

        return self.mutate(_upsert)

    def reference_counts(self) -> Tuple[Counter, Counter]:
        contact_refs: Counter = Counter()
        location_refs: Counter = Counter()
        for record in self.data["events"]:
            contact_refs.update(set(record.get("contact_ids") or ()))
            if record.get("location_id"):
                location_refs[record["location_id"]] += 1
        return contact_refs, location_refs

    def remove_orphans(self) -> Tuple[List[str], List[str]]:
        """Drop contacts and locations with no referencing event."""

        contact_refs, location_refs = self.reference_counts()

        def _sweep(state: Dict[str, Any]) -> Tuple[List[str], List[str]]:
            orphan_contacts = [record["id"] for record in state["contacts"] if contact_refs[record["id"]] == 0]
            orphan_locations = [record["id"] for record in state["locations"] if location_refs[record["id"]] == 0]
            state["contacts"] = [record for record in state["contacts"] if contact_refs[record["id"]] > 0]
            state["locations"] = [record for record in state["locations"] if location_refs[record["id"]] > 0]
            return orphan_contacts, orphan_locations

        removed_contacts, removed_locations = self.mutate(_sweep)
        if removed_contacts or removed_locations:
            logger.info(
                "Removed %d orphaned contacts and %d orphaned locations",
                len(removed_contacts),
                len(removed_locations),
            )
        return removed_contacts, removed_locations


__all__ = ["CalendarStore", "DEFAULT_CALENDAR_STATE", "SCHEMA_VERSION"]
