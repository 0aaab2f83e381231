from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

NUM_DAYS_IN_WEEK = 7
NUM_WEEKS_IN_MONTH = 6
NUM_CELLS_IN_MONTH = NUM_DAYS_IN_WEEK * NUM_WEEKS_IN_MONTH


def _parse_datetime(value: Any, time_zone: Optional[str] = None) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        raise ValueError(f"Datetime without offset: {value!r}")
    if time_zone:
        return parsed.astimezone(ZoneInfo(time_zone))
    return parsed


@dataclass(frozen=True, slots=True)
class DateComponents:
    year: int
    month: int
    day: int = 1
    # Derived from the other fields, so it never takes part in equality.
    weekday: Optional[int] = field(default=None, compare=False)

    @property
    def month_key(self) -> Tuple[int, int]:
        return (self.year, self.month)


@dataclass(frozen=True, slots=True)
class MonthGrid:
    """Fixed 6x7 layout of a month; ``None`` marks a blank cell."""

    year: int
    month: int
    cells: Tuple[Optional[int], ...]

    @property
    def days(self) -> int:
        return sum(1 for cell in self.cells if cell is not None)

    @property
    def first_index(self) -> int:
        return self.index_of(1)

    def index_of(self, day: int) -> int:
        try:
            return self.cells.index(day)
        except ValueError:
            raise ValueError(f"Day {day} is not part of {self.year}-{self.month:02d}") from None

    def day_at(self, index: int) -> Optional[int]:
        return self.cells[index]

    def weeks(self) -> List[Tuple[Optional[int], ...]]:
        return [
            self.cells[row * NUM_DAYS_IN_WEEK : (row + 1) * NUM_DAYS_IN_WEEK]
            for row in range(NUM_WEEKS_IN_MONTH)
        ]


@dataclass(frozen=True, slots=True)
class DayWindow:
    lower_bound: datetime
    upper_bound: datetime

    def __contains__(self, instant: datetime) -> bool:
        if instant.tzinfo is None:
            raise ValueError(f"Datetime without offset: {instant!r}")
        moment = instant.astimezone(timezone.utc)
        return self.lower_bound.astimezone(timezone.utc) <= moment < self.upper_bound.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class Contact:
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_numbers: Tuple[str, ...] = ()
    emails: Tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Contact":
        return cls(
            id=str(record["id"]),
            first_name=record.get("first_name"),
            last_name=record.get("last_name"),
            phone_numbers=tuple(record.get("phone_numbers") or ()),
            emails=tuple(record.get("emails") or ()),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone_numbers": list(self.phone_numbers),
            "emails": list(self.emails),
        }


@dataclass(frozen=True, slots=True)
class Location:
    id: str
    name: str
    latitude: float
    longitude: float
    address: str = ""

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Location":
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            latitude=float(record["latitude"]),
            longitude=float(record["longitude"]),
            address=record.get("address") or "",
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
        }


@dataclass(frozen=True, slots=True)
class Event:
    id: str
    date_start: datetime
    date_end: datetime
    name: Optional[str] = None
    date_start_time_zone: str = "UTC"
    date_end_time_zone: str = "UTC"
    alarm: bool = False
    alarm_time: Optional[datetime] = None
    contact_ids: Tuple[str, ...] = ()
    location_id: Optional[str] = None

    def with_changes(self, **changes: Any) -> "Event":
        return replace(self, **changes)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        start_tz = record.get("date_start_time_zone") or "UTC"
        end_tz = record.get("date_end_time_zone") or start_tz
        alarm_time = record.get("alarm_time")
        return cls(
            id=str(record["id"]),
            name=record.get("name"),
            date_start=_parse_datetime(record["date_start"], start_tz),
            date_start_time_zone=start_tz,
            date_end=_parse_datetime(record["date_end"], end_tz),
            date_end_time_zone=end_tz,
            alarm=bool(record.get("alarm", False)),
            alarm_time=_parse_datetime(alarm_time, start_tz) if alarm_time else None,
            contact_ids=tuple(str(item) for item in record.get("contact_ids") or ()),
            location_id=record.get("location_id"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date_start": self.date_start.isoformat(),
            "date_start_time_zone": self.date_start_time_zone,
            "date_end": self.date_end.isoformat(),
            "date_end_time_zone": self.date_end_time_zone,
            "alarm": self.alarm,
            "alarm_time": self.alarm_time.isoformat() if self.alarm_time else None,
            "contact_ids": list(self.contact_ids),
            "location_id": self.location_id,
        }
