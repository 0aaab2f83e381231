from __future__ import annotations

from dataclasses import dataclass, field

from ..config import AppSettings, get_settings
from ..data import CalendarStore
from ..engine import DateComponentsClock, EventIntervalIndex, GregorianCalendar, MonthGridBuilder


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, the store and the engine."""

    settings: AppSettings = field(default_factory=get_settings)
    store: CalendarStore = field(init=False)
    clock: DateComponentsClock = field(init=False)
    grid: MonthGridBuilder = field(init=False)
    index: EventIntervalIndex = field(init=False)

    def __post_init__(self) -> None:
        self.store = CalendarStore(self.settings.storage.state_file)
        self.clock = DateComponentsClock(GregorianCalendar(self.settings.calendar.time_zone))
        self.grid = MonthGridBuilder(self.clock)
        self.index = EventIntervalIndex(self.clock)

    @property
    def time_zone(self) -> str:
        return self.settings.calendar.time_zone
