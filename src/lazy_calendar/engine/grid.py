from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..domain import DateComponents, GridOverflowError, InvalidDateError, MonthGrid
from ..domain.models import NUM_CELLS_IN_MONTH, NUM_DAYS_IN_WEEK
from .clock import DateComponentsClock


@dataclass(frozen=True, slots=True)
class MonthGridBuilder:
    """Lay a month out on the fixed 6x7 grid used by the month view.

    Cells before day 1 and after the last day stay blank; days of the
    neighbouring months are never shown.
    """

    clock: DateComponentsClock = field(default_factory=DateComponentsClock)

    def build(self, year: int, month: int) -> MonthGrid:
        start_weekday = self.clock.month_start_weekday(year, month)
        num_days = self.clock.days_in_month(year, month)
        if not 1 <= start_weekday <= NUM_DAYS_IN_WEEK:
            raise InvalidDateError(f"Calendar returned weekday {start_weekday} for {year}-{month:02d}")

        offset = start_weekday - 1
        if offset + num_days > NUM_CELLS_IN_MONTH:
            raise GridOverflowError(
                f"{year}-{month:02d} needs {offset + num_days} cells, grid holds {NUM_CELLS_IN_MONTH}"
            )

        cells: List[Optional[int]] = [None] * NUM_CELLS_IN_MONTH
        for day in range(1, num_days + 1):
            cells[offset + day - 1] = day
        return MonthGrid(year=year, month=month, cells=tuple(cells))

    def build_for(self, components: DateComponents) -> MonthGrid:
        return self.build(components.year, components.month)
