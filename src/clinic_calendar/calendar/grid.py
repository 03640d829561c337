"""Month, week and time-slot layouts for the calendar views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator, List, Optional, Sequence

from .dates import day_of_week, days_in_month, first_day_of_month, format_clock

GRID_ROWS = 6
GRID_COLUMNS = 7
GRID_CELLS = GRID_ROWS * GRID_COLUMNS

GridCell = Optional[date]


def calendar_grid(year: int, month: int) -> List[GridCell]:
    """Return the 42 cells of a month view.

    Leading ``None`` cells pad the first week up to the weekday of the 1st;
    trailing ``None`` cells pad the grid to six full weeks so every month
    renders at the same height.
    """

    first = first_day_of_month(year, month)
    cells: List[GridCell] = [None] * day_of_week(first)
    cells.extend(first + timedelta(days=offset) for offset in range(days_in_month(year, month)))
    cells.extend([None] * (GRID_CELLS - len(cells)))
    return cells


def grid_weeks(cells: Sequence[GridCell]) -> List[List[GridCell]]:
    return [list(cells[start : start + GRID_COLUMNS]) for start in range(0, len(cells), GRID_COLUMNS)]


def month_dates(year: int, month: int) -> List[date]:
    first = first_day_of_month(year, month)
    return [first + timedelta(days=offset) for offset in range(days_in_month(year, month))]


def week_dates(anchor: date) -> List[date]:
    """Return Sunday through Saturday of the week containing ``anchor``."""

    week_start = anchor - timedelta(days=day_of_week(anchor))
    return [week_start + timedelta(days=offset) for offset in range(GRID_COLUMNS)]


def date_range(start: date, end: date) -> List[date]:
    """Every date from ``start`` to ``end`` inclusive; empty when ``end`` precedes ``start``."""

    delta = (end - start).days
    return [start + timedelta(days=index) for index in range(delta + 1)]


@dataclass(frozen=True)
class TimeSlots:
    """Clock labels at a fixed interval, regenerated on every iteration."""

    start_hour: int = 8
    end_hour: int = 18
    interval_minutes: int = 30

    def __post_init__(self) -> None:
        if self.interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        if not 0 <= self.start_hour <= 24 or not 0 <= self.end_hour <= 24:
            raise ValueError("hours must fall between 0 and 24")

    def __iter__(self) -> Iterator[str]:
        for hour in range(self.start_hour, self.end_hour):
            for minute in range(0, 60, self.interval_minutes):
                yield format_clock(hour, minute)

    def __len__(self) -> int:
        per_hour = len(range(0, 60, self.interval_minutes))
        return max(self.end_hour - self.start_hour, 0) * per_hour


def time_slots(start_hour: int = 8, end_hour: int = 18, interval_minutes: int = 30) -> TimeSlots:
    return TimeSlots(start_hour=start_hour, end_hour=end_hour, interval_minutes=interval_minutes)


__all__ = [
    "GRID_CELLS",
    "GRID_COLUMNS",
    "GRID_ROWS",
    "GridCell",
    "TimeSlots",
    "calendar_grid",
    "date_range",
    "grid_weeks",
    "month_dates",
    "time_slots",
    "week_dates",
]
