"""Pure calendar arithmetic: dates, month grids, time slots and day buckets."""

from __future__ import annotations

from .dates import (
    add_days,
    day_of_week,
    days_in_month,
    first_day_of_month,
    format_time,
    is_same_day,
    is_today,
    last_day_of_month,
    parse_day,
    parse_instant,
    subtract_days,
)
from .grid import GRID_CELLS, TimeSlots, calendar_grid, date_range, grid_weeks, month_dates, time_slots, week_dates
from .schedule import HourBucket, hourly_buckets

__all__ = [
    "GRID_CELLS",
    "HourBucket",
    "TimeSlots",
    "add_days",
    "calendar_grid",
    "date_range",
    "day_of_week",
    "days_in_month",
    "first_day_of_month",
    "format_time",
    "grid_weeks",
    "hourly_buckets",
    "is_same_day",
    "is_today",
    "last_day_of_month",
    "month_dates",
    "parse_day",
    "parse_instant",
    "subtract_days",
    "time_slots",
    "week_dates",
]
