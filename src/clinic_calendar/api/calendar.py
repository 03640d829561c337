from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from ..calendar import (
    calendar_grid as build_grid,
    date_range as build_date_range,
    days_in_month,
    first_day_of_month,
    month_dates as build_month_dates,
    parse_day,
    time_slots as build_time_slots,
    week_dates as build_week_dates,
)
from ..domain import EventType
from .registry import register_function


MAX_RANGE_DAYS = 366 * 5


def _isoformat(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day else None


@register_function(
    "calendar_grid",
    description="Return the 42 cells of a month view (month is 0-indexed); padding cells are null.",
    tags=("calendar", "month"),
)
def calendar_grid(year: int, month: int) -> Dict[str, Any]:
    cells = build_grid(year, month)
    first = first_day_of_month(year, month)
    return {
        "year": first.year,
        "month": first.month - 1,
        "daysInMonth": days_in_month(year, month),
        "cells": [_isoformat(cell) for cell in cells],
    }


@register_function(
    "month_dates",
    description="List every date of a month (month is 0-indexed).",
    tags=("calendar", "month"),
)
def month_dates(year: int, month: int) -> Dict[str, List[str]]:
    return {"dates": [day.isoformat() for day in build_month_dates(year, month)]}


@register_function(
    "week_dates",
    description="List the Sunday-to-Saturday week containing the given ISO date.",
    tags=("calendar", "week"),
)
def week_dates(day: str) -> Dict[str, List[str]]:
    return {"dates": [item.isoformat() for item in build_week_dates(parse_day(day))]}


@register_function(
    "date_range",
    description=f"List every date between two ISO dates, inclusive (at most {MAX_RANGE_DAYS} days).",
    tags=("calendar", "range"),
)
def date_range(start: str, end: str) -> Dict[str, List[str]]:
    first, last = parse_day(start), parse_day(end)
    if (last - first).days >= MAX_RANGE_DAYS:
        raise ValueError(f"date range is limited to {MAX_RANGE_DAYS} days")
    return {"dates": [item.isoformat() for item in build_date_range(first, last)]}


@register_function(
    "time_slots",
    description="Clock labels for the day view at a fixed minute interval.",
    tags=("calendar", "day"),
)
def time_slots(start_hour: int = 8, end_hour: int = 18, interval_minutes: int = 30) -> Dict[str, List[str]]:
    return {"slots": list(build_time_slots(start_hour, end_hour, interval_minutes))}


@register_function(
    "event_types",
    description="List the supported event types with their display label and colour token.",
    tags=("events", "metadata"),
)
def event_types() -> Dict[str, List[Dict[str, str]]]:
    return {
        "eventTypes": [
            {"value": event_type.value, "label": event_type.label, "color": event_type.color}
            for event_type in EventType
        ]
    }
