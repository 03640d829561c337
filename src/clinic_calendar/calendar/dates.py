"""Calendar date arithmetic.

Months are 0-indexed (January is ``0``) throughout this module and the grid
helpers built on it, matching what the web client sends. Weekdays count from
Sunday (``0``) to Saturday (``6``).
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, TypeVar, Union

DateLike = Union[date, datetime]
_D = TypeVar("_D", date, datetime)


def _month_start(year: int, month: int) -> date:
    # Normalise overflowing months (12 -> January of next year) the way the
    # client's Date constructor does.
    extra_years, month_index = divmod(month, 12)
    return date(year + extra_years, month_index + 1, 1)


def first_day_of_month(year: int, month: int) -> date:
    return _month_start(year, month)


def last_day_of_month(year: int, month: int) -> date:
    first = _month_start(year, month)
    if first.month == 12:
        # Year 9999 has no following January.
        return first.replace(day=31)
    # "Day 0" of the following month.
    return first.replace(month=first.month + 1) - timedelta(days=1)


def days_in_month(year: int, month: int) -> int:
    return last_day_of_month(year, month).day


def day_of_week(value: DateLike) -> int:
    """Return the weekday with Sunday as ``0``."""

    return (value.weekday() + 1) % 7


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_same_day(first: DateLike, second: DateLike) -> bool:
    return _as_date(first) == _as_date(second)


def is_today(value: DateLike, today: Optional[date] = None) -> bool:
    return is_same_day(value, today or date.today())


def add_days(value: _D, days: int) -> _D:
    return value + timedelta(days=days)


def subtract_days(value: _D, days: int) -> _D:
    return value - timedelta(days=days)


def format_time(value: datetime) -> str:
    """Render ``value`` as a 12-hour clock label such as ``9:30 AM``."""

    return format_clock(value.hour, value.minute)


def format_clock(hour: int, minute: int = 0) -> str:
    display_hour = 12 if hour % 12 == 0 else hour % 12
    period = "PM" if hour >= 12 else "AM"
    return f"{display_hour}:{minute:02d} {period}"


def parse_instant(value: Union[str, datetime]) -> datetime:
    """Parse an ISO-8601 instant.

    Naive values are read as local wall-clock time and given the local
    offset so that every stored instant is comparable with every other.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:  # noqa: TRY003
            raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def parse_day(value: Union[str, date]) -> date:
    """Parse an ISO date, accepting a full timestamp and keeping its date part."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as exc:  # noqa: TRY003
        raise ValueError(f"Invalid ISO date: {value}") from exc


def now() -> datetime:
    return datetime.now().astimezone()


__all__ = [
    "DateLike",
    "add_days",
    "day_of_week",
    "days_in_month",
    "first_day_of_month",
    "format_clock",
    "format_time",
    "is_same_day",
    "is_today",
    "last_day_of_month",
    "now",
    "parse_day",
    "parse_instant",
    "subtract_days",
]
