from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Generic, Iterable, List, Protocol, TypeVar

from .dates import format_clock, is_same_day


class Scheduled(Protocol):
    start_time: datetime


_E = TypeVar("_E", bound=Scheduled)


@dataclass
class HourBucket(Generic[_E]):
    hour: int
    label: str
    events: List[_E] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.events


def hourly_buckets(
    events: Iterable[_E],
    day: date,
    *,
    start_hour: int = 8,
    end_hour: int = 18,
) -> List[HourBucket[_E]]:
    """Group the events starting on ``day`` by their start hour for the day view.

    Both ``start_hour`` and ``end_hour`` get a row. Events starting outside
    that range have no row and are left out.
    """

    if start_hour > end_hour:
        raise ValueError("start_hour must not be after end_hour")
    buckets: dict[int, HourBucket[_E]] = {
        hour: HourBucket(hour=hour, label=format_clock(hour)) for hour in range(start_hour, end_hour + 1)
    }
    for event in sorted(events, key=lambda item: item.start_time):
        if not is_same_day(event.start_time, day):
            continue
        bucket = buckets.get(event.start_time.hour)
        if bucket is not None:
            bucket.events.append(event)
    return list(buckets.values())


__all__ = ["HourBucket", "Scheduled", "hourly_buckets"]
