"""Storage contract shared by every backend.

Callers only see these protocols; whether rows live in a dict, a JSON file
or a Postgres table is decided once by :func:`clinic_calendar.data.open_store`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Protocol

from ..calendar.dates import is_same_day
from ..domain import Event, Note, UserProfile

DEFAULT_UPCOMING_LIMIT = 3


class EventStore(Protocol):
    async def list_all(self) -> List[Event]: ...

    async def get(self, event_id: int) -> Optional[Event]: ...

    async def by_date(self, day: date) -> List[Event]: ...

    async def upcoming(self, from_instant: datetime, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[Event]: ...

    async def create(self, event: Event) -> Event: ...

    async def update(self, event_id: int, event: Event) -> Event: ...

    async def delete(self, event_id: int) -> bool: ...


class NoteStore(Protocol):
    async def list_all(self) -> List[Note]: ...

    async def get(self, note_id: int) -> Optional[Note]: ...

    async def by_date(self, day: date) -> Optional[Note]: ...

    async def create(self, note: Note) -> Note: ...

    async def update(self, note_id: int, note: Note) -> Note: ...

    async def delete(self, note_id: int) -> bool: ...


class ProfileStore(Protocol):
    async def current(self) -> Optional[UserProfile]: ...

    async def save(self, profile: UserProfile) -> UserProfile: ...


@dataclass(slots=True)
class CalendarStores:
    """The set of stores one backend provides."""

    backend: str
    events: EventStore
    notes: NoteStore
    profiles: ProfileStore


def events_on_day(events: Iterable[Event], day: date) -> List[Event]:
    return [event for event in events if is_same_day(event.start_time, day)]


def upcoming_events(events: Iterable[Event], from_instant: datetime, limit: int) -> List[Event]:
    pending = [event for event in events if event.start_time >= from_instant]
    pending.sort(key=lambda event: event.start_time)
    return pending[: max(limit, 0)]


def first_note_on_day(notes: Iterable[Note], day: date) -> Optional[Note]:
    return next((note for note in notes if is_same_day(note.date, day)), None)


__all__ = [
    "DEFAULT_UPCOMING_LIMIT",
    "CalendarStores",
    "EventStore",
    "NoteStore",
    "ProfileStore",
    "events_on_day",
    "first_note_on_day",
    "upcoming_events",
]
