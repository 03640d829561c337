from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Generic, List, Optional, TypeVar

from ..domain import Event, Note, UserProfile
from ..errors import NotFoundError
from .base import DEFAULT_UPCOMING_LIMIT, CalendarStores, events_on_day, first_note_on_day, upcoming_events

logger = logging.getLogger(__name__)

_R = TypeVar("_R", Event, Note, UserProfile)


class _MemoryTable(Generic[_R]):
    """Id-keyed rows with a counter that only moves forward."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        self._rows: Dict[int, _R] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    def values(self) -> List[_R]:
        return list(self._rows.values())

    def get(self, identifier: int) -> Optional[_R]:
        return self._rows.get(identifier)

    async def insert(self, record: _R) -> _R:
        async with self._lock:
            identifier = self._next_id
            self._next_id += 1
            stored = record.with_id(identifier)
            self._rows[identifier] = stored
        logger.debug("Created %s %s", self.entity, identifier)
        return stored

    async def replace(self, identifier: int, record: _R) -> _R:
        async with self._lock:
            if identifier not in self._rows:
                raise NotFoundError(self.entity, identifier)
            stored = record.with_id(identifier)
            self._rows[identifier] = stored
        return stored

    async def remove(self, identifier: int) -> bool:
        async with self._lock:
            if self._rows.pop(identifier, None) is None:
                raise NotFoundError(self.entity, identifier)
        logger.debug("Deleted %s %s", self.entity, identifier)
        return True


class MemoryEventStore:
    def __init__(self) -> None:
        self._table: _MemoryTable[Event] = _MemoryTable("event")

    async def list_all(self) -> List[Event]:
        return self._table.values()

    async def get(self, event_id: int) -> Optional[Event]:
        return self._table.get(event_id)

    async def by_date(self, day: date) -> List[Event]:
        return events_on_day(self._table.values(), day)

    async def upcoming(self, from_instant: datetime, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[Event]:
        return upcoming_events(self._table.values(), from_instant, limit)

    async def create(self, event: Event) -> Event:
        return await self._table.insert(event)

    async def update(self, event_id: int, event: Event) -> Event:
        return await self._table.replace(event_id, event)

    async def delete(self, event_id: int) -> bool:
        return await self._table.remove(event_id)


class MemoryNoteStore:
    def __init__(self) -> None:
        self._table: _MemoryTable[Note] = _MemoryTable("note")

    async def list_all(self) -> List[Note]:
        return self._table.values()

    async def get(self, note_id: int) -> Optional[Note]:
        return self._table.get(note_id)

    async def by_date(self, day: date) -> Optional[Note]:
        return first_note_on_day(self._table.values(), day)

    async def create(self, note: Note) -> Note:
        return await self._table.insert(note)

    async def update(self, note_id: int, note: Note) -> Note:
        return await self._table.replace(note_id, note)

    async def delete(self, note_id: int) -> bool:
        return await self._table.remove(note_id)


class MemoryProfileStore:
    def __init__(self) -> None:
        self._table: _MemoryTable[UserProfile] = _MemoryTable("profile")

    async def current(self) -> Optional[UserProfile]:
        profiles = self._table.values()
        return profiles[-1] if profiles else None

    async def save(self, profile: UserProfile) -> UserProfile:
        existing = await self.current()
        if existing is None or existing.id is None:
            return await self._table.insert(profile)
        return await self._table.replace(existing.id, replace(profile, created_at=existing.created_at))


def memory_stores() -> CalendarStores:
    return CalendarStores(
        backend="memory",
        events=MemoryEventStore(),
        notes=MemoryNoteStore(),
        profiles=MemoryProfileStore(),
    )


__all__ = ["MemoryEventStore", "MemoryNoteStore", "MemoryProfileStore", "memory_stores"]
