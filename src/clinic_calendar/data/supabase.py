from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, TypeVar

from supabase import Client, create_client

from ..config import StorageSettings, SupabaseSettings
from ..domain import Event, Note, UserProfile
from ..errors import BackingStoreError, NotFoundError
from .base import DEFAULT_UPCOMING_LIMIT, CalendarStores, events_on_day, first_note_on_day

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class SupabaseNotInitializedError(BackingStoreError):
    """Raised when accessing the Supabase client without URL or key."""


@dataclass
class SupabaseGateway:
    """Thin wrapper around the Supabase Python client.

    The client is synchronous, so every query runs in a worker thread and
    client failures are re-raised as :class:`BackingStoreError`.
    """

    settings: SupabaseSettings
    _client: Optional[Client] = None

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            raise SupabaseNotInitializedError("Supabase settings are missing URL or anon key.")
        self._client = create_client(self.settings.url, self.settings.anon_key)
        return self._client

    def table(self, name: str):
        return self.ensure_client().table(name)

    async def run(self, operation: Callable[[], _T]) -> _T:
        try:
            return await asyncio.to_thread(operation)
        except BackingStoreError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("Supabase request failed")
            raise BackingStoreError(f"Supabase request failed: {exc}") from exc


def _strip_id(record: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in record.items() if key != "id"}


@dataclass(slots=True)
class SupabaseEventStore:
    gateway: SupabaseGateway
    table_name: str

    async def _select(self, build: Callable[[Any], Any]) -> List[Event]:
        response = await self.gateway.run(lambda: build(self.gateway.table(self.table_name).select("*")).execute())
        return [Event.from_record(record) for record in response.data or []]

    async def list_all(self) -> List[Event]:
        return await self._select(lambda query: query.order("id"))

    async def get(self, event_id: int) -> Optional[Event]:
        events = await self._select(lambda query: query.eq("id", event_id).limit(1))
        return events[0] if events else None

    async def by_date(self, day: date) -> List[Event]:
        # Widen by a day on each side so rows stored with another offset are
        # still fetched, then match on the calendar date locally.
        lower = (day - timedelta(days=1)).isoformat()
        upper = (day + timedelta(days=2)).isoformat()
        events = await self._select(
            lambda query: query.gte("start_time", lower).lt("start_time", upper).order("start_time")
        )
        return events_on_day(events, day)

    async def upcoming(self, from_instant: datetime, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[Event]:
        return await self._select(
            lambda query: query.gte("start_time", from_instant.isoformat()).order("start_time").limit(max(limit, 0))
        )

    async def create(self, event: Event) -> Event:
        payload = _strip_id(event.to_record())
        response = await self.gateway.run(lambda: self.gateway.table(self.table_name).insert(payload).execute())
        if not response.data:
            raise BackingStoreError("Supabase insert returned no row for event")
        return Event.from_record(response.data[0])

    async def update(self, event_id: int, event: Event) -> Event:
        payload = _strip_id(event.to_record())
        response = await self.gateway.run(
            lambda: self.gateway.table(self.table_name).update(payload).eq("id", event_id).execute()
        )
        if not response.data:
            raise NotFoundError("event", event_id)
        return Event.from_record(response.data[0])

    async def delete(self, event_id: int) -> bool:
        response = await self.gateway.run(
            lambda: self.gateway.table(self.table_name).delete().eq("id", event_id).execute()
        )
        if not response.data:
            raise NotFoundError("event", event_id)
        return True


@dataclass(slots=True)
class SupabaseNoteStore:
    gateway: SupabaseGateway
    table_name: str

    async def _select(self, build: Callable[[Any], Any]) -> List[Note]:
        response = await self.gateway.run(lambda: build(self.gateway.table(self.table_name).select("*")).execute())
        return [Note.from_record(record) for record in response.data or []]

    async def list_all(self) -> List[Note]:
        return await self._select(lambda query: query.order("id"))

    async def get(self, note_id: int) -> Optional[Note]:
        notes = await self._select(lambda query: query.eq("id", note_id).limit(1))
        return notes[0] if notes else None

    async def by_date(self, day: date) -> Optional[Note]:
        notes = await self._select(lambda query: query.eq("date", day.isoformat()).order("id"))
        return first_note_on_day(notes, day)

    async def create(self, note: Note) -> Note:
        payload = _strip_id(note.to_record())
        response = await self.gateway.run(lambda: self.gateway.table(self.table_name).insert(payload).execute())
        if not response.data:
            raise BackingStoreError("Supabase insert returned no row for note")
        return Note.from_record(response.data[0])

    async def update(self, note_id: int, note: Note) -> Note:
        payload = _strip_id(note.to_record())
        response = await self.gateway.run(
            lambda: self.gateway.table(self.table_name).update(payload).eq("id", note_id).execute()
        )
        if not response.data:
            raise NotFoundError("note", note_id)
        return Note.from_record(response.data[0])

    async def delete(self, note_id: int) -> bool:
        response = await self.gateway.run(
            lambda: self.gateway.table(self.table_name).delete().eq("id", note_id).execute()
        )
        if not response.data:
            raise NotFoundError("note", note_id)
        return True


@dataclass(slots=True)
class SupabaseProfileStore:
    gateway: SupabaseGateway
    table_name: str

    async def current(self) -> Optional[UserProfile]:
        response = await self.gateway.run(
            lambda: self.gateway.table(self.table_name).select("*").order("id", desc=True).limit(1).execute()
        )
        records = response.data or []
        return UserProfile.from_record(records[0]) if records else None

    async def save(self, profile: UserProfile) -> UserProfile:
        existing = await self.current()
        payload = _strip_id(profile.to_record())
        if existing is None or existing.id is None:
            response = await self.gateway.run(lambda: self.gateway.table(self.table_name).insert(payload).execute())
        else:
            payload.pop("created_at", None)
            response = await self.gateway.run(
                lambda: self.gateway.table(self.table_name).update(payload).eq("id", existing.id).execute()
            )
        if not response.data:
            raise BackingStoreError("Supabase returned no row for profile")
        return UserProfile.from_record(response.data[0])


def supabase_stores(settings: SupabaseSettings, storage: StorageSettings) -> CalendarStores:
    gateway = SupabaseGateway(settings)
    return CalendarStores(
        backend="supabase",
        events=SupabaseEventStore(gateway=gateway, table_name=storage.events_table),
        notes=SupabaseNoteStore(gateway=gateway, table_name=storage.notes_table),
        profiles=SupabaseProfileStore(gateway=gateway, table_name=storage.profiles_table),
    )


__all__ = [
    "SupabaseEventStore",
    "SupabaseGateway",
    "SupabaseNoteStore",
    "SupabaseNotInitializedError",
    "SupabaseProfileStore",
    "supabase_stores",
]
