from __future__ import annotations

import asyncio
import logging
from copy import deepcopy
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import orjson

from ..domain import Event, Note, UserProfile
from ..errors import BackingStoreError, NotFoundError
from .base import DEFAULT_UPCOMING_LIMIT, CalendarStores, events_on_day, first_note_on_day, upcoming_events

logger = logging.getLogger(__name__)

DEFAULT_FILE_STATE: Dict[str, Any] = {
    "events": [],
    "notes": [],
    "profiles": [],
    "counters": {
        "event": 0,
        "note": 0,
        "profile": 0,
    },
    "metadata": {"schema_version": 1},
}


class CalendarFile:
    """Rows and id counters persisted as a single JSON document."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._state: Optional[Dict[str, Any]] = None
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_materialized(self) -> Dict[str, Any]:
        if self._state is not None:
            return self._state
        try:
            if not self._path.exists():
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._state = deepcopy(DEFAULT_FILE_STATE)
                self._write(self._state)
                return self._state
            raw = self._path.read_bytes()
            state = orjson.loads(raw) if raw else deepcopy(DEFAULT_FILE_STATE)
        except (OSError, orjson.JSONDecodeError) as exc:
            raise BackingStoreError(f"Cannot load calendar file {self._path}: {exc}") from exc
        # Backfill missing keys when upgrading.
        for key, value in DEFAULT_FILE_STATE.items():
            state.setdefault(key, deepcopy(value))
        for key, value in DEFAULT_FILE_STATE["counters"].items():
            state["counters"].setdefault(key, value)
        self._state = state
        return state

    def _write(self, state: Dict[str, Any]) -> None:
        payload = orjson.dumps(state, option=orjson.OPT_INDENT_2)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_bytes(payload + b"\n")
        tmp_path.replace(self._path)

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return list(self._ensure_materialized()[table])

    async def mutate(self, callback: Callable[[Dict[str, Any]], Any]) -> Any:
        """Apply ``callback`` to a copy of the state and persist it.

        The in-memory state is swapped only after the write succeeds so a
        failed mutation leaves no trace.
        """

        async with self._lock:
            working = deepcopy(self._ensure_materialized())
            result = callback(working)
            try:
                self._write(working)
            except OSError as exc:
                raise BackingStoreError(f"Cannot write calendar file {self._path}: {exc}") from exc
            self._state = working
            return result

    @staticmethod
    def consume_id(state: Dict[str, Any], prefix: str) -> int:
        counters = state.setdefault("counters", {})
        current = int(counters.get(prefix, 0)) + 1
        counters[prefix] = current
        return current


class _JsonTable:
    def __init__(self, source: CalendarFile, table: str, entity: str) -> None:
        self.source = source
        self.table = table
        self.entity = entity

    def records(self) -> List[Dict[str, Any]]:
        return self.source.rows(self.table)

    def find(self, identifier: int) -> Optional[Dict[str, Any]]:
        return next((row for row in self.records() if row.get("id") == identifier), None)

    async def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        def _append(state: Dict[str, Any]) -> Dict[str, Any]:
            row = dict(record, id=self.source.consume_id(state, self.entity))
            state[self.table].append(row)
            return row

        row = await self.source.mutate(_append)
        logger.debug("Created %s %s in %s", self.entity, row["id"], self.source.path)
        return row

    async def replace(self, identifier: int, record: Dict[str, Any]) -> Dict[str, Any]:
        def _replace(state: Dict[str, Any]) -> Dict[str, Any]:
            rows = state[self.table]
            for index, row in enumerate(rows):
                if row.get("id") == identifier:
                    rows[index] = dict(record, id=identifier)
                    return rows[index]
            raise NotFoundError(self.entity, identifier)

        return await self.source.mutate(_replace)

    async def remove(self, identifier: int) -> bool:
        def _remove(state: Dict[str, Any]) -> bool:
            rows = state[self.table]
            remaining = [row for row in rows if row.get("id") != identifier]
            if len(remaining) == len(rows):
                raise NotFoundError(self.entity, identifier)
            state[self.table] = remaining
            return True

        return await self.source.mutate(_remove)


class JsonEventStore:
    def __init__(self, source: CalendarFile) -> None:
        self._table = _JsonTable(source, "events", "event")

    def _events(self) -> List[Event]:
        return [Event.from_record(row) for row in self._table.records()]

    async def list_all(self) -> List[Event]:
        return self._events()

    async def get(self, event_id: int) -> Optional[Event]:
        row = self._table.find(event_id)
        return Event.from_record(row) if row else None

    async def by_date(self, day: date) -> List[Event]:
        return events_on_day(self._events(), day)

    async def upcoming(self, from_instant: datetime, limit: int = DEFAULT_UPCOMING_LIMIT) -> List[Event]:
        return upcoming_events(self._events(), from_instant, limit)

    async def create(self, event: Event) -> Event:
        return Event.from_record(await self._table.insert(event.to_record()))

    async def update(self, event_id: int, event: Event) -> Event:
        return Event.from_record(await self._table.replace(event_id, event.to_record()))

    async def delete(self, event_id: int) -> bool:
        return await self._table.remove(event_id)


class JsonNoteStore:
    def __init__(self, source: CalendarFile) -> None:
        self._table = _JsonTable(source, "notes", "note")

    def _notes(self) -> List[Note]:
        return [Note.from_record(row) for row in self._table.records()]

    async def list_all(self) -> List[Note]:
        return self._notes()

    async def get(self, note_id: int) -> Optional[Note]:
        row = self._table.find(note_id)
        return Note.from_record(row) if row else None

    async def by_date(self, day: date) -> Optional[Note]:
        return first_note_on_day(self._notes(), day)

    async def create(self, note: Note) -> Note:
        return Note.from_record(await self._table.insert(note.to_record()))

    async def update(self, note_id: int, note: Note) -> Note:
        return Note.from_record(await self._table.replace(note_id, note.to_record()))

    async def delete(self, note_id: int) -> bool:
        return await self._table.remove(note_id)


class JsonProfileStore:
    def __init__(self, source: CalendarFile) -> None:
        self._table = _JsonTable(source, "profiles", "profile")

    async def current(self) -> Optional[UserProfile]:
        rows = self._table.records()
        return UserProfile.from_record(rows[-1]) if rows else None

    async def save(self, profile: UserProfile) -> UserProfile:
        existing = await self.current()
        if existing is None or existing.id is None:
            return UserProfile.from_record(await self._table.insert(profile.to_record()))
        record = dict(profile.to_record(), created_at=existing.created_at.isoformat())
        return UserProfile.from_record(await self._table.replace(existing.id, record))


def json_stores(path: Path) -> CalendarStores:
    source = CalendarFile(path)
    return CalendarStores(
        backend="json",
        events=JsonEventStore(source),
        notes=JsonNoteStore(source),
        profiles=JsonProfileStore(source),
    )


__all__ = ["CalendarFile", "JsonEventStore", "JsonNoteStore", "JsonProfileStore", "json_stores"]
