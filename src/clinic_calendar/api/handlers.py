"""Request handlers: validate payloads, delegate to the stores, serialise results.

Handlers are transport-agnostic. They raise :class:`ValidationError` before any
store call when a payload is malformed and let :class:`NotFoundError` and
:class:`BackingStoreError` from the stores propagate unchanged. They do not
check that ``userId`` exists, that an event ends after it starts, or that a
day has at most one note.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..calendar import calendar_grid, grid_weeks, hourly_buckets, parse_day, parse_instant
from ..calendar.dates import now
from ..data import DEFAULT_UPCOMING_LIMIT, CalendarStores
from ..errors import FieldIssue, NotFoundError, ValidationError
from .models import EventPayload, NotePayload, ProfilePayload
from .serializers import serialize_bucket, serialize_event, serialize_note, serialize_profile

logger = logging.getLogger(__name__)

_P = TypeVar("_P", bound=BaseModel)


def parse_payload(model: Type[_P], entity: str, payload: Any) -> _P:
    if not isinstance(payload, Mapping):
        raise ValidationError(entity, [FieldIssue(field="body", message="Expected a JSON object")])
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        issues = [
            FieldIssue(field=".".join(str(part) for part in error["loc"]) or "body", message=error["msg"])
            for error in exc.errors()
        ]
        logger.info("Rejected %s payload: %s", entity, ", ".join(issue.field for issue in issues))
        raise ValidationError(entity, issues) from exc


def _parse_query_day(value: str) -> date:
    try:
        return parse_day(value)
    except ValueError as exc:
        raise ValidationError("date", [FieldIssue(field="date", message=str(exc))]) from exc


@dataclass(slots=True)
class CalendarHandlers:
    stores: CalendarStores

    # Events

    async def list_events(self) -> List[Dict[str, Any]]:
        return [serialize_event(event) for event in await self.stores.events.list_all()]

    async def get_event(self, event_id: int) -> Dict[str, Any]:
        event = await self.stores.events.get(event_id)
        if event is None:
            raise NotFoundError("event", event_id)
        return serialize_event(event)

    async def events_by_date(self, day: str) -> List[Dict[str, Any]]:
        target = _parse_query_day(day)
        return [serialize_event(event) for event in await self.stores.events.by_date(target)]

    async def upcoming_events(
        self,
        *,
        limit: int = DEFAULT_UPCOMING_LIMIT,
        from_instant: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        if limit < 0:
            raise ValidationError("query", [FieldIssue(field="limit", message="limit must not be negative")])
        try:
            reference: datetime = parse_instant(from_instant) if from_instant else now()
        except ValueError as exc:
            raise ValidationError("query", [FieldIssue(field="from", message=str(exc))]) from exc
        events = await self.stores.events.upcoming(reference, limit)
        return [serialize_event(event) for event in events]

    async def create_event(self, payload: Any) -> Dict[str, Any]:
        event = parse_payload(EventPayload, "event", payload).to_domain()
        created = await self.stores.events.create(event)
        logger.info("Created event %s (%s)", created.id, created.event_type.value)
        return serialize_event(created)

    async def update_event(self, event_id: int, payload: Any) -> Dict[str, Any]:
        event = parse_payload(EventPayload, "event", payload).to_domain()
        return serialize_event(await self.stores.events.update(event_id, event))

    async def delete_event(self, event_id: int) -> Dict[str, Any]:
        await self.stores.events.delete(event_id)
        logger.info("Deleted event %s", event_id)
        return {"message": "Event deleted successfully"}

    # Notes

    async def list_notes(self) -> List[Dict[str, Any]]:
        return [serialize_note(note) for note in await self.stores.notes.list_all()]

    async def get_note(self, note_id: int) -> Dict[str, Any]:
        note = await self.stores.notes.get(note_id)
        if note is None:
            raise NotFoundError("note", note_id)
        return serialize_note(note)

    async def note_by_date(self, day: str) -> Dict[str, Any]:
        target = _parse_query_day(day)
        note = await self.stores.notes.by_date(target)
        if note is None:
            raise NotFoundError("note", target.isoformat())
        return serialize_note(note)

    async def create_note(self, payload: Any) -> Dict[str, Any]:
        note = parse_payload(NotePayload, "note", payload).to_domain()
        return serialize_note(await self.stores.notes.create(note))

    async def update_note(self, note_id: int, payload: Any) -> Dict[str, Any]:
        note = parse_payload(NotePayload, "note", payload).to_domain()
        return serialize_note(await self.stores.notes.update(note_id, note))

    async def delete_note(self, note_id: int) -> Dict[str, Any]:
        await self.stores.notes.delete(note_id)
        return {"message": "Note deleted successfully"}

    # Profile

    async def get_profile(self) -> Dict[str, Any]:
        profile = await self.stores.profiles.current()
        if profile is None:
            raise NotFoundError("profile", "current")
        return serialize_profile(profile)

    async def save_profile(self, payload: Any) -> Dict[str, Any]:
        profile = parse_payload(ProfilePayload, "profile", payload).to_domain()
        return serialize_profile(await self.stores.profiles.save(profile))

    # Views

    async def month_view(self, year: int, month: int) -> Dict[str, Any]:
        if not MINYEAR <= year <= MAXYEAR:
            issue = FieldIssue(field="year", message=f"year must be between {MINYEAR} and {MAXYEAR}")
            raise ValidationError("query", [issue])
        if not 0 <= month <= 11:
            raise ValidationError("query", [FieldIssue(field="month", message="month must be between 0 and 11")])
        cells = calendar_grid(year, month)
        counts: Dict[str, int] = {}
        for event in await self.stores.events.list_all():
            key = event.start_time.date().isoformat()
            counts[key] = counts.get(key, 0) + 1
        weeks = [
            [
                {"date": cell.isoformat(), "eventCount": counts.get(cell.isoformat(), 0)} if cell else None
                for cell in week
            ]
            for week in grid_weeks(cells)
        ]
        return {"year": year, "month": month, "weeks": weeks}

    async def day_schedule(self, day: str, *, start_hour: int = 8, end_hour: int = 18) -> Dict[str, Any]:
        target = _parse_query_day(day)
        try:
            buckets = hourly_buckets(
                await self.stores.events.by_date(target),
                target,
                start_hour=start_hour,
                end_hour=end_hour,
            )
        except ValueError as exc:
            raise ValidationError("query", [FieldIssue(field="startHour", message=str(exc))]) from exc
        return {"date": target.isoformat(), "slots": [serialize_bucket(bucket) for bucket in buckets]}


__all__ = ["CalendarHandlers", "parse_payload"]
