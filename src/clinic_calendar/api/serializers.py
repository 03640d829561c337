from __future__ import annotations

from typing import Any, Dict

from ..calendar import HourBucket
from ..domain import Event, Note, UserProfile
from .models import EventRecord, NoteRecord, ProfileRecord


def serialize_event(event: Event) -> Dict[str, Any]:
    return EventRecord.from_domain(event).model_dump(by_alias=True)


def serialize_note(note: Note) -> Dict[str, Any]:
    return NoteRecord.from_domain(note).model_dump(by_alias=True)


def serialize_profile(profile: UserProfile) -> Dict[str, Any]:
    return ProfileRecord.from_domain(profile).model_dump(by_alias=True)


def serialize_bucket(bucket: HourBucket[Event]) -> Dict[str, Any]:
    return {
        "hour": bucket.hour,
        "time": bucket.label,
        "events": [serialize_event(event) for event in bucket.events],
    }
