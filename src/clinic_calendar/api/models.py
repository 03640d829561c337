from __future__ import annotations

import datetime as dt
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..calendar.dates import parse_day
from ..domain import Event, EventType, Note, UserProfile


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class EventPayload(_CamelModel):
    """Create/update body for an event; ``id`` is never accepted from callers."""

    user_id: int
    title: str = Field(min_length=1)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    event_type: EventType
    participants: Optional[str] = None
    has_reminder: Optional[bool] = False

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value

    def to_domain(self) -> Event:
        return Event(
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            start_time=self.start_time,
            end_time=self.end_time,
            location=self.location,
            event_type=self.event_type,
            participants=self.participants,
            has_reminder=bool(self.has_reminder),
        )


class NotePayload(_CamelModel):
    user_id: int
    date: dt.date
    content: str

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value: Any) -> Any:
        # Clients send either "2024-03-01" or a full ISO timestamp.
        if isinstance(value, (str, datetime)):
            return parse_day(value)
        return value

    def to_domain(self) -> Note:
        return Note(user_id=self.user_id, date=self.date, content=self.content)


class ProfilePayload(_CamelModel):
    full_name: str = Field(min_length=1)
    email: Optional[str] = None
    specialty: Optional[str] = None
    avatar_url: Optional[str] = None

    def to_domain(self) -> UserProfile:
        return UserProfile(
            full_name=self.full_name,
            email=self.email or None,
            specialty=self.specialty or None,
            avatar_url=self.avatar_url or None,
        )


class EventRecord(_CamelModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    start_time: str
    end_time: str
    location: Optional[str] = None
    event_type: str
    participants: Optional[str] = None
    has_reminder: bool = False

    @classmethod
    def from_domain(cls, event: Event) -> "EventRecord":
        return cls(
            id=event.id,
            user_id=event.user_id,
            title=event.title,
            description=event.description,
            start_time=event.start_time.isoformat(),
            end_time=event.end_time.isoformat(),
            location=event.location,
            event_type=event.event_type.value,
            participants=event.participants,
            has_reminder=event.has_reminder,
        )


class NoteRecord(_CamelModel):
    id: int
    user_id: int
    date: str
    content: str

    @classmethod
    def from_domain(cls, note: Note) -> "NoteRecord":
        return cls(id=note.id, user_id=note.user_id, date=note.date.isoformat(), content=note.content)


class ProfileRecord(_CamelModel):
    id: int
    full_name: str
    email: Optional[str] = None
    specialty: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: str

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "ProfileRecord":
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            email=profile.email,
            specialty=profile.specialty,
            avatar_url=profile.avatar_url,
            created_at=profile.created_at.isoformat(),
        )
