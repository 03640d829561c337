from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..calendar.dates import now, parse_day, parse_instant
from .enums import EventType


@dataclass(slots=True)
class Event:
    user_id: int
    title: str
    start_time: datetime
    end_time: datetime
    event_type: EventType
    description: Optional[str] = None
    location: Optional[str] = None
    participants: Optional[str] = None
    has_reminder: bool = False
    id: Optional[int] = None

    def __post_init__(self) -> None:
        # Naive instants get the local offset so every backend compares them alike.
        self.start_time = parse_instant(self.start_time)
        self.end_time = parse_instant(self.end_time)

    @property
    def participant_list(self) -> List[str]:
        if not self.participants:
            return []
        return [item.strip() for item in self.participants.split(",") if item.strip()]

    def with_id(self, identifier: int) -> "Event":
        return replace(self, id=identifier)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Event":
        return cls(
            id=int(record["id"]) if record.get("id") is not None else None,
            user_id=int(record["user_id"]),
            title=str(record["title"]),
            start_time=record["start_time"],
            end_time=record["end_time"],
            event_type=EventType(record["event_type"]),
            description=record.get("description"),
            location=record.get("location"),
            participants=record.get("participants"),
            has_reminder=bool(record.get("has_reminder") or False),
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "location": self.location,
            "event_type": self.event_type.value,
            "participants": self.participants,
            "has_reminder": self.has_reminder,
        }
        if self.id is not None:
            record["id"] = self.id
        return record


@dataclass(slots=True)
class Note:
    user_id: int
    date: date
    content: str
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.date = parse_day(self.date)

    def with_id(self, identifier: int) -> "Note":
        return replace(self, id=identifier)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Note":
        return cls(
            id=int(record["id"]) if record.get("id") is not None else None,
            user_id=int(record["user_id"]),
            date=record["date"],
            content=str(record["content"]),
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "content": self.content,
        }
        if self.id is not None:
            record["id"] = self.id
        return record


@dataclass(slots=True)
class UserProfile:
    full_name: str
    email: Optional[str] = None
    specialty: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = field(default_factory=now)
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.created_at = parse_instant(self.created_at)

    def with_id(self, identifier: int) -> "UserProfile":
        return replace(self, id=identifier)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=int(record["id"]) if record.get("id") is not None else None,
            full_name=str(record["full_name"]),
            email=record.get("email"),
            specialty=record.get("specialty"),
            avatar_url=record.get("avatar_url"),
            created_at=record.get("created_at") or now(),
        )

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "full_name": self.full_name,
            "email": self.email,
            "specialty": self.specialty,
            "avatar_url": self.avatar_url,
            "created_at": self.created_at.isoformat(),
        }
        if self.id is not None:
            record["id"] = self.id
        return record
