"""Domain records for the practitioner's calendar."""

from __future__ import annotations

from .enums import EventType
from .models import Event, Note, UserProfile

__all__ = ["Event", "EventType", "Note", "UserProfile"]
