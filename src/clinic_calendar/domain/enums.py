from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    MEETING = "meeting"
    CONSULTATION = "consultation"
    SURGERY = "surgery"
    CONFERENCE = "conference"
    WEBINAR = "webinar"
    BREAK = "break"
    ROUNDS = "rounds"
    PERSONAL = "personal"
    RESEARCH = "research"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def color(self) -> str:
        return _COLORS[self]


_LABELS = {
    EventType.MEETING: "Meeting",
    EventType.CONSULTATION: "Patient Consultation",
    EventType.SURGERY: "Surgery",
    EventType.CONFERENCE: "Conference",
    EventType.WEBINAR: "Webinar",
    EventType.BREAK: "Break",
    EventType.ROUNDS: "Patient Rounds",
    EventType.PERSONAL: "Personal",
    EventType.RESEARCH: "Research",
    EventType.OTHER: "Other",
}

_COLORS = {
    EventType.MEETING: "primary",
    EventType.CONSULTATION: "error",
    EventType.SURGERY: "error",
    EventType.CONFERENCE: "secondary",
    EventType.WEBINAR: "accent",
    EventType.BREAK: "warning",
    EventType.ROUNDS: "secondary",
    EventType.PERSONAL: "neutral",
    EventType.RESEARCH: "primary",
    EventType.OTHER: "neutral",
}
