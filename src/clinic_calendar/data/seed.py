from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from ..domain import Event, EventType, Note, UserProfile
from .base import CalendarStores

logger = logging.getLogger(__name__)

DEMO_USER_ID = 1

DEMO_NOTE = """
<p><b>Research Meeting Notes:</b></p>
<p>- Discuss progress on cardiac study</p>
<p>- Review latest literature on hypertension treatment</p>
<p>- Plan next phase of clinical trials</p>
<p>- Assign tasks to team members</p>
<br>
<p><b>Patient Follow-up:</b></p>
<p>- Check Mr. Doe's recovery progress</p>
<p>- Update treatment plan if necessary</p>
<p>- Schedule next appointment</p>
""".strip()


def _at(day: date, hours: float) -> datetime:
    return (datetime.combine(day, time()) + timedelta(hours=hours)).astimezone()


def _event(
    today: date,
    title: str,
    event_type: EventType,
    *,
    start: float,
    end: float,
    description: str,
    location: str = "",
    participants: str = "",
    has_reminder: bool = True,
) -> Event:
    return Event(
        user_id=DEMO_USER_ID,
        title=title,
        description=description,
        start_time=_at(today, start),
        end_time=_at(today, end),
        location=location,
        event_type=event_type,
        participants=participants,
        has_reminder=has_reminder,
    )


def demo_events(today: date) -> List[Event]:
    """A working day for the demo practitioner plus a few days ahead."""

    return [
        _event(
            today, "Research Meeting", EventType.RESEARCH, start=8, end=9.5,
            description="Discussion with research team on new clinical trial findings",
            location="Conference Room B", participants="team@hospital.org",
        ),
        _event(
            today, "Patient Consultation", EventType.CONSULTATION, start=10, end=10.5,
            description="Follow-up with Mr. John Doe - Post-op check", location="Office #3",
        ),
        _event(
            today, "Lunch Break", EventType.BREAK, start=12, end=13,
            description="Personal time", has_reminder=False,
        ),
        _event(
            today, "Team Review", EventType.MEETING, start=13, end=14.5,
            description="Weekly department case review session",
            location="Main Conference Room", participants="department@hospital.org",
        ),
        _event(
            today, "Patient Rounds", EventType.ROUNDS, start=16, end=17.5,
            description="Evening rounds with nursing staff",
            location="Ward 3", participants="nursing@hospital.org",
        ),
        _event(
            today, "Conference - New Cardiac Procedures", EventType.CONFERENCE, start=24 * 7 + 9, end=24 * 7 + 17,
            description="Annual cardiology conference", location="Medical Convention Center",
        ),
        _event(
            today, "Journal Club Webinar", EventType.WEBINAR, start=24 * 5 + 19, end=24 * 5 + 20.5,
            description="Discussion of recent medical journal publications",
            location="Online (Zoom)", participants="journal-club@hospital.org",
        ),
        _event(
            today, "Specialized Surgery", EventType.SURGERY, start=24 * 2 + 10, end=24 * 2 + 14,
            description="Cardiac procedure for Patient ID 12345",
            location="Operating Theater 2", participants="surgery-team@hospital.org",
        ),
    ]


def demo_profile() -> UserProfile:
    return UserProfile(
        full_name="Dr. Sarah Johnson",
        specialty="Cardiologist",
        avatar_url="https://images.unsplash.com/photo-1612349317150-e413f6a5b16d",
    )


async def seed_demo_data(stores: CalendarStores, today: Optional[date] = None) -> bool:
    """Load the demo practitioner's calendar into empty stores.

    Returns ``False`` without writing when any events already exist.
    """

    if await stores.events.list_all():
        logger.debug("Skipping demo seed; %s store already has events", stores.backend)
        return False
    anchor = today or date.today()
    for event in demo_events(anchor):
        await stores.events.create(event)
    await stores.notes.create(Note(user_id=DEMO_USER_ID, date=anchor, content=DEMO_NOTE))
    if await stores.profiles.current() is None:
        await stores.profiles.save(demo_profile())
    logger.info("Seeded demo calendar into %s store", stores.backend)
    return True


__all__ = ["DEMO_USER_ID", "demo_events", "demo_profile", "seed_demo_data"]
