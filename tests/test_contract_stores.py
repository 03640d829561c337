import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from clinic_calendar.data import json_stores, memory_stores, seed_demo_data
from clinic_calendar.domain import Event, EventType, Note, UserProfile
from clinic_calendar.errors import NotFoundError

UTC = timezone.utc


def _event(title: str, start: datetime, *, hours: float = 1.0, event_type: EventType = EventType.MEETING) -> Event:
    return Event(
        user_id=1,
        title=title,
        start_time=start,
        end_time=start + timedelta(hours=hours),
        event_type=event_type,
    )


class _StoreContract:
    """Behaviour every backend must share; mixed into a concrete TestCase."""

    def make_stores(self):
        raise NotImplementedError

    async def asyncSetUp(self) -> None:
        self.stores = self.make_stores()

    async def test_create_assigns_sequential_ids_and_round_trips(self) -> None:
        event = Event(
            user_id=1,
            title="Rounds",
            description="Evening rounds",
            start_time=datetime(2024, 3, 1, 16, 0, tzinfo=UTC),
            end_time=datetime(2024, 3, 1, 17, 30, tzinfo=UTC),
            location="Ward 3",
            event_type=EventType.ROUNDS,
            participants="nursing@hospital.org",
            has_reminder=True,
        )
        created = await self.stores.events.create(event)
        second = await self.stores.events.create(_event("Second", datetime(2024, 3, 2, 9, tzinfo=UTC)))

        self.assertEqual(created.id, 1)
        self.assertEqual(second.id, 2)
        fetched = await self.stores.events.get(1)
        self.assertEqual(fetched, event.with_id(1))

    async def test_events_by_date_matches_calendar_day(self) -> None:
        rounds = await self.stores.events.create(
            _event("Rounds", datetime(2024, 3, 1, 16, 0, tzinfo=UTC), hours=1.5, event_type=EventType.ROUNDS)
        )
        await self.stores.events.create(_event("Next day", datetime(2024, 3, 2, 0, 1, tzinfo=UTC)))

        on_day = await self.stores.events.by_date(date(2024, 3, 1))
        self.assertEqual([event.id for event in on_day], [rounds.id])

    async def test_upcoming_returns_earliest_in_order(self) -> None:
        base = datetime(2030, 1, 1, 8, 0, tzinfo=UTC)
        offsets = [5, 1, 4, 2, 3]
        for offset in offsets:
            await self.stores.events.create(_event(f"+{offset}", base + timedelta(days=offset)))
        await self.stores.events.create(_event("past", base - timedelta(days=1)))

        upcoming = await self.stores.events.upcoming(base, 3)
        self.assertEqual([event.title for event in upcoming], ["+1", "+2", "+3"])

        default_limit = await self.stores.events.upcoming(base)
        self.assertEqual(len(default_limit), 3)

    async def test_naive_instants_are_stored_with_local_offset(self) -> None:
        naive_start = datetime(2030, 6, 1, 9, 0)
        created = await self.stores.events.create(_event("Clinic", naive_start))

        self.assertIsNotNone(created.start_time.tzinfo)
        self.assertIsNotNone(created.end_time.tzinfo)
        self.assertEqual(created.start_time, naive_start.astimezone())
        self.assertEqual(await self.stores.events.get(created.id), created)

        upcoming = await self.stores.events.upcoming(datetime(2030, 1, 1, tzinfo=UTC), 3)
        self.assertEqual([event.id for event in upcoming], [created.id])
        on_day = await self.stores.events.by_date(date(2030, 6, 1))
        self.assertEqual([event.id for event in on_day], [created.id])

    async def test_upcoming_includes_events_starting_at_reference(self) -> None:
        start = datetime(2030, 1, 1, 8, 0, tzinfo=UTC)
        await self.stores.events.create(_event("now", start))
        upcoming = await self.stores.events.upcoming(start, 3)
        self.assertEqual([event.title for event in upcoming], ["now"])

    async def test_update_replaces_all_fields_but_id(self) -> None:
        created = await self.stores.events.create(_event("Draft", datetime(2024, 3, 1, 9, tzinfo=UTC)))
        replacement = _event("Final", datetime(2024, 3, 5, 14, tzinfo=UTC), event_type=EventType.SURGERY)

        updated = await self.stores.events.update(created.id, replacement)

        self.assertEqual(updated, replacement.with_id(created.id))
        self.assertEqual(await self.stores.events.get(created.id), updated)

    async def test_update_missing_event_raises_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            await self.stores.events.update(99, _event("Ghost", datetime(2024, 3, 1, tzinfo=UTC)))

    async def test_delete_and_ids_are_never_reused(self) -> None:
        first = await self.stores.events.create(_event("One", datetime(2024, 3, 1, 9, tzinfo=UTC)))
        self.assertTrue(await self.stores.events.delete(first.id))
        self.assertIsNone(await self.stores.events.get(first.id))

        with self.assertRaises(NotFoundError):
            await self.stores.events.delete(first.id)

        second = await self.stores.events.create(_event("Two", datetime(2024, 3, 1, 10, tzinfo=UTC)))
        self.assertEqual(second.id, first.id + 1)

    async def test_note_lifecycle(self) -> None:
        note = await self.stores.notes.create(Note(user_id=1, date=date(2024, 3, 1), content="<p>Hi</p>"))
        self.assertEqual(note.id, 1)
        self.assertEqual(await self.stores.notes.by_date(date(2024, 3, 1)), note)
        self.assertIsNone(await self.stores.notes.by_date(date(2024, 3, 2)))

        updated = await self.stores.notes.update(note.id, Note(user_id=1, date=date(2024, 3, 2), content="Moved"))
        self.assertEqual(updated.date, date(2024, 3, 2))
        self.assertEqual(await self.stores.notes.list_all(), [updated])

        await self.stores.notes.delete(note.id)
        with self.assertRaises(NotFoundError):
            await self.stores.notes.delete(note.id)
        with self.assertRaises(NotFoundError):
            await self.stores.notes.update(note.id, updated)

    async def test_duplicate_notes_for_a_day_are_both_stored(self) -> None:
        day = date(2024, 3, 1)
        first = await self.stores.notes.create(Note(user_id=1, date=day, content="first"))
        second = await self.stores.notes.create(Note(user_id=1, date=day, content="second"))

        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(await self.stores.notes.list_all()), 2)
        self.assertIn((await self.stores.notes.by_date(day)).id, {first.id, second.id})

    async def test_profile_save_keeps_one_current_profile(self) -> None:
        self.assertIsNone(await self.stores.profiles.current())
        saved = await self.stores.profiles.save(UserProfile(full_name="Dr. Sarah Johnson", specialty="Cardiologist"))
        again = await self.stores.profiles.save(UserProfile(full_name="Dr. S. Johnson", email="sj@example.org"))

        self.assertEqual(saved.id, again.id)
        self.assertEqual(again.full_name, "Dr. S. Johnson")
        self.assertEqual(again.created_at, saved.created_at)
        self.assertEqual(await self.stores.profiles.current(), again)

    async def test_seed_demo_data_only_fills_empty_store(self) -> None:
        today = date(2024, 3, 1)
        self.assertTrue(await seed_demo_data(self.stores, today=today))
        self.assertEqual(len(await self.stores.events.list_all()), 8)
        self.assertEqual(len(await self.stores.events.by_date(today)), 5)
        self.assertIsNotNone(await self.stores.notes.by_date(today))
        self.assertEqual((await self.stores.profiles.current()).full_name, "Dr. Sarah Johnson")

        self.assertFalse(await seed_demo_data(self.stores, today=today))
        self.assertEqual(len(await self.stores.events.list_all()), 8)


class TestMemoryStoreContract(_StoreContract, unittest.IsolatedAsyncioTestCase):
    def make_stores(self):
        return memory_stores()


class TestJsonStoreContract(_StoreContract, unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "nested" / "calendar.json"

    def make_stores(self):
        return json_stores(self.path)

    async def test_reopen_keeps_rows_and_counters(self) -> None:
        first = await self.stores.events.create(_event("One", datetime(2024, 3, 1, 9, tzinfo=UTC)))
        await self.stores.events.delete(first.id)
        await self.stores.notes.create(Note(user_id=1, date=date(2024, 3, 1), content="kept"))

        reopened = json_stores(self.path)
        self.assertEqual(await reopened.events.list_all(), [])
        self.assertEqual([note.content for note in await reopened.notes.list_all()], ["kept"])

        created = await reopened.events.create(_event("Two", datetime(2024, 3, 1, 10, tzinfo=UTC)))
        self.assertEqual(created.id, 2)

    async def test_failed_mutation_leaves_file_untouched(self) -> None:
        await self.stores.events.create(_event("One", datetime(2024, 3, 1, 9, tzinfo=UTC)))
        before = self.path.read_bytes()
        with self.assertRaises(NotFoundError):
            await self.stores.events.delete(42)
        self.assertEqual(self.path.read_bytes(), before)


if __name__ == "__main__":
    unittest.main()
