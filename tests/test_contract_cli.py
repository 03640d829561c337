import importlib
import io
import logging
import tempfile
import unittest
from contextlib import redirect_stdout
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

from clinic_calendar import cli
from clinic_calendar.config import get_settings
from clinic_calendar.data import open_store
from clinic_calendar.domain import Event, EventType


class TestCliContract(unittest.TestCase):
    def test_render_month_february_2024(self) -> None:
        lines = cli.render_month(2024, 1)

        self.assertEqual(lines[0].strip(), "February 2024")
        self.assertEqual(lines[1], cli.WEEKDAY_HEADER)
        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[2], "             1  2  3")
        self.assertEqual(lines[6], "25 26 27 28 29")
        self.assertEqual(lines[7], "")

    def test_month_command_prints_grid(self) -> None:
        buffer = io.StringIO()
        with mock.patch.object(cli, "configure_logging"), redirect_stdout(buffer):
            cli.main(["month", "--year", "2025", "--month", "3"])
        output = buffer.getvalue().splitlines()
        self.assertEqual(output[0].strip(), "March 2025")
        self.assertTrue(output[2].endswith(" 1"))
        self.assertEqual(output[-1], "30 31")

    def test_slots_command(self) -> None:
        buffer = io.StringIO()
        with mock.patch.object(cli, "configure_logging"), redirect_stdout(buffer):
            cli.main(["slots", "--start-hour", "11", "--end-hour", "13", "--interval", "60"])
        self.assertEqual(buffer.getvalue().splitlines(), ["11:00 AM", "12:00 PM"])

    def test_invalid_month_exits(self) -> None:
        with mock.patch.object(cli, "configure_logging"), redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit):
                cli.main(["month", "--month", "13"])


class TestConfigContract(unittest.TestCase):
    def test_unknown_backend_is_rejected(self) -> None:
        settings = get_settings()
        broken = replace(settings, storage=replace(settings.storage, backend="sqlite"))
        with self.assertRaises(ValueError):
            open_store(broken)

    def test_memory_backend_opens_empty(self) -> None:
        settings = get_settings()
        stores = open_store(replace(settings, storage=replace(settings.storage, backend="memory")))
        self.assertEqual(stores.backend, "memory")

    def test_malformed_weather_timeout_falls_back_to_default(self) -> None:
        get_settings.cache_clear()
        self.addCleanup(get_settings.cache_clear)
        with mock.patch.dict("os.environ", {"CLINIC_WEATHER_TIMEOUT": "soon"}):
            self.assertEqual(get_settings().weather.timeout_seconds, 5.0)
        get_settings.cache_clear()
        with mock.patch.dict("os.environ", {"CLINIC_WEATHER_TIMEOUT": "2.5"}):
            self.assertEqual(get_settings().weather.timeout_seconds, 2.5)

    def test_configure_logging_writes_rotating_file(self) -> None:
        bootstrap_logging = importlib.import_module("clinic_calendar.bootstrap.logging")
        root = logging.getLogger()
        handlers_before = list(root.handlers)
        level_before = root.level
        with tempfile.TemporaryDirectory() as tmp, mock.patch.object(bootstrap_logging, "_INITIALIZED", False):
            log_path = Path(tmp) / "logs" / "clinic_calendar.log"
            try:
                bootstrap_logging.configure_logging("debug", log_path=log_path)
                logging.getLogger("clinic_calendar.tests").info("calendar ready")
            finally:
                for handler in list(root.handlers):
                    if handler not in handlers_before:
                        handler.close()
                        root.removeHandler(handler)
                root.setLevel(level_before)
            self.assertIn("calendar ready", log_path.read_text(encoding="utf-8"))


class TestEventTypeContract(unittest.TestCase):
    def test_every_type_has_label_and_color(self) -> None:
        self.assertEqual(len(EventType), 10)
        for event_type in EventType:
            self.assertTrue(event_type.label)
            self.assertTrue(event_type.color)
        self.assertEqual(EventType("rounds"), EventType.ROUNDS)

    def test_participant_list_splits_and_drops_blanks(self) -> None:
        event = Event(
            user_id=1,
            title="Review",
            start_time=datetime(2024, 3, 1, 13, tzinfo=timezone.utc),
            end_time=datetime(2024, 3, 1, 14, tzinfo=timezone.utc),
            event_type=EventType.MEETING,
            participants=" a@hospital.org, ,b@hospital.org ",
        )
        self.assertEqual(event.participant_list, ["a@hospital.org", "b@hospital.org"])
        self.assertEqual(replace(event, participants=None).participant_list, [])


if __name__ == "__main__":
    unittest.main()
