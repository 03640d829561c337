import unittest
from datetime import date, datetime, timedelta, timezone

from clinic_calendar.calendar import (
    add_days,
    day_of_week,
    days_in_month,
    first_day_of_month,
    format_time,
    is_same_day,
    is_today,
    last_day_of_month,
    parse_day,
    parse_instant,
    subtract_days,
)


class TestCalendarDatesContract(unittest.TestCase):
    def test_days_in_month_handles_leap_years(self) -> None:
        self.assertEqual(days_in_month(2024, 1), 29)
        self.assertEqual(days_in_month(2023, 1), 28)
        self.assertEqual(days_in_month(1900, 1), 28)
        self.assertEqual(days_in_month(2000, 1), 29)
        self.assertEqual(days_in_month(2024, 0), 31)
        self.assertEqual(days_in_month(2024, 3), 30)
        self.assertEqual(days_in_month(2024, 11), 31)

    def test_first_and_last_day_of_month(self) -> None:
        self.assertEqual(first_day_of_month(2024, 1), date(2024, 2, 1))
        self.assertEqual(last_day_of_month(2024, 1), date(2024, 2, 29))
        self.assertEqual(last_day_of_month(2023, 11), date(2023, 12, 31))
        self.assertEqual(last_day_of_month(9999, 11), date(9999, 12, 31))
        self.assertEqual(days_in_month(9999, 11), 31)

    def test_day_of_week_counts_from_sunday(self) -> None:
        self.assertEqual(day_of_week(date(2024, 3, 3)), 0)  # Sunday
        self.assertEqual(day_of_week(date(2024, 2, 1)), 4)  # Thursday
        self.assertEqual(day_of_week(date(2024, 3, 2)), 6)  # Saturday
        self.assertEqual(day_of_week(datetime(2024, 3, 4, 23, 59)), 1)

    def test_is_same_day_ignores_time_of_day(self) -> None:
        d = date(2024, 1, 1)
        self.assertTrue(is_same_day(d, d))
        self.assertTrue(is_same_day(datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 1, 23, 59)))
        self.assertTrue(is_same_day(datetime(2024, 1, 1, 8, 30), d))

    def test_is_same_day_false_across_midnight(self) -> None:
        late = datetime(2024, 1, 1, 23, 59)
        early = datetime(2024, 1, 2, 0, 1)
        self.assertLess(early - late, timedelta(hours=24))
        self.assertFalse(is_same_day(late, early))

    def test_add_and_subtract_days_roll_over(self) -> None:
        self.assertEqual(add_days(date(2024, 2, 28), 1), date(2024, 2, 29))
        self.assertEqual(add_days(date(2023, 12, 31), 1), date(2024, 1, 1))
        self.assertEqual(subtract_days(date(2024, 3, 1), 1), date(2024, 2, 29))
        self.assertEqual(subtract_days(date(2024, 1, 1), 1), date(2023, 12, 31))
        moment = datetime(2024, 1, 31, 9, 15)
        self.assertEqual(add_days(moment, 1), datetime(2024, 2, 1, 9, 15))

    def test_is_today_accepts_reference(self) -> None:
        self.assertTrue(is_today(datetime(2024, 5, 6, 12), today=date(2024, 5, 6)))
        self.assertFalse(is_today(date(2024, 5, 7), today=date(2024, 5, 6)))

    def test_format_time_uses_twelve_hour_clock(self) -> None:
        self.assertEqual(format_time(datetime(2024, 1, 1, 0, 5)), "12:05 AM")
        self.assertEqual(format_time(datetime(2024, 1, 1, 9, 30)), "9:30 AM")
        self.assertEqual(format_time(datetime(2024, 1, 1, 12, 0)), "12:00 PM")
        self.assertEqual(format_time(datetime(2024, 1, 1, 17, 45)), "5:45 PM")

    def test_parse_instant_accepts_zulu_suffix(self) -> None:
        parsed = parse_instant("2024-03-01T16:00:00.000Z")
        self.assertEqual(parsed, datetime(2024, 3, 1, 16, 0, tzinfo=timezone.utc))

    def test_parse_instant_gives_naive_values_an_offset(self) -> None:
        parsed = parse_instant("2024-03-01T16:00:00")
        self.assertIsNotNone(parsed.tzinfo)
        self.assertEqual((parsed.hour, parsed.minute), (16, 0))

    def test_parse_day_accepts_dates_and_timestamps(self) -> None:
        self.assertEqual(parse_day("2024-03-01"), date(2024, 3, 1))
        self.assertEqual(parse_day("2024-03-01T10:00:00Z"), date(2024, 3, 1))
        with self.assertRaises(ValueError):
            parse_day("not-a-date")


if __name__ == "__main__":
    unittest.main()
