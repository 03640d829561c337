import unittest

from clinic_calendar.api import call_function, get_functions, register_function
from clinic_calendar.api.calendar import MAX_RANGE_DAYS


class TestFunctionRegistryContract(unittest.TestCase):
    def test_describe_reports_parameter_schema(self) -> None:
        described = {function.name: function.describe() for function in get_functions()}

        slots = described["time_slots"]["parameters"]
        self.assertEqual(slots["properties"]["start_hour"], {"type": "integer", "default": 8})
        self.assertNotIn("required", slots)

        grid = described["calendar_grid"]["parameters"]
        self.assertEqual(grid["required"], ["year", "month"])
        self.assertEqual(described["week_dates"]["parameters"]["properties"]["day"], {"type": "string"})
        self.assertEqual(described["event_types"]["parameters"], {"type": "object", "properties": {}})

    def test_arguments_are_type_checked(self) -> None:
        with self.assertRaises(TypeError):
            call_function("calendar_grid", year="2024", month=1)
        with self.assertRaises(TypeError):
            call_function("calendar_grid", year=True, month=1)
        with self.assertRaises(TypeError):
            call_function("calendar_grid", year=2024)
        with self.assertRaises(KeyError):
            call_function("nope")

        self.assertEqual(len(call_function("calendar_grid", year=2024, month=1)["cells"]), 42)

    def test_date_range_span_is_bounded(self) -> None:
        with self.assertRaises(ValueError):
            call_function("date_range", start="0001-01-01", end="9999-12-31")
        self.assertEqual(len(call_function("date_range", start="2024-02-27", end="2024-03-02")["dates"]), 5)
        self.assertLess(MAX_RANGE_DAYS, 3660)

    def test_duplicate_and_untyped_registrations_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            register_function("calendar_grid", description="again")(lambda year, month: {})

        def loose(value) -> dict:
            return {}

        with self.assertRaises(TypeError):
            register_function("loose_function", description="untyped")(loose)
        self.assertNotIn("loose_function", [function.name for function in get_functions()])


if __name__ == "__main__":
    unittest.main()
