from __future__ import annotations

import argparse
import logging
from datetime import date
from typing import List, Optional, Sequence

from .bootstrap import configure_logging
from .calendar import calendar_grid, first_day_of_month, grid_weeks, time_slots
from .services.http import run_local_server

WEEKDAY_HEADER = "Su Mo Tu We Th Fr Sa"


def render_month(year: int, month: int) -> List[str]:
    """Render the month grid (``month`` 0-indexed) as fixed-width text lines."""

    first = first_day_of_month(year, month)
    lines = [f"{first:%B %Y}".center(len(WEEKDAY_HEADER)).rstrip(), WEEKDAY_HEADER]
    for week in grid_weeks(calendar_grid(year, month)):
        lines.append(" ".join(f"{cell.day:>2}" if cell else "  " for cell in week).rstrip())
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clinic Calendar command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server.")
    api_parser.add_argument("--host", default=None)
    api_parser.add_argument("--port", type=int, default=None)

    today = date.today()
    month_parser = subparsers.add_parser("month", help="Print a month grid.")
    month_parser.add_argument("--year", type=int, default=today.year)
    month_parser.add_argument("--month", type=int, default=today.month, help="Calendar month, 1-12.")

    slots_parser = subparsers.add_parser("slots", help="Print the day-view time slots.")
    slots_parser.add_argument("--start-hour", type=int, default=8)
    slots_parser.add_argument("--end-hour", type=int, default=18)
    slots_parser.add_argument("--interval", type=int, default=30)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()
    logging.getLogger(__name__).debug("Clinic Calendar CLI running %s", args.command)

    if args.command == "api":
        run_local_server(host=args.host, port=args.port)
    elif args.command == "month":
        if not 1 <= args.month <= 12:
            parser.error("--month must be between 1 and 12")
        for line in render_month(args.year, args.month - 1):
            print(line)
    elif args.command == "slots":
        for label in time_slots(args.start_hour, args.end_hour, args.interval):
            print(label)
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()
