"""Request handlers and the named calendar functions exposed over HTTP."""

from __future__ import annotations

from .handlers import CalendarHandlers, parse_payload
from .registry import CalendarFunction, call_function, get_functions, register_function

# Import calendar functions so decorators run at module import time.
from . import calendar  # noqa: F401

__all__ = [
    "CalendarFunction",
    "CalendarHandlers",
    "call_function",
    "get_functions",
    "parse_payload",
    "register_function",
]
