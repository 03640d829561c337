"""FastAPI transport for the calendar handlers and integrations."""

from __future__ import annotations

from .server import create_app, run_local_server

__all__ = ["create_app", "run_local_server"]
