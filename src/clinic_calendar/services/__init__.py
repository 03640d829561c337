"""Application services: the shared context and third-party integrations."""

from __future__ import annotations

from .context import ServiceContext
from .search import MedicalAssistant, SearchResult, WebSearch
from .weather import InvalidCoordinatesError, WeatherReport, WeatherService

__all__ = [
    "InvalidCoordinatesError",
    "MedicalAssistant",
    "SearchResult",
    "ServiceContext",
    "WeatherReport",
    "WeatherService",
    "WebSearch",
]
