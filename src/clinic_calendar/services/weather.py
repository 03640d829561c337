from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

import httpx

from ..config import WeatherSettings
from ..errors import IntegrationError

logger = logging.getLogger(__name__)

# WMO weather interpretation codes -> (conditions, icon key used by the client)
_CONDITIONS = {
    0: ("Clear", "sun"),
    1: ("Mainly Clear", "sun"),
    2: ("Partly Cloudy", "cloud"),
    3: ("Overcast", "cloud"),
    45: ("Fog", "cloud"),
    48: ("Fog", "cloud"),
    51: ("Drizzle", "rain"),
    53: ("Drizzle", "rain"),
    55: ("Drizzle", "rain"),
    61: ("Rain", "rain"),
    63: ("Rain", "rain"),
    65: ("Heavy Rain", "rain"),
    71: ("Snow", "snow"),
    73: ("Snow", "snow"),
    75: ("Heavy Snow", "snow"),
    80: ("Rain Showers", "rain"),
    81: ("Rain Showers", "rain"),
    82: ("Violent Rain Showers", "rain"),
    95: ("Thunderstorm", "storm"),
    96: ("Thunderstorm", "storm"),
    99: ("Thunderstorm", "storm"),
}


class InvalidCoordinatesError(ValueError):
    """Raised when a latitude or longitude falls outside the globe."""


def format_weather_date(day: date) -> str:
    return f"{day:%a}, {day.day} {day:%b}"


@dataclass(frozen=True)
class WeatherReport:
    location: str
    date: str
    temperature: float
    conditions: str
    icon: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "date": self.date,
            "temperature": self.temperature,
            "conditions": self.conditions,
            "icon": self.icon,
        }


@dataclass
class WeatherService:
    """Current conditions for a coordinate pair.

    When the provider is disabled a fixed placeholder report is returned so
    the dashboard widget always has something to show.
    """

    settings: WeatherSettings
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)

    def placeholder(self, today: Optional[date] = None) -> WeatherReport:
        return WeatherReport(
            location=self.settings.default_location,
            date=format_weather_date(today or date.today()),
            temperature=22,
            conditions="Partly Cloudy",
            icon="cloud",
        )

    async def current(self, latitude: float, longitude: float, *, today: Optional[date] = None) -> WeatherReport:
        if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
            raise InvalidCoordinatesError("Latitude and longitude are out of range")
        if not self.settings.enabled:
            return self.placeholder(today)

        params = {
            "latitude": f"{latitude:.4f}",
            "longitude": f"{longitude:.4f}",
            "current_weather": "true",
        }
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.settings.timeout_seconds) as client:
                response = await client.get(self.settings.endpoint, params=params)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Weather provider request failed: %s", exc)
            raise IntegrationError("Failed to fetch weather data") from exc

        try:
            current = response.json().get("current_weather") or {}
            temperature = round(float(current["temperature"]), 1)
            code = int(current.get("weathercode", -1))
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            logger.warning("Weather provider returned an unusable body: %s", exc)
            raise IntegrationError("Weather provider returned no current conditions") from exc
        conditions, icon = _CONDITIONS.get(code, ("Unknown", "cloud"))
        return WeatherReport(
            location=f"{latitude:.2f}, {longitude:.2f}",
            date=format_weather_date(today or date.today()),
            temperature=temperature,
            conditions=conditions,
            icon=icon,
        )


__all__ = ["InvalidCoordinatesError", "WeatherReport", "WeatherService", "format_weather_date"]
