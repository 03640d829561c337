"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    APP_NAME,
    STORAGE_BACKENDS,
    AppSettings,
    LlmSettings,
    StorageSettings,
    SupabaseSettings,
    WeatherSettings,
    WebSearchSettings,
    get_settings,
)

__all__ = [
    "APP_NAME",
    "STORAGE_BACKENDS",
    "AppSettings",
    "LlmSettings",
    "StorageSettings",
    "SupabaseSettings",
    "WeatherSettings",
    "WebSearchSettings",
    "get_settings",
]
