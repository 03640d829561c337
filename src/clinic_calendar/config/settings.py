from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_data_dir

load_dotenv()

APP_NAME = "Clinic Calendar"
APP_AUTHOR = "ClinicCalendar"
STORAGE_BACKENDS = ("memory", "json", "supabase")


def _flag_from_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class LlmSettings:
    api_key: Optional[str]
    model: str
    base_url: Optional[str]
    max_tokens: int

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.model)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.api_key:
            missing.append("OPENAI_API_KEY")
        if not self.model:
            missing.append("OPENAI_MODEL")
        return missing


@dataclass(frozen=True)
class WebSearchSettings:
    api_key: Optional[str]
    cx_id: Optional[str]
    endpoint: str
    results: int

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.cx_id)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.api_key:
            missing.append("GOOGLE_SEARCH_API_KEY")
        if not self.cx_id:
            missing.append("GOOGLE_SEARCH_CX_ID")
        return missing


@dataclass(frozen=True)
class WeatherSettings:
    enabled: bool
    endpoint: str
    default_location: str
    timeout_seconds: float


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    anon_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    data_dir: Path
    json_file: Path
    seed_demo: bool
    events_table: str
    notes_table: str
    profiles_table: str


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int
    cors_origins: tuple[str, ...]


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_dir: Path


@dataclass(frozen=True)
class AppSettings:
    llm: LlmSettings
    web_search: WebSearchSettings
    weather: WeatherSettings
    supabase: SupabaseSettings
    storage: StorageSettings
    server: ServerSettings
    logging: LoggingSettings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    llm = LlmSettings(
        api_key=os.getenv("OPENAI_API_KEY"),
        model=os.getenv("OPENAI_MODEL", "gpt-4o"),
        base_url=os.getenv("OPENAI_BASE_URL"),
        max_tokens=_int_from_env("OPENAI_MAX_TOKENS", 800),
    )

    web_search = WebSearchSettings(
        api_key=os.getenv("GOOGLE_SEARCH_API_KEY"),
        cx_id=os.getenv("GOOGLE_SEARCH_CX_ID"),
        endpoint=os.getenv("GOOGLE_SEARCH_ENDPOINT", "https://www.googleapis.com/customsearch/v1"),
        results=min(_int_from_env("GOOGLE_SEARCH_RESULTS", 10), 10),
    )

    weather = WeatherSettings(
        enabled=_flag_from_env("CLINIC_WEATHER_ENABLED", False),
        endpoint=os.getenv("CLINIC_WEATHER_ENDPOINT", "https://api.open-meteo.com/v1/forecast"),
        default_location=os.getenv("CLINIC_WEATHER_LOCATION", "Your Location"),
        timeout_seconds=_float_from_env("CLINIC_WEATHER_TIMEOUT", 5.0),
    )

    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    data_dir = Path(os.getenv("CLINIC_DATA_DIR") or user_data_dir(APP_NAME, APP_AUTHOR))
    storage = StorageSettings(
        backend=os.getenv("CLINIC_STORAGE_BACKEND", "memory").strip().lower(),
        data_dir=data_dir,
        json_file=Path(os.getenv("CLINIC_JSON_FILE") or data_dir / "calendar.json"),
        seed_demo=_flag_from_env("CLINIC_SEED_DEMO", True),
        events_table=os.getenv("SUPABASE_EVENTS_TABLE", "events"),
        notes_table=os.getenv("SUPABASE_NOTES_TABLE", "notes"),
        profiles_table=os.getenv("SUPABASE_PROFILES_TABLE", "user_profiles"),
    )

    origins = os.getenv("CLINIC_CORS_ORIGINS", "*")
    server = ServerSettings(
        host=os.getenv("CLINIC_HOST", "127.0.0.1"),
        port=_int_from_env("CLINIC_PORT", 5000),
        cors_origins=tuple(origin.strip() for origin in origins.split(",") if origin.strip()),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("CLINIC_LOG_LEVEL", "INFO").upper(),
        log_dir=Path(os.getenv("CLINIC_LOG_DIR") or data_dir / "logs"),
    )

    return AppSettings(
        llm=llm,
        web_search=web_search,
        weather=weather,
        supabase=supabase,
        storage=storage,
        server=server,
        logging=logging_settings,
    )
