from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..api import CalendarHandlers
from ..config import AppSettings, get_settings
from ..data import CalendarStores, open_store
from .search import MedicalAssistant, WebSearch
from .weather import WeatherService


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root sharing settings, stores, handlers and integrations."""

    settings: AppSettings = field(default_factory=get_settings)
    stores: Optional[CalendarStores] = None
    handlers: CalendarHandlers = field(init=False)
    assistant: MedicalAssistant = field(init=False)
    web_search: WebSearch = field(init=False)
    weather: WeatherService = field(init=False)

    def __post_init__(self) -> None:
        if self.stores is None:
            self.stores = open_store(self.settings)
        self.handlers = CalendarHandlers(self.stores)
        self.assistant = MedicalAssistant(self.settings.llm)
        self.web_search = WebSearch(self.settings.web_search)
        self.weather = WeatherService(self.settings.weather)
