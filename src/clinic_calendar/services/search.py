from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from ..config import LlmSettings, WebSearchSettings
from ..errors import IntegrationError, IntegrationNotConfiguredError

logger = logging.getLogger(__name__)

MEDICAL_SYSTEM_PROMPT = (
    "You are a helpful medical AI assistant for doctors. Provide accurate, evidence-based information "
    "in response to medical queries. Format your responses in HTML with appropriate headers, paragraphs, "
    "and lists. Include relevant citations to medical literature when possible. Always clarify that your "
    "responses are informational and not a substitute for clinical judgment. Organize your response with "
    "clear sections and avoid excessive detail."
)
EMPTY_ANSWER = "Sorry, I couldn't generate a response."
SEARCH_DISCLAIMER = (
    "Search results are provided for informational purposes only and should not replace professional "
    "medical advice. Always consult with a qualified healthcare provider for medical decisions."
)


@dataclass(frozen=True)
class SearchResult:
    title: str
    link: str
    snippet: str
    formatted_url: str

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "SearchResult":
        return cls(
            title=str(item.get("title") or ""),
            link=str(item.get("link") or ""),
            snippet=str(item.get("snippet") or ""),
            formatted_url=str(item.get("formattedUrl") or item.get("link") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "link": self.link,
            "snippet": self.snippet,
            "formattedUrl": self.formatted_url,
        }


@dataclass
class MedicalAssistant:
    """Answers free-text clinical questions through the OpenAI chat API."""

    settings: LlmSettings
    _client: Optional[AsyncOpenAI] = None

    def _ensure_client(self) -> AsyncOpenAI:
        if not self.settings.is_configured:
            raise IntegrationNotConfiguredError("OpenAI", self.settings.missing_env_vars)
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.settings.api_key, base_url=self.settings.base_url)
        return self._client

    async def ask(self, query: str) -> str:
        client = self._ensure_client()
        try:
            completion = await client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": MEDICAL_SYSTEM_PROMPT},
                    {"role": "user", "content": query},
                ],
                max_tokens=self.settings.max_tokens,
            )
        except OpenAIError as exc:
            logger.exception("OpenAI request failed")
            raise IntegrationError("Failed to get AI response. Please try again later.") from exc
        if not completion.choices:
            return EMPTY_ANSWER
        return completion.choices[0].message.content or EMPTY_ANSWER


@dataclass
class WebSearch:
    """Google Custom Search proxy biased towards medical research results."""

    settings: WebSearchSettings
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False)
    timeout_seconds: float = 10.0

    async def search(self, query: str) -> List[SearchResult]:
        if not self.settings.is_configured:
            raise IntegrationNotConfiguredError("Google Search", self.settings.missing_env_vars)
        params = {
            "key": self.settings.api_key,
            "cx": self.settings.cx_id,
            "q": f"{query} medical research",
            "num": str(self.settings.results),
        }
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout_seconds) as client:
                response = await client.get(self.settings.endpoint, params=params)
        except httpx.HTTPError as exc:
            logger.exception("Google search request failed")
            raise IntegrationError("Failed to get search results. Please try again later.") from exc
        if response.status_code != 200:
            logger.error("Google Search API error %s: %s", response.status_code, response.text)
            raise IntegrationError(f"Google Search API error: {response.status_code}")
        try:
            body = response.json()
        except ValueError as exc:
            logger.error("Google Search API returned a non-JSON body")
            raise IntegrationError("Google Search API returned an unreadable response") from exc
        items = body.get("items") if isinstance(body, dict) else None
        return [SearchResult.from_item(item) for item in items or [] if isinstance(item, dict)]


__all__ = [
    "EMPTY_ANSWER",
    "MEDICAL_SYSTEM_PROMPT",
    "SEARCH_DISCLAIMER",
    "MedicalAssistant",
    "SearchResult",
    "WebSearch",
]
