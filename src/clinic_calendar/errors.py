from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


class ClinicCalendarError(Exception):
    """Base class for errors surfaced by the scheduling core."""


@dataclass(frozen=True)
class FieldIssue:
    field: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message}


class ValidationError(ClinicCalendarError):
    """Raised when a payload fails required-field or type checks."""

    def __init__(self, entity: str, issues: Sequence[FieldIssue]) -> None:
        self.entity = entity
        self.issues = list(issues)
        super().__init__(f"Invalid {entity} data: {', '.join(self.fields) or 'unknown fields'}")

    @property
    def fields(self) -> List[str]:
        seen: list[str] = []
        for issue in self.issues:
            if issue.field not in seen:
                seen.append(issue.field)
        return seen


class NotFoundError(ClinicCalendarError):
    """Raised when an update or delete targets an absent id."""

    def __init__(self, entity: str, identifier: Any) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity.capitalize()} '{identifier}' not found")


class BackingStoreError(ClinicCalendarError):
    """Raised when the persistence layer is unreachable or rejects a call."""


class IntegrationError(ClinicCalendarError):
    """Raised when a third-party provider (search, AI, weather) fails."""


class IntegrationNotConfiguredError(IntegrationError):
    """Raised when a provider is called without its credentials."""

    def __init__(self, provider: str, missing: Sequence[str]) -> None:
        self.provider = provider
        self.missing = list(missing)
        super().__init__(f"{provider} is not configured. Set: {', '.join(self.missing) or 'unknown'}")


__all__ = [
    "BackingStoreError",
    "ClinicCalendarError",
    "FieldIssue",
    "IntegrationError",
    "IntegrationNotConfiguredError",
    "NotFoundError",
    "ValidationError",
]
