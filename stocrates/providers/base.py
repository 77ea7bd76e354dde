from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Article


class RateLimitError(RuntimeError):
    """Raised by a provider when the upstream API reports a rate limit."""

    def __init__(self, provider: str, detail: str = "") -> None:
        message = f"RATE_LIMIT: {provider} rate limit exceeded"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.provider = provider


class NewsProvider(ABC):
    """Abstract base class for news sources used by the fallback manager."""

    name: str = ""
    display_name: str = ""

    @property
    def configured(self) -> bool:
        """False when the provider lacks the credentials it needs."""
        return True

    @abstractmethod
    def fetch(self, symbol: str, company_name: Optional[str] = None, days_back: int = 30) -> List[Article]:
        """Return articles about ``symbol`` published in the last ``days_back`` days."""


ProviderList = List[NewsProvider]
