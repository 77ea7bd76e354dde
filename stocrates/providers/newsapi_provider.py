from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import List, Mapping, Optional

import requests

from ..models import Article
from .base import NewsProvider, RateLimitError

logger = logging.getLogger(__name__)

COMPANY_NAMES: Mapping[str, str] = {
    "AAPL": "Apple",
    "MSFT": "Microsoft",
    "GOOGL": "Google",
    "GOOG": "Google",
    "AMZN": "Amazon",
    "NVDA": "NVIDIA",
    "META": "Meta",
    "TSLA": "Tesla",
    "NFLX": "Netflix",
    "AMD": "AMD",
    "INTC": "Intel",
    "JPM": "JPMorgan",
    "V": "Visa",
    "DIS": "Disney",
    "BA": "Boeing",
    "PLTR": "Palantir",
    "GME": "GameStop",
    "AMC": "AMC Entertainment",
}

_RATE_LIMIT_CODES = {"rateLimited", "maximumResultsReached"}


def get_company_name(symbol: str) -> str:
    return COMPANY_NAMES.get(symbol.upper(), symbol.upper())


class NewsAPIProvider(NewsProvider):
    """Fetches articles from newsapi.org."""

    name = "newsapi"
    display_name = "NewsAPI.org"
    BASE_URL = "https://newsapi.org/v2"
    PAGE_SIZE = 20

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None) -> None:
        self._api_key = api_key
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def fetch(self, symbol: str, company_name: Optional[str] = None, days_back: int = 30) -> List[Article]:
        symbol = symbol.upper()
        company = company_name or get_company_name(symbol)
        query = f'"{company}" OR {symbol}' if company != symbol else symbol
        from_date = (datetime.now(timezone.utc) - timedelta(days=days_back)).date().isoformat()
        payload = self._get(
            "/everything",
            {
                "q": query,
                "from": from_date,
                "language": "en",
                "sortBy": "publishedAt",
                "pageSize": self.PAGE_SIZE,
            },
        )
        return _parse_articles(payload)

    def top_business_headlines(self, country: str = "us", limit: int = 10) -> List[Article]:
        payload = self._get(
            "/top-headlines",
            {"country": country, "category": "business", "pageSize": limit},
        )
        return _parse_articles(payload)

    def _get(self, path: str, params: Mapping[str, object]) -> Mapping[str, object]:
        if not self._api_key:
            raise ValueError("NewsAPIProvider requires an API key")
        response = self._session.get(
            f"{self.BASE_URL}{path}",
            params=params,
            headers={"X-Api-Key": self._api_key},
            timeout=10,
        )
        if response.status_code == 429:
            raise RateLimitError(self.name, "HTTP 429")
        payload = _safe_json(response)
        if payload.get("status") == "error":
            code = payload.get("code") or ""
            if code in _RATE_LIMIT_CODES:
                raise RateLimitError(self.name, str(code))
            raise RuntimeError(f"NewsAPI error {code}: {payload.get('message', 'unknown error')}")
        response.raise_for_status()
        return payload


def _safe_json(response: requests.Response) -> Mapping[str, object]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, Mapping) else {}


def _parse_articles(payload: Mapping[str, object]) -> List[Article]:
    articles: List[Article] = []
    for item in payload.get("articles") or []:
        title = (item.get("title") or "").strip()
        if not title or title == "[Removed]":
            continue
        articles.append(
            Article(
                title=title,
                source=(item.get("source") or {}).get("name") or "Unknown",
                url=item.get("url") or "",
                published_at=item.get("publishedAt") or "",
                snippet=item.get("description") or item.get("content") or "",
            )
        )
    logger.debug("NewsAPI returned %d usable articles", len(articles))
    return articles
