"""Finnhub news and price clients.

Free tier: 60 API calls per minute. Both clients talk to the REST API
directly and map HTTP 429 to ``RateLimitError``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import List, Mapping, Optional

import requests

from ..models import Article
from .base import NewsProvider, RateLimitError

logger = logging.getLogger(__name__)

FINNHUB_BASE = "https://finnhub.io/api/v1"


class _FinnhubClient:
    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None) -> None:
        self._api_key = api_key
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def get_json(self, path: str, params: Mapping[str, object]):
        if not self._api_key:
            raise ValueError("Finnhub requires an API key")
        response = self._session.get(
            f"{FINNHUB_BASE}{path}",
            params={**params, "token": self._api_key},
            timeout=15,
        )
        if response.status_code == 429:
            raise RateLimitError("finnhub", "HTTP 429")
        response.raise_for_status()
        return response.json()


class FinnhubNewsProvider(NewsProvider):
    """Company news from Finnhub, used as the fallback news source."""

    name = "finnhub"
    display_name = "Finnhub"
    MAX_ARTICLES = 20

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None) -> None:
        self._client = _FinnhubClient(api_key, session)

    @property
    def configured(self) -> bool:
        return self._client.configured

    def fetch(self, symbol: str, company_name: Optional[str] = None, days_back: int = 30) -> List[Article]:
        to_date = datetime.now(timezone.utc).date()
        from_date = to_date - timedelta(days=days_back)
        raw_articles = self._client.get_json(
            "/company-news",
            {"symbol": symbol.upper(), "from": from_date.isoformat(), "to": to_date.isoformat()},
        )
        results: List[Article] = []
        for item in raw_articles or []:
            headline = (item.get("headline") or "").strip()
            if not headline:
                continue
            results.append(
                Article(
                    title=headline,
                    source=item.get("source") or "Finnhub",
                    url=item.get("url") or "",
                    published_at=_timestamp_to_iso(item.get("datetime")),
                    snippet=item.get("summary") or "",
                )
            )
            if len(results) >= self.MAX_ARTICLES:
                break
        return results


class FinnhubPriceClient:
    """Looks up historical daily closing prices."""

    LOOKBACK_DAYS = 7

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None) -> None:
        self._client = _FinnhubClient(api_key, session)

    @property
    def configured(self) -> bool:
        return self._client.configured

    def historical_price(self, symbol: str, on: date) -> Optional[float]:
        """Closing price on ``on`` or the closest trading day before it."""
        if not self.configured:
            logger.warning("FINNHUB_API_KEY not set, historical prices unavailable")
            return None
        end = datetime.combine(on, time.max, tzinfo=timezone.utc)
        start = datetime.combine(on - timedelta(days=self.LOOKBACK_DAYS), time.min, tzinfo=timezone.utc)
        payload = self._client.get_json(
            "/stock/candle",
            {
                "symbol": symbol.upper(),
                "resolution": "D",
                "from": int(start.timestamp()),
                "to": int(end.timestamp()),
            },
        )
        if not payload or payload.get("s") != "ok":
            return None
        closes = payload.get("c") or []
        if not closes:
            return None
        return float(closes[-1])


def _timestamp_to_iso(value) -> str:
    if not value:
        return ""
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc).isoformat()
    except (TypeError, ValueError, OSError):
        return ""
