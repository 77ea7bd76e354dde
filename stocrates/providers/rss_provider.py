from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging
from typing import List, Mapping, Optional

import feedparser
import requests

from ..models import Article
from .base import NewsProvider

logger = logging.getLogger(__name__)


class YahooRSSProvider(NewsProvider):
    """Keyless headline feed from Yahoo Finance, usable as a last resort."""

    name = "yahoo_rss"
    display_name = "Yahoo Finance RSS"
    FEED_URL = "https://feeds.finance.yahoo.com/rss/2.0/headline"

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session or requests.Session()

    def fetch(self, symbol: str, company_name: Optional[str] = None, days_back: int = 30) -> List[Article]:
        response = self._session.get(
            self.FEED_URL,
            params={"s": symbol.upper(), "region": "US", "lang": "en-US"},
            timeout=10,
        )
        response.raise_for_status()
        feed = feedparser.parse(response.content)
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_back)
        results: List[Article] = []
        for entry in feed.entries or []:
            published = _parse_published(entry)
            if published is not None and published < cutoff:
                continue
            title = (entry.get("title") or "").strip()
            if not title:
                continue
            results.append(
                Article(
                    title=title,
                    source="Yahoo Finance",
                    url=entry.get("link") or "",
                    published_at=published.isoformat() if published else "",
                    snippet=entry.get("summary") or "",
                )
            )
        logger.debug("Yahoo RSS returned %d entries for %s", len(results), symbol)
        return results


def _parse_published(entry: Mapping[str, object]) -> Optional[datetime]:
    for key in ("published_parsed", "updated_parsed"):
        parsed = entry.get(key)
        if parsed:
            try:
                return datetime(*parsed[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    return None
