from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from ..models import Article


def mock_articles(symbol: str, now: Optional[datetime] = None) -> List[Article]:
    """Static example articles shown when every live source fails."""
    now = now or datetime.now(timezone.utc)
    symbol = symbol.upper()
    return [
        Article(
            title=f"{symbol} announces major expansion plans",
            source="Bloomberg",
            url="https://bloomberg.com/example",
            published_at=(now - timedelta(days=2)).isoformat(),
            snippet="Company announces significant investment in new facilities...",
            sentiment="positive",
        ),
        Article(
            title=f"Analysts upgrade {symbol} price target",
            source="Reuters",
            url="https://reuters.com/example",
            published_at=(now - timedelta(days=5)).isoformat(),
            snippet="Multiple analysts raise price targets following strong earnings...",
            sentiment="positive",
        ),
        Article(
            title=f"{symbol} faces regulatory scrutiny",
            source="WSJ",
            url="https://wsj.com/example",
            published_at=(now - timedelta(days=10)).isoformat(),
            snippet="Regulatory bodies announce investigation into company practices...",
            sentiment="negative",
        ),
        Article(
            title=f"{symbol} quarterly earnings report",
            source="Yahoo Finance",
            url="https://finance.yahoo.com/example",
            published_at=(now - timedelta(days=15)).isoformat(),
            snippet="Company reports mixed results in latest quarterly earnings...",
            sentiment="neutral",
        ),
    ]

