from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from .models import Article, SentimentReport

NEWS_LABELS = ("positive", "negative", "neutral")
SOCIAL_LABELS = ("bullish", "bearish", "neutral")

_NEWS_POSITIVE = (
    "surge",
    "gain",
    "upgrade",
    "growth",
    "expansion",
    "profit",
    "beat",
    "strong",
    "bullish",
    "rally",
    "soar",
    "jump",
    "rise",
    "boost",
    "outperform",
    "record",
    "breakthrough",
    "innovation",
    "partnership",
    "acquisition",
    "revenue growth",
    "earnings beat",
    "positive outlook",
    "analyst upgrade",
    "price target increase",
    "new product launch",
    "market share gain",
    "strong guidance",
    "institutional buying",
    "insider buying",
    "high demand",
    "supply chain improvement",
    "cost reduction",
    "margin expansion",
    "cash flow improvement",
    "debt reduction",
    "share buyback",
    "dividend increase",
    "positive sentiment",
    "bullish sentiment",
    "upward momentum",
    "technical breakout",
    "favorable analyst report",
    "strong earnings report",
    "positive news flow",
    "increased trading volume",
    "short squeeze",
    "positive social media sentiment",
    "influencer endorsement",
    "celebrity endorsement",
    "favorable industry trends",
)

_NEWS_NEGATIVE = (
    "fall",
    "drop",
    "downgrade",
    "loss",
    "decline",
    "weak",
    "miss",
    "bearish",
    "crash",
    "plunge",
    "layoffs",
    "fired",
    "terminated",
    "lawsuit",
    "investigation",
    "regulatory scrutiny",
    "bankruptcy",
    "delisting",
    "scandal",
    "fraud",
    "penalty",
    "fine",
    "warning",
    "concern",
    "risk",
    "threat",
    "uncertainty",
    "volatility",
    "headwind",
    "challenge",
    "downturn",
    "recession",
    "slowdown",
    "missed expectations",
    "bankruptcy risk",
    "delisting risk",
    "scandal risk",
    "fraud risk",
    "penalty risk",
    "fine risk",
    "warning risk",
    "concern risk",
    "risk of decline",
    "risk of loss",
    "risk of drop",
    "risk of fall",
    "risk of bankruptcy",
    "risk of delisting",
    # repeated on purpose, these phrases weigh double
    "scandal risk",
    "fraud risk",
    "penalty risk",
    "fine risk",
    "warning risk",
    "concern risk",
)

_SOCIAL_BULLISH = (
    "moon",
    "rocket",
    "calls",
    "buy",
    "bullish",
    "long",
    "yolo",
    "tendies",
    "diamond hands",
    "hold",
    "hodl",
    "to the moon",
    "squeeze",
    "rally",
    "breakout",
    "pump",
    "gains",
    "profit",
    "win",
    "up",
    "green",
    "bull",
)

_SOCIAL_BEARISH = (
    "puts",
    "short",
    "bearish",
    "sell",
    "crash",
    "dump",
    "loss",
    "red",
    "bear",
    "down",
    "fall",
    "drop",
    "tank",
    "plunge",
    "collapse",
    "dead",
    "rip",
    "bagholding",
    "paper hands",
    "rug pull",
    "scam",
)


def classify(
    text: Optional[str],
    positive: Sequence[str],
    negative: Sequence[str],
    labels: Tuple[str, str, str] = NEWS_LABELS,
) -> SentimentReport:
    """Label ``text`` by counting which keywords it contains.

    Each keyword counts once when it appears anywhere in the lower-cased text,
    so phrases and their stems can both hit. Equal counts are neutral.
    """
    positive_label, negative_label, neutral_label = labels
    if not text:
        return SentimentReport(neutral_label, 0, 0)
    lowered = text.lower()
    pos_hits = sum(1 for keyword in positive if keyword in lowered)
    neg_hits = sum(1 for keyword in negative if keyword in lowered)
    if pos_hits > neg_hits:
        label = positive_label
    elif neg_hits > pos_hits:
        label = negative_label
    else:
        label = neutral_label
    return SentimentReport(label, pos_hits, neg_hits)


def classify_news(text: Optional[str]) -> SentimentReport:
    return classify(text, _NEWS_POSITIVE, _NEWS_NEGATIVE, NEWS_LABELS)


def classify_social(text: Optional[str]) -> SentimentReport:
    return classify(text, _SOCIAL_BULLISH, _SOCIAL_BEARISH, SOCIAL_LABELS)


def classify_article(article: Article) -> Article:
    report = classify_news(f"{article.title} {article.snippet}")
    return replace(article, sentiment=report.label)
