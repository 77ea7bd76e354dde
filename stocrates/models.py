from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional


@dataclass(slots=True, frozen=True)
class Article:
    """A news article as returned by a provider."""

    title: str
    source: str
    url: str
    published_at: str
    snippet: str
    sentiment: Optional[str] = None


@dataclass(slots=True)
class ProviderStatus:
    """Availability bookkeeping for a single news provider."""

    name: str
    display_name: str
    available: bool = True
    rate_limit_reset_at: Optional[float] = None
    last_error: Optional[str] = None
    request_count: int = 0
    last_request_at: float = 0.0
    configured: bool = True


@dataclass(slots=True, frozen=True)
class SentimentReport:
    label: str
    positive_count: int
    negative_count: int


@dataclass(slots=True)
class FetchResult:
    """Outcome of one pass over the provider list."""

    articles: List[Article]
    source: str
    fallback_used: bool


@dataclass(slots=True)
class RedditPost:
    id: str
    title: str
    author: str
    score: int
    upvote_ratio: float
    num_comments: int
    created: float
    url: str
    selftext: str
    flair: Optional[str] = None
    stock_mentions: List[str] = field(default_factory=list)
    sentiment: Optional[str] = None


@dataclass(slots=True)
class TickerStats:
    count: int = 0
    bullish_count: int = 0
    bearish_count: int = 0
    sentiment: str = "neutral"
    avg_score: float = 0.0


@dataclass(slots=True)
class RedditAnalysis:
    posts: List[RedditPost]
    total_posts: int
    stock_mentions: Dict[str, TickerStats]
    summary: str


@dataclass(slots=True)
class SocialSentiment:
    """Forum sentiment for one ticker, weighted against news sentiment."""

    sentiment: str
    mention_count: int
    avg_score: float
    weight: int = 25
    top_posts: List[RedditPost] = field(default_factory=list)


@dataclass(slots=True)
class NewsAnalysis:
    """Combined news and social report handed to the UI/chat layer."""

    symbol: str
    articles: List[Article]
    overall_sentiment: str
    positive_count: int
    negative_count: int
    neutral_count: int
    sources: List[str]
    source: str = "none"
    fallback_used: bool = False
    used_mock_data: bool = False
    social_sentiment: Optional[SocialSentiment] = None
    combined_sentiment: str = "neutral"
    combined_score: float = 0.0


@dataclass(slots=True)
class Investment:
    symbol: str
    shares: float
    purchase_price: float
    purchase_date: date
    amount: float


@dataclass(slots=True)
class PortfolioPerformance:
    investment: Investment
    current_price: float
    current_value: float
    profit_loss: float
    profit_loss_percentage: float
    days_held: int
    annualized_return: float


@dataclass(slots=True, frozen=True)
class DetectedEvent:
    type: str
    confidence: int
    reasoning: str
