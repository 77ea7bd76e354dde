from __future__ import annotations

from dataclasses import asdict
import logging
from typing import Iterable, List, Optional

from .config import StocratesConfig
from .fallback import FallbackManager
from .models import Article, NewsAnalysis, SocialSentiment
from .providers.base import ProviderList
from .providers.finnhub_provider import FinnhubNewsProvider
from .providers.mock_provider import mock_articles
from .providers.newsapi_provider import NewsAPIProvider, get_company_name
from .providers.rss_provider import YahooRSSProvider
from .ratelimit import MinIntervalLimiter
from .reddit import RedditScraper
from .sentiment import classify_article

logger = logging.getLogger(__name__)

NEWS_WEIGHT = 0.75
SOCIAL_WEIGHT = 0.25

_SOURCE_WEIGHTS = {
    "Bloomberg": 85,
    "Reuters": 85,
    "WSJ": 80,
    "Wall Street Journal": 80,
    "Yahoo Finance": 75,
    "DeepStock": 75,
    "EquityPandit": 75,
    "Tickertape": 70,
    "Trending Neurons": 70,
    "Reddit": 25,
    "Twitter": 20,
    "X": 20,
}

_SOCIAL_SCORES = {"bullish": 1.0, "bearish": -1.0}


def build_providers(config: StocratesConfig) -> ProviderList:
    """Providers in priority order: NewsAPI first, Finnhub as fallback."""
    providers: ProviderList = [
        NewsAPIProvider(config.newsapi_key),
        FinnhubNewsProvider(config.finnhub_key),
    ]
    if config.enable_rss:
        providers.append(YahooRSSProvider())
    return providers


def source_weight(source: str) -> int:
    return _SOURCE_WEIGHTS.get(source, 50)


def summarize_articles(symbol: str, articles: Iterable[Article]) -> NewsAnalysis:
    """Count labels and derive the overall news sentiment.

    The overall label is positive or negative only when it outnumbers both
    other labels; anything else is neutral.
    """
    articles = list(articles)
    positive = sum(1 for article in articles if article.sentiment == "positive")
    negative = sum(1 for article in articles if article.sentiment == "negative")
    neutral = sum(1 for article in articles if article.sentiment == "neutral")
    overall = "neutral"
    if positive > negative and positive > neutral:
        overall = "positive"
    elif negative > positive and negative > neutral:
        overall = "negative"
    sources: List[str] = []
    for article in articles:
        if article.source not in sources:
            sources.append(article.source)
    return NewsAnalysis(
        symbol=symbol,
        articles=articles,
        overall_sentiment=overall,
        positive_count=positive,
        negative_count=negative,
        neutral_count=neutral,
        sources=sources,
    )


def combine_sentiment(analysis: NewsAnalysis) -> tuple[str, float]:
    total = len(analysis.articles)
    news_score = (analysis.positive_count - analysis.negative_count) / total if total else 0.0
    social = analysis.social_sentiment
    if social is None:
        score = news_score
    else:
        score = NEWS_WEIGHT * news_score + SOCIAL_WEIGHT * _SOCIAL_SCORES.get(social.sentiment, 0.0)
    if score > 0:
        return "positive", score
    if score < 0:
        return "negative", score
    return "neutral", 0.0


class NewsAggregator:
    """Fetches, classifies and summarizes news and forum sentiment for a symbol."""

    def __init__(
        self,
        config: Optional[StocratesConfig] = None,
        manager: Optional[FallbackManager] = None,
        reddit: Optional[RedditScraper] = None,
    ) -> None:
        self.config = config or StocratesConfig.from_env()
        if manager is None:
            limiter = MinIntervalLimiter(self.config.min_request_interval)
            manager = FallbackManager(
                build_providers(self.config),
                cooldown=self.config.cooldown_seconds,
                limiter=limiter,
            )
        self.manager = manager
        if reddit is None and self.config.enable_reddit:
            reddit = RedditScraper(self.config.reddit_user_agent)
        self.reddit = reddit

    def fetch_stock_news(self, symbol: str, days_back: Optional[int] = None) -> NewsAnalysis:
        if not symbol or not symbol.strip():
            raise ValueError("Symbol must be provided")
        symbol = symbol.strip().upper()
        if days_back is None:
            days_back = self.config.days_back
        if days_back <= 0:
            raise ValueError("days_back must be a positive number of days")

        try:
            analysis = self._fetch_articles(symbol, days_back)
        except Exception:
            logger.exception("Error fetching news for %s, using example data", symbol)
            analysis = summarize_articles(symbol, mock_articles(symbol))
            analysis.used_mock_data = True
            analysis.source = "example data"

        analysis.social_sentiment = self._social_sentiment(symbol)
        analysis.combined_sentiment, analysis.combined_score = combine_sentiment(analysis)
        return analysis

    def _fetch_articles(self, symbol: str, days_back: int) -> NewsAnalysis:
        result = self.manager.fetch_with_fallback(symbol, get_company_name(symbol), days_back)
        if result.fallback_used:
            logger.info("Fallback was used for %s. Source: %s", symbol, result.source)
        if not result.articles:
            logger.warning("No live news found for %s from any provider, using example data", symbol)
            analysis = summarize_articles(symbol, mock_articles(symbol))
            analysis.used_mock_data = True
        else:
            analysis = summarize_articles(symbol, [classify_article(article) for article in result.articles])
        analysis.source = result.source if result.articles else "example data"
        analysis.fallback_used = result.fallback_used
        return analysis

    def _social_sentiment(self, symbol: str) -> Optional[SocialSentiment]:
        if self.reddit is None:
            return None
        try:
            social = self.reddit.stock_sentiment(symbol, self.config.reddit_limit)
        except Exception as exc:
            logger.error("Error fetching Reddit sentiment for %s: %s", symbol, exc)
            return None
        if social.mention_count <= 0:
            return None
        return social

    @staticmethod
    def to_dict(analysis: NewsAnalysis) -> dict:
        data = asdict(analysis)
        data["source_weights"] = {source: source_weight(source) for source in analysis.sources}
        return data


def format_news_analysis(analysis: NewsAnalysis, days_back: int = 30) -> str:
    """Markdown summary for the chat layer."""
    lines = [
        f"**Recent News Analysis (Past {days_back} Days):**",
        f"Overall sentiment: {analysis.overall_sentiment.upper()} "
        f"({analysis.positive_count} positive, {analysis.negative_count} negative, "
        f"{analysis.neutral_count} neutral)",
        "",
        "**Key Headlines:**",
    ]
    for article in analysis.articles[:3]:
        lines.append(f"• {article.title} - {article.source} ({article.sentiment})")

    social = analysis.social_sentiment
    if social is not None and social.mention_count > 0:
        lines.extend(
            [
                "",
                "**r/WallStreetBets Sentiment:**",
                f"{social.sentiment.upper()} - {social.mention_count} mentions "
                f"(avg score: {round(social.avg_score)})",
                f"Weight: {social.weight}% (Social media sentiment)",
            ]
        )
    lines.extend(["", f"Combined sentiment: {analysis.combined_sentiment.upper()} (source: {analysis.source})"])
    return "\n".join(lines)
