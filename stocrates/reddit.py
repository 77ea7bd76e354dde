"""Top-post scraper for r/wallstreetbets.

Reads the public JSON listing (no auth, User-Agent required), counts ticker
mentions and labels each post with the forum-slang classifier.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple

import requests

from .config import DEFAULT_USER_AGENT
from .models import RedditAnalysis, RedditPost, SocialSentiment, TickerStats
from .ratelimit import MinIntervalLimiter
from .sentiment import classify_social

logger = logging.getLogger(__name__)

REDDIT_BASE = "https://www.reddit.com"
BATCH_SIZE = 100
BATCH_INTERVAL = 2.0
TIMEFRAMES = ("hour", "day", "week", "month", "year", "all")
SOCIAL_WEIGHT = 25

_TICKER_RE = re.compile(r"\$([A-Z]{1,5})\b|(?:^|\s)([A-Z]{2,5})(?=\s|$)")
_EXCLUDED_WORDS = {
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HER",
    "WAS", "ONE", "OUR", "OUT", "DAY", "GET", "HAS", "HIM", "HIS", "HOW",
    "ITS", "MAY", "NEW", "NOW", "OLD", "SEE", "TWO", "WHO", "BOY", "DID",
    "LET", "PUT", "SAY", "SHE", "TOO", "USE",
}


class RedditError(RuntimeError):
    """Raised when the Reddit listing cannot be read."""


def extract_stock_mentions(text: str) -> List[str]:
    tickers: List[str] = []
    for match in _TICKER_RE.finditer(text or ""):
        ticker = match.group(1) or match.group(2)
        if not ticker or not 2 <= len(ticker) <= 5:
            continue
        if ticker in _EXCLUDED_WORDS or ticker in tickers:
            continue
        tickers.append(ticker)
    return tickers


def analyze_posts(posts: Iterable[RedditPost]) -> RedditAnalysis:
    posts = list(posts)
    stats_by_ticker: Dict[str, TickerStats] = {}
    for post in posts:
        post.sentiment = classify_social(f"{post.title} {post.selftext}").label
        for ticker in post.stock_mentions:
            stats = stats_by_ticker.setdefault(ticker, TickerStats())
            stats.count += 1
            stats.avg_score = (stats.avg_score * (stats.count - 1) + post.score) / stats.count
            if post.sentiment == "bullish":
                stats.bullish_count += 1
            elif post.sentiment == "bearish":
                stats.bearish_count += 1

    for stats in stats_by_ticker.values():
        if stats.bullish_count > stats.bearish_count:
            stats.sentiment = "bullish"
        elif stats.bearish_count > stats.bullish_count:
            stats.sentiment = "bearish"
        else:
            stats.sentiment = "neutral"

    top = sorted(stats_by_ticker.items(), key=lambda item: item[1].count, reverse=True)[:10]
    return RedditAnalysis(
        posts=posts,
        total_posts=len(posts),
        stock_mentions=stats_by_ticker,
        summary=_summarize(top, len(posts)),
    )


def _summarize(top: List[Tuple[str, TickerStats]], total_posts: int) -> str:
    lines = [f"r/WallStreetBets Analysis ({total_posts} posts)", "", "Top Mentioned Stocks:"]
    for index, (ticker, stats) in enumerate(top, start=1):
        lines.append(
            f"{index}. ${ticker} - {stats.count} mentions "
            f"({stats.sentiment.upper()}, avg score: {round(stats.avg_score)})"
        )
    return "\n".join(lines)


class RedditScraper:
    """Reads top posts in batches, pacing requests through a limiter."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        limiter: Optional[MinIntervalLimiter] = None,
        subreddit: str = "wallstreetbets",
        session: Optional[requests.Session] = None,
    ) -> None:
        self.subreddit = subreddit
        self.limiter = limiter or MinIntervalLimiter(BATCH_INTERVAL)
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def scrape(self, limit: int = 1000, timeframe: str = "week") -> RedditAnalysis:
        if timeframe not in TIMEFRAMES:
            raise ValueError(f"timeframe must be one of {', '.join(TIMEFRAMES)}")
        if limit <= 0:
            raise ValueError("limit must be positive")
        posts: List[RedditPost] = []
        after: Optional[str] = None
        while len(posts) < limit:
            self.limiter.acquire("reddit")
            batch, after = self._fetch_batch(min(BATCH_SIZE, limit - len(posts)), timeframe, after)
            posts.extend(batch)
            if not after or not batch:
                break
        logger.info("Scraped %d posts from r/%s", len(posts), self.subreddit)
        return analyze_posts(posts[:limit])

    def stock_sentiment(self, symbol: str, limit: int = 100) -> SocialSentiment:
        symbol = symbol.upper()
        analysis = self.scrape(limit, "week")
        stats = analysis.stock_mentions.get(symbol)
        if stats is None:
            return SocialSentiment(sentiment="neutral", mention_count=0, avg_score=0.0, weight=SOCIAL_WEIGHT)
        top_posts = sorted(
            (post for post in analysis.posts if symbol in post.stock_mentions),
            key=lambda post: post.score,
            reverse=True,
        )[:5]
        return SocialSentiment(
            sentiment=stats.sentiment,
            mention_count=stats.count,
            avg_score=stats.avg_score,
            weight=SOCIAL_WEIGHT,
            top_posts=top_posts,
        )

    def _fetch_batch(self, limit: int, timeframe: str, after: Optional[str]) -> Tuple[List[RedditPost], Optional[str]]:
        params = {"t": timeframe, "limit": limit}
        if after:
            params["after"] = after
        try:
            response = self._session.get(
                f"{REDDIT_BASE}/r/{self.subreddit}/top.json",
                params=params,
                timeout=15,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RedditError(f"Reddit API error: {exc}") from exc

        data = payload.get("data") or {}
        posts = [_parse_post(child.get("data") or {}) for child in data.get("children") or []]
        return posts, data.get("after")


def _parse_post(post: Dict[str, object]) -> RedditPost:
    title = str(post.get("title") or "")
    selftext = str(post.get("selftext") or "")
    return RedditPost(
        id=str(post.get("id") or ""),
        title=title,
        author=str(post.get("author") or ""),
        score=int(post.get("score") or 0),
        upvote_ratio=float(post.get("upvote_ratio") or 0.0),
        num_comments=int(post.get("num_comments") or 0),
        created=float(post.get("created_utc") or 0.0),
        url=f"https://reddit.com{post.get('permalink') or ''}",
        selftext=selftext,
        flair=post.get("link_flair_text"),
        stock_mentions=extract_stock_mentions(f"{title} {selftext}"),
    )
