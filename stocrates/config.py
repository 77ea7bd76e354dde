from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_USER_AGENT = "Stocrates/1.0 (Educational Stock Analysis Tool)"


@dataclass(slots=True)
class StocratesConfig:
    """Runtime configuration for the Stocrates services."""

    newsapi_key: Optional[str] = None
    finnhub_key: Optional[str] = None
    groq_key: Optional[str] = None
    cooldown_seconds: float = 60 * 60
    min_request_interval: float = 1.0
    days_back: int = 30
    reddit_limit: int = 100
    reddit_user_agent: str = DEFAULT_USER_AGENT
    enable_reddit: bool = True
    enable_rss: bool = False
    groq_model: str = "llama-3.3-70b-versatile"

    @classmethod
    def from_env(cls) -> "StocratesConfig":
        return cls(
            newsapi_key=os.getenv("NEWSAPI_KEY") or None,
            finnhub_key=os.getenv("FINNHUB_API_KEY") or None,
            groq_key=os.getenv("GROQ_API_KEY") or None,
            cooldown_seconds=_parse_number("STOCRATES_COOLDOWN_SECONDS", float, 60 * 60),
            min_request_interval=_parse_number("STOCRATES_MIN_REQUEST_INTERVAL", float, 1.0),
            days_back=_parse_number("STOCRATES_DAYS_BACK", int, 30),
            reddit_limit=_parse_number("STOCRATES_REDDIT_LIMIT", int, 100),
            reddit_user_agent=os.getenv("STOCRATES_REDDIT_USER_AGENT") or DEFAULT_USER_AGENT,
            enable_reddit=_parse_flag(os.getenv("STOCRATES_ENABLE_REDDIT"), default=True),
            enable_rss=_parse_flag(os.getenv("STOCRATES_ENABLE_RSS"), default=False),
            groq_model=os.getenv("STOCRATES_GROQ_MODEL") or "llama-3.3-70b-versatile",
        )


def _parse_number(name: str, kind, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        parsed = kind(value)
    except ValueError:
        raise ValueError(f"{name} must be a number if set") from None
    if parsed < 0:
        raise ValueError(f"{name} must not be negative")
    return parsed


def _parse_flag(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}
