"""Stocrates package initializer."""

from .aggregator import NewsAggregator
from .config import StocratesConfig
from .fallback import FallbackManager

__all__ = ["FallbackManager", "NewsAggregator", "StocratesConfig"]
