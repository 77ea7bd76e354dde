"""News and price providers."""

from .base import NewsProvider, ProviderList, RateLimitError
from .finnhub_provider import FinnhubNewsProvider, FinnhubPriceClient
from .mock_provider import mock_articles
from .newsapi_provider import NewsAPIProvider, get_company_name
from .rss_provider import YahooRSSProvider

__all__ = [
    "FinnhubNewsProvider",
    "FinnhubPriceClient",
    "NewsAPIProvider",
    "NewsProvider",
    "ProviderList",
    "RateLimitError",
    "YahooRSSProvider",
    "get_company_name",
    "mock_articles",
]
