"""Tests for the news provider fallback manager.

Providers are scripted and time is driven by a fake clock.
"""

import pytest

from conftest import ScriptedProvider, make_article
from stocrates.fallback import FallbackManager, is_rate_limit_error
from stocrates.providers.base import RateLimitError


def _manager(clock, limiter, *providers):
    return FallbackManager(providers, cooldown=3600, limiter=limiter, clock=clock)


# ============================================================
# Provider ordering
# ============================================================

class TestProviderOrdering:

    def test_returns_first_provider_with_articles(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [[article]])
        secondary = ScriptedProvider("finnhub", [[make_article("Other")]])
        manager = _manager(clock, limiter, primary, secondary)

        result = manager.fetch_with_fallback("NVDA", "NVIDIA", 30)

        assert result.articles == [article]
        assert result.source == "Newsapi"
        assert result.fallback_used is False
        assert secondary.calls == []
        assert primary.calls == [("NVDA", "NVIDIA", 30)]

    def test_zero_articles_is_soft_failure(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [[]])
        secondary = ScriptedProvider("finnhub", [[article]])
        manager = _manager(clock, limiter, primary, secondary)

        result = manager.fetch_with_fallback("NVDA")

        assert result.articles == [article]
        assert result.source == "Finnhub"
        assert result.fallback_used is True
        status = manager.get_status()
        assert status["newsapi"].available is True
        assert status["newsapi"].request_count == 1
        assert status["finnhub"].request_count == 1

    def test_all_exhausted_returns_empty_result(self, clock, limiter):
        manager = _manager(
            clock,
            limiter,
            ScriptedProvider("newsapi", [[]]),
            ScriptedProvider("finnhub", [RuntimeError("boom")]),
        )

        result = manager.fetch_with_fallback("NVDA")

        assert result.articles == []
        assert result.source == "none"
        assert result.fallback_used is True

    def test_requires_providers(self):
        with pytest.raises(ValueError):
            FallbackManager([])

    def test_rejects_duplicate_names(self):
        with pytest.raises(ValueError):
            FallbackManager([ScriptedProvider("a", [[]]), ScriptedProvider("a", [[]])])


# ============================================================
# Rate limits and cooldown
# ============================================================

class TestRateLimitCooldown:

    def test_rate_limit_sets_one_hour_cooldown(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [Exception("RATE_LIMIT: too many requests")])
        secondary = ScriptedProvider("finnhub", [[article]])
        manager = _manager(clock, limiter, primary, secondary)

        result = manager.fetch_with_fallback("NVDA")

        status = manager.get_status()["newsapi"]
        assert status.available is False
        assert status.rate_limit_reset_at == pytest.approx(clock.now() + 3600, abs=5)
        assert status.last_error == "Rate limit exceeded"
        assert result.source == "Finnhub"
        assert result.fallback_used is True

    def test_next_call_within_cooldown_skips_rate_limited_provider(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [RateLimitError("newsapi"), [make_article("fresh")]])
        secondary = ScriptedProvider("finnhub", [[article]])
        manager = _manager(clock, limiter, primary, secondary)

        manager.fetch_with_fallback("NVDA")
        reset_at = manager.get_status()["newsapi"].rate_limit_reset_at
        clock.advance(1800)
        result = manager.fetch_with_fallback("NVDA")

        assert len(primary.calls) == 1
        assert len(secondary.calls) == 2
        assert result.source == "Finnhub"
        assert manager.get_status()["newsapi"].rate_limit_reset_at == reset_at

    def test_provider_retried_after_cooldown(self, clock, limiter, article):
        fresh = make_article("NVDA rallies")
        primary = ScriptedProvider("newsapi", [RateLimitError("newsapi"), [fresh]])
        secondary = ScriptedProvider("finnhub", [[article]])
        manager = _manager(clock, limiter, primary, secondary)

        manager.fetch_with_fallback("NVDA")
        clock.advance(3600)
        result = manager.fetch_with_fallback("NVDA")

        assert len(primary.calls) == 2
        assert result.articles == [fresh]
        status = manager.get_status()["newsapi"]
        assert status.available is True
        assert status.rate_limit_reset_at is None
        assert status.last_error is None

    def test_transient_error_keeps_provider_available(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [ConnectionError("connection reset"), [article]])
        secondary = ScriptedProvider("finnhub", [[]])
        manager = _manager(clock, limiter, primary, secondary)

        first = manager.fetch_with_fallback("NVDA")
        status = manager.get_status()["newsapi"]
        assert first.articles == []
        assert status.available is True
        assert status.rate_limit_reset_at is None
        assert status.last_error == "connection reset"

        second = manager.fetch_with_fallback("NVDA")
        assert second.articles == [article]
        assert manager.get_status()["newsapi"].last_error is None

    def test_manual_rate_limit_and_reset(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [[article]])
        secondary = ScriptedProvider("finnhub", [[article]])
        manager = _manager(clock, limiter, primary, secondary)

        manager.mark_rate_limited("newsapi")
        assert manager.is_available("newsapi") is False
        manager.fetch_with_fallback("TSLA")
        assert primary.calls == []

        manager.reset()
        status = manager.get_status()["newsapi"]
        assert status.available is True
        assert status.rate_limit_reset_at is None
        assert manager.get_status()["finnhub"].request_count == 1

    def test_status_reports_recovery_after_cooldown(self, clock, limiter):
        manager = _manager(clock, limiter, ScriptedProvider("newsapi", [[]]))
        manager.mark_rate_limited("newsapi")
        assert manager.get_status()["newsapi"].available is False

        clock.advance(7200)

        status = manager.get_status()["newsapi"]
        assert status.available is True
        assert status.rate_limit_reset_at is None

    def test_get_status_returns_copies(self, clock, limiter):
        manager = _manager(clock, limiter, ScriptedProvider("newsapi", [[]]))
        snapshot = manager.get_status()
        snapshot["newsapi"].available = False
        assert manager.get_status()["newsapi"].available is True


class TestRateLimitClassification:

    def test_rate_limit_error_type(self):
        assert is_rate_limit_error(RateLimitError("newsapi", "HTTP 429"))

    def test_message_marker(self):
        assert is_rate_limit_error(Exception("RATE_LIMIT exceeded"))

    def test_other_errors(self):
        assert not is_rate_limit_error(ValueError("bad json"))


# ============================================================
# Missing credentials and request spacing
# ============================================================

class TestConfigurationAndSpacing:

    def test_unconfigured_provider_is_never_attempted(self, clock, limiter, article):
        primary = ScriptedProvider("newsapi", [[article]], configured=False)
        secondary = ScriptedProvider("finnhub", [[article]])
        manager = _manager(clock, limiter, primary, secondary)

        result = manager.fetch_with_fallback("NVDA")

        assert primary.calls == []
        assert result.source == "Finnhub"
        status = manager.get_status()["newsapi"]
        assert status.configured is False
        assert status.last_error == "API key not configured"

    def test_back_to_back_requests_are_spaced(self, clock, limiter, article):
        provider = ScriptedProvider("newsapi", [[article]])
        manager = _manager(clock, limiter, provider)

        manager.fetch_with_fallback("AAPL")
        clock.advance(0.25)
        manager.fetch_with_fallback("MSFT")

        assert clock.sleeps == [pytest.approx(0.75)]
        assert manager.get_status()["newsapi"].last_request_at == clock.now()
