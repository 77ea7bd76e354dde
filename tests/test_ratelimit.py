"""Tests for per-key request spacing."""

import pytest

from stocrates.ratelimit import MinIntervalLimiter


def test_first_acquire_does_not_wait(clock):
    limiter = MinIntervalLimiter(1.0, clock)
    assert limiter.acquire("newsapi") == 0.0
    assert clock.sleeps == []
    assert limiter.last_acquired("newsapi") == clock.now()


def test_waits_out_remaining_interval(clock):
    limiter = MinIntervalLimiter(1.0, clock)
    limiter.acquire("newsapi")
    clock.advance(0.4)
    assert limiter.acquire("newsapi") == pytest.approx(0.6)
    assert clock.sleeps == [pytest.approx(0.6)]


def test_keys_are_independent(clock):
    limiter = MinIntervalLimiter(1.0, clock)
    limiter.acquire("newsapi")
    assert limiter.acquire("finnhub") == 0.0


def test_no_wait_after_interval(clock):
    limiter = MinIntervalLimiter(2.0, clock)
    limiter.acquire("reddit")
    clock.advance(5)
    assert limiter.acquire("reddit") == 0.0


def test_reset_forgets_keys(clock):
    limiter = MinIntervalLimiter(1.0, clock)
    limiter.acquire("newsapi")
    limiter.reset()
    assert limiter.last_acquired("newsapi") is None
    assert limiter.acquire("newsapi") == 0.0


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        MinIntervalLimiter(-1)
