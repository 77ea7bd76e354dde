"""Shared fixtures: a controllable clock and scripted news providers.

Nothing here touches the network or sleeps.
"""

import pytest

from stocrates.models import Article
from stocrates.providers.base import NewsProvider
from stocrates.ratelimit import MinIntervalLimiter


class FakeClock:
    """Clock whose time only moves when a test (or a limiter) advances it."""

    def __init__(self, start=1_700_000_000.0):
        self.current = start
        self.sleeps = []

    def now(self):
        return self.current

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.current += seconds

    def advance(self, seconds):
        self.current += seconds


class ScriptedProvider(NewsProvider):
    """Provider that replays a list of outcomes, one per fetch call.

    An outcome is either a list of articles or an exception instance.
    The last outcome repeats once the script runs out.
    """

    def __init__(self, name, outcomes, configured=True):
        self.name = name
        self.display_name = name.title()
        self._outcomes = list(outcomes)
        self._configured = configured
        self.calls = []

    @property
    def configured(self):
        return self._configured

    def fetch(self, symbol, company_name=None, days_back=30):
        self.calls.append((symbol, company_name, days_back))
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return list(outcome)


def make_article(title="NVDA surges on earnings beat", source="Reuters", snippet=""):
    return Article(
        title=title,
        source=source,
        url="https://example.com/" + title.lower().replace(" ", "-"),
        published_at="2026-10-01T12:00:00+00:00",
        snippet=snippet,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return MinIntervalLimiter(1.0, clock)


@pytest.fixture
def article():
    return make_article()
