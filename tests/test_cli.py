"""Tests for the command line entry points."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from conftest import ScriptedProvider
from stocrates import cli
from stocrates.aggregator import NewsAggregator
from stocrates.config import StocratesConfig
from stocrates.fallback import FallbackManager
from stocrates.models import DetectedEvent


@pytest.fixture(autouse=True)
def no_dotenv():
    with patch.object(cli, "load_dotenv"):
        yield


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_price_rejects_bad_date():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["price", "AAPL", "2024/01/15"])


def test_price_command(capsys):
    client = MagicMock()
    client.historical_price.return_value = 101.5
    with patch.object(cli, "FinnhubPriceClient", return_value=client):
        assert cli.main(["price", "aapl", "2024-01-15"]) == 0
    client.historical_price.assert_called_once_with("aapl", date(2024, 1, 15))
    assert "AAPL 2024-01-15: 101.50" in capsys.readouterr().out


def test_price_command_without_data():
    client = MagicMock()
    client.historical_price.return_value = None
    with patch.object(cli, "FinnhubPriceClient", return_value=client):
        assert cli.main(["price", "AAPL", "2024-01-13"]) == 1


def test_event_command(capsys):
    detector = MagicMock()
    detector.detect.return_value = DetectedEvent(type="merger", confidence=77, reasoning="Buyout")
    with patch.object(cli, "EventDetector", return_value=detector):
        assert cli.main(["event", "Company acquired"]) == 0
    assert "Merger & Acquisition (77%): Buyout" in capsys.readouterr().out


@pytest.mark.parametrize("days", ["0", "-2", "ten"])
def test_news_rejects_non_positive_days(days):
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["news", "NVDA", "--days", days])


class TestStatusCommand:

    @pytest.fixture
    def providers(self, article):
        return ScriptedProvider("newsapi", [[article]]), ScriptedProvider("finnhub", [[article]])

    @pytest.fixture
    def aggregator(self, clock, limiter, providers):
        manager = FallbackManager(providers, limiter=limiter, clock=clock)
        aggregator = NewsAggregator(StocratesConfig(enable_reddit=False), manager=manager)
        with patch.object(cli, "NewsAggregator", return_value=aggregator):
            yield aggregator

    def test_mark_limited_skips_provider(self, aggregator, providers, capsys):
        newsapi, finnhub = providers

        assert cli.main(["status", "--symbol", "tsla", "--mark-limited", "newsapi"]) == 0

        assert newsapi.calls == []
        assert len(finnhub.calls) == 1
        out = capsys.readouterr().out
        assert "TSLA: 1 articles from Finnhub" in out
        assert "Newsapi (newsapi): available=False" in out
        assert aggregator.manager.is_available("newsapi") is False

    def test_reset_restores_providers(self, aggregator, capsys):
        assert cli.main(["status", "--mark-limited", "newsapi", "--reset"]) == 0

        out = capsys.readouterr().out
        assert "All providers reset" in out
        assert out.rstrip().splitlines()[-2].startswith("Newsapi (newsapi): available=True")
        assert aggregator.manager.is_available("newsapi") is True

    def test_unknown_provider_is_rejected(self, aggregator, providers):
        assert cli.main(["status", "--mark-limited", "bloomberg"]) == 2
        assert providers[0].calls == []
