"""Command line entry points for checking providers by hand."""

from __future__ import annotations

import argparse
from datetime import date
import json
import logging
from typing import List, Optional

from dotenv import load_dotenv

from .aggregator import NewsAggregator, format_news_analysis
from .config import StocratesConfig
from .events import EventDetector, display_name
from .providers.finnhub_provider import FinnhubPriceClient
from .reddit import TIMEFRAMES, RedditScraper

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("date must be YYYY-MM-DD") from exc


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive number of days")
    return parsed


def _print_status(manager) -> None:
    for name, status in manager.get_status().items():
        print(
            f"{status.display_name} ({name}): available={status.available} "
            f"configured={status.configured} requests={status.request_count} "
            f"last_error={status.last_error or '-'}"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stocrates", description="Stocrates news and price tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    news = sub.add_parser("news", help="Fetch and classify news for a symbol")
    news.add_argument("symbol")
    news.add_argument("--days", type=_positive_int, default=None, help="Lookback window in days")
    news.add_argument("--json", action="store_true", help="Print the raw analysis as JSON")

    status = sub.add_parser("status", help="Fetch news for a symbol and print provider status")
    status.add_argument("--symbol", default="NVDA")
    status.add_argument(
        "--mark-limited",
        action="append",
        default=[],
        metavar="PROVIDER",
        help="Put a provider into its rate-limit cooldown before fetching",
    )
    status.add_argument("--reset", action="store_true", help="Reset every provider after fetching")

    reddit = sub.add_parser("reddit", help="Scrape r/wallstreetbets sentiment")
    reddit.add_argument("--symbol", default=None)
    reddit.add_argument("--limit", type=int, default=100)
    reddit.add_argument("--timeframe", choices=TIMEFRAMES, default="week")

    price = sub.add_parser("price", help="Historical closing price")
    price.add_argument("symbol")
    price.add_argument("date", type=_parse_date)

    event = sub.add_parser("event", help="Categorize a news headline")
    event.add_argument("headline")
    event.add_argument("--content", default="")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    config = StocratesConfig.from_env()

    if args.command == "news":
        aggregator = NewsAggregator(config)
        analysis = aggregator.fetch_stock_news(args.symbol, args.days)
        if args.json:
            print(json.dumps(aggregator.to_dict(analysis), indent=2, default=str))
        else:
            print(format_news_analysis(analysis, config.days_back if args.days is None else args.days))
        return 0

    if args.command == "status":
        aggregator = NewsAggregator(config)
        known = aggregator.manager.get_status()
        for name in args.mark_limited:
            if name not in known:
                logger.error("Unknown provider %s, expected one of: %s", name, ", ".join(known))
                return 2
            aggregator.manager.mark_rate_limited(name)
        analysis = aggregator.fetch_stock_news(args.symbol)
        print(f"{analysis.symbol}: {len(analysis.articles)} articles from {analysis.source}")
        _print_status(aggregator.manager)
        if args.reset:
            aggregator.manager.reset()
            print("All providers reset")
            _print_status(aggregator.manager)
        return 0

    if args.command == "reddit":
        scraper = RedditScraper(config.reddit_user_agent)
        if args.symbol:
            social = scraper.stock_sentiment(args.symbol, args.limit)
            print(
                f"{args.symbol.upper()}: {social.sentiment.upper()} - {social.mention_count} mentions "
                f"(avg score: {round(social.avg_score)})"
            )
        else:
            print(scraper.scrape(args.limit, args.timeframe).summary)
        return 0

    if args.command == "price":
        price = FinnhubPriceClient(config.finnhub_key).historical_price(args.symbol, args.date)
        if price is None:
            logger.warning("No historical price data available for %s on %s", args.symbol, args.date)
            return 1
        print(f"{args.symbol.upper()} {args.date.isoformat()}: {price:.2f}")
        return 0

    if args.command == "event":
        detected = EventDetector(config.groq_key, config.groq_model).detect(args.headline, args.content)
        print(f"{display_name(detected.type)} ({detected.confidence}%): {detected.reasoning}")
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
