from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from stocrates import NewsAggregator, StocratesConfig
from stocrates.aggregator import format_news_analysis
from stocrates.events import EventDetector, display_name, icon
from stocrates.models import Investment
from stocrates.portfolio import portfolio_summary, track_portfolio
from stocrates.providers.finnhub_provider import FinnhubPriceClient


def create_app(
    config: Optional[StocratesConfig] = None,
    aggregator: Optional[NewsAggregator] = None,
    price_client: Optional[FinnhubPriceClient] = None,
    event_detector: Optional[EventDetector] = None,
) -> Flask:
    config = config or StocratesConfig.from_env()
    aggregator = aggregator or NewsAggregator(config)
    price_client = price_client or FinnhubPriceClient(config.finnhub_key)
    event_detector = event_detector or EventDetector(config.groq_key, config.groq_model)

    app = Flask(__name__)

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    @app.get("/api/historical-price")
    def historical_price():
        symbol = request.args.get("symbol")
        date_str = request.args.get("date")
        if not symbol:
            return jsonify({"error": "Missing required parameter: symbol"}), 400
        if not date_str:
            return jsonify({"error": "Missing required parameter: date"}), 400
        try:
            on = date.fromisoformat(date_str)
        except ValueError:
            return jsonify({"error": "Invalid date format. Use YYYY-MM-DD"}), 400
        try:
            price = price_client.historical_price(symbol, on)
        except Exception:
            app.logger.exception("Error in historical-price API")
            return jsonify({"error": "Internal server error"}), 500
        if price is None:
            return (
                jsonify(
                    {
                        "error": f"No historical price data available for {symbol} on {date_str}",
                        "symbol": symbol,
                        "date": date_str,
                        "price": None,
                    }
                ),
                404,
            )
        return jsonify({"symbol": symbol, "date": date_str, "price": price, "source": "finnhub"})

    @app.get("/api/news")
    def news():
        symbol = request.args.get("symbol")
        days = request.args.get("days", type=int)
        if not symbol:
            return jsonify({"error": "`symbol` is required"}), 400
        try:
            analysis = aggregator.fetch_stock_news(symbol, days)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        except Exception as exc:  # pragma: no cover - runtime guard
            app.logger.exception("Uncaught exception when handling /api/news")
            return jsonify({"error": "Unexpected server error", "detail": str(exc)}), 500
        payload = aggregator.to_dict(analysis)
        payload["formatted"] = format_news_analysis(analysis, config.days_back if days is None else days)
        return jsonify(payload)

    @app.get("/api/news/status")
    def news_status():
        return jsonify({name: asdict(status) for name, status in aggregator.manager.get_status().items()})

    @app.post("/api/news/reset")
    def news_reset():
        aggregator.manager.reset()
        return jsonify({name: asdict(status) for name, status in aggregator.manager.get_status().items()})

    @app.get("/api/reddit/sentiment")
    def reddit_sentiment():
        symbol = request.args.get("symbol")
        limit = request.args.get("limit", default=config.reddit_limit, type=int)
        if not symbol:
            return jsonify({"error": "`symbol` is required"}), 400
        if aggregator.reddit is None:
            return jsonify({"error": "Reddit sentiment is disabled"}), 404
        try:
            social = aggregator.reddit.stock_sentiment(symbol, limit)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        except Exception as exc:
            app.logger.exception("Uncaught exception when handling /api/reddit/sentiment")
            return jsonify({"error": "Unexpected server error", "detail": str(exc)}), 502
        return jsonify(asdict(social))

    @app.post("/api/events/detect")
    def detect_event():
        payload = request.get_json(silent=True) or {}
        headline = payload.get("headline")
        if not headline:
            return jsonify({"error": "`headline` is required"}), 400
        detected = event_detector.detect(headline, payload.get("content") or "")
        data = asdict(detected)
        data["display_name"] = display_name(detected.type)
        data["icon"] = icon(detected.type)
        return jsonify(data)

    @app.post("/api/portfolio/track")
    def track():
        payload = request.get_json(silent=True) or {}
        try:
            investments = [_parse_investment(item) for item in payload.get("investments") or []]
            current = payload.get("current_date")
            current_date = date.fromisoformat(current) if current else None
        except (KeyError, TypeError, ValueError) as exc:
            return jsonify({"error": f"Invalid investment payload: {exc}"}), 400
        performances = track_portfolio(investments, price_client.historical_price, current_date)
        return jsonify(
            {
                "performances": [_performance_to_dict(p) for p in performances],
                "summary": portfolio_summary(performances),
            }
        )

    return app


def _performance_to_dict(performance) -> dict:
    data = asdict(performance)
    data["investment"]["purchase_date"] = performance.investment.purchase_date.isoformat()
    return data


def _parse_investment(item: dict) -> Investment:
    shares = float(item["shares"])
    price = float(item["purchase_price"])
    return Investment(
        symbol=str(item["symbol"]).upper(),
        shares=shares,
        purchase_price=price,
        purchase_date=date.fromisoformat(item["purchase_date"]),
        amount=float(item.get("amount") or shares * price),
    )


load_dotenv()
app = create_app()


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=8008)
