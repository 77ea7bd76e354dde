"""Time-travel portfolio tracking.

Values investments made on a past date at the price of a later date, so the
game can show what a purchase would be worth "today".
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
import logging
from typing import Callable, Iterable, List, Optional

from .models import Investment, PortfolioPerformance

logger = logging.getLogger(__name__)

PriceLookup = Callable[[str, date], Optional[float]]


def track_investment(
    investment: Investment,
    price_lookup: PriceLookup,
    current_date: Optional[date] = None,
) -> PortfolioPerformance:
    current_date = current_date or date.today()
    days_held = (current_date - investment.purchase_date).days

    current_price = investment.purchase_price
    if investment.purchase_date < current_date:
        try:
            fetched = price_lookup(investment.symbol, current_date)
        except Exception as exc:
            logger.error("Error fetching current price for %s: %s", investment.symbol, exc)
            fetched = None
        if fetched is not None:
            current_price = fetched
        else:
            logger.warning("No price for %s on %s, using purchase price", investment.symbol, current_date)

    current_value = investment.shares * current_price
    profit_loss = current_value - investment.amount
    profit_loss_percentage = (profit_loss / investment.amount) * 100 if investment.amount else 0.0

    years_held = days_held / 365
    if years_held > 0 and investment.amount > 0 and current_value > 0:
        annualized = ((current_value / investment.amount) ** (1 / years_held) - 1) * 100
    else:
        annualized = 0.0

    return PortfolioPerformance(
        investment=replace(investment),
        current_price=current_price,
        current_value=current_value,
        profit_loss=profit_loss,
        profit_loss_percentage=profit_loss_percentage,
        days_held=days_held,
        annualized_return=annualized,
    )


def track_portfolio(
    investments: Iterable[Investment],
    price_lookup: PriceLookup,
    current_date: Optional[date] = None,
) -> List[PortfolioPerformance]:
    return [track_investment(investment, price_lookup, current_date) for investment in investments]


def portfolio_summary(performances: Iterable[PortfolioPerformance]) -> dict:
    performances = list(performances)
    total_invested = sum(p.investment.amount for p in performances)
    total_value = sum(p.current_value for p in performances)
    total_pl = total_value - total_invested
    count = len(performances)
    return {
        "total_invested": total_invested,
        "total_current_value": total_value,
        "total_profit_loss": total_pl,
        "total_profit_loss_percentage": (total_pl / total_invested) * 100 if total_invested > 0 else 0.0,
        "winners": sum(1 for p in performances if p.profit_loss > 0),
        "losers": sum(1 for p in performances if p.profit_loss < 0),
        "breakeven": sum(1 for p in performances if p.profit_loss == 0),
        "avg_annualized_return": sum(p.annualized_return for p in performances) / count if count else 0.0,
        "investment_count": count,
    }


def format_currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"
