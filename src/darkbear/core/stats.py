"""Portfolio-wide statistics derived from computed positions."""

from decimal import Decimal
from typing import Mapping, Sequence

from .models import GlobalStats, MarketQuote, PortfolioPosition
from .valuation import normalize_symbol

ZERO = Decimal("0")


def total_value(positions: Sequence[PortfolioPosition]) -> Decimal:
    return sum((p.market_value for p in positions), ZERO)


def total_invested(positions: Sequence[PortfolioPosition]) -> Decimal:
    """Capital still invested in open positions.

    Rebuilt from the average price, so it is scaled back up by the unit
    multiplier: for stocks ``quantity`` counts lots, ``average_buy_price`` is
    per share.
    """
    return sum((p.quantity * p.multiplier * p.average_buy_price for p in positions), ZERO)


def today_pl(
    positions: Sequence[PortfolioPosition],
    quotes: Mapping[str, MarketQuote],
) -> Decimal:
    """Estimate today's P/L from current value and the 24h percent change.

    This is an approximation, not a start-of-day revaluation. Positions
    without a quote contribute nothing.
    """
    by_symbol = {normalize_symbol(k): q for k, q in quotes.items()}
    result = ZERO
    for p in positions:
        quote = by_symbol.get(normalize_symbol(p.symbol))
        change = quote.change_24h if quote is not None else ZERO
        result += p.market_value * (change / 100)
    return result


def compute_stats(
    positions: Sequence[PortfolioPosition],
    quotes: Mapping[str, MarketQuote],
) -> GlobalStats:
    value = total_value(positions)
    invested = total_invested(positions)
    all_time = value - invested
    today = today_pl(positions, quotes)
    return GlobalStats(
        total_value=value,
        total_invested=invested,
        all_time_pl=all_time,
        all_time_pl_percent=all_time / invested * 100 if invested > 0 else ZERO,
        today_pl=today,
        today_pl_percent=today / value * 100 if value > 0 else ZERO,
    )
