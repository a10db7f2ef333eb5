"""Stock and gold quotes via yfinance."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

import yfinance as yf

from ..core.exceptions import QuoteFetchError
from ..core.models import MarketQuote, QuoteSource

logger = logging.getLogger(__name__)

GOLD_FUTURES = "GC=F"  # USD per troy ounce
GRAMS_PER_TROY_OUNCE = Decimal("31.1034768")

# Exchange suffixes to try after the local one if direct lookup fails
EXCHANGE_SUFFIXES = ["", ".JK"]


def _change_pct(last: Decimal, previous: Optional[Decimal]) -> Decimal:
    if previous is None or previous == 0:
        return Decimal("0")
    return ((last - previous) / previous * 100).quantize(Decimal("0.0001"))


class EquityFetcher:
    """Fetches last price and 24h change from Yahoo Finance.

    Prices quoted in a currency other than the reporting currency are
    converted with a flat USD rate.
    """

    def __init__(self, currency: str = "IDR", usd_rate: Decimal = Decimal("1"), local_suffix: str = ".JK"):
        self.currency = currency.upper()
        self.usd_rate = usd_rate
        self.local_suffix = local_suffix

    @staticmethod
    def _try_fetch(symbol: str) -> Optional[tuple[Decimal, Decimal, Optional[str]]]:
        """Return (last price, 24h change %, quote currency or None), or None on failure."""
        try:
            ticker = yf.Ticker(symbol)
            # Try fast_info first
            try:
                info = ticker.fast_info
                last = getattr(info, "last_price", None)
                if last is not None and last > 0:
                    prev = getattr(info, "previous_close", None)
                    currency = getattr(info, "currency", None)
                    last_d = Decimal(str(last))
                    prev_d = Decimal(str(prev)) if prev else None
                    return last_d, _change_pct(last_d, prev_d), currency.upper() if currency else None
            except Exception as e:
                logger.debug("fast_info failed for %s: %s", symbol, e)
            # Fallback to history
            hist = ticker.history(period="5d")
            if not hist.empty:
                closes = hist["Close"]
                last_d = Decimal(str(closes.iloc[-1]))
                prev_d = Decimal(str(closes.iloc[-2])) if len(closes) > 1 else None
                return last_d, _change_pct(last_d, prev_d), None
        except Exception as e:
            logger.warning("yfinance lookup failed for %s: %s", symbol, e)
        return None

    def _candidates(self, symbol: str) -> list[str]:
        if "." in symbol or "=" in symbol:
            return [symbol]
        candidates = [symbol + self.local_suffix] if self.local_suffix else []
        for suffix in EXCHANGE_SUFFIXES:
            candidate = symbol + suffix
            if candidate not in candidates:
                candidates.append(candidate)
        return candidates

    def _convert(self, price: Decimal, quote_currency: Optional[str], candidate: str = "") -> Decimal:
        if quote_currency is None and self.local_suffix and candidate.endswith(self.local_suffix):
            quote_currency = self.currency
        if quote_currency == self.currency:
            return price
        return price * self.usd_rate

    def fetch_quote(self, symbol: str) -> MarketQuote:
        """Fetch a stock quote. Raises QuoteFetchError if no candidate resolves."""
        symbol = symbol.upper()
        for candidate in self._candidates(symbol):
            found = self._try_fetch(candidate)
            if found is None:
                continue
            price, change, quote_currency = found
            return MarketQuote(
                symbol=symbol,
                price=self._convert(price, quote_currency, candidate).quantize(Decimal("0.0001")),
                change_24h=change,
                last_updated=datetime.now(),
                sources=(QuoteSource(f"https://finance.yahoo.com/quote/{candidate}", "Yahoo Finance"),),
            )
        raise QuoteFetchError(f"No price found for {symbol}")

    def fetch_gold_quote(self, symbol: str) -> MarketQuote:
        """Quote gold per gram from COMEX futures."""
        found = self._try_fetch(GOLD_FUTURES)
        if found is None:
            raise QuoteFetchError(f"No gold price found for {symbol}")
        per_ounce, change, quote_currency = found
        per_gram = self._convert(per_ounce, quote_currency) / GRAMS_PER_TROY_OUNCE
        return MarketQuote(
            symbol=symbol.upper(),
            price=per_gram.quantize(Decimal("0.0001")),
            change_24h=change,
            last_updated=datetime.now(),
            sources=(QuoteSource(f"https://finance.yahoo.com/quote/{GOLD_FUTURES}", "Yahoo Finance"),),
        )

    def fetch_batch(self, symbols: list[str]) -> dict[str, Optional[MarketQuote]]:
        """Fetch quotes for multiple symbols; failures map to None."""
        results: dict[str, Optional[MarketQuote]] = {}
        for symbol in symbols:
            try:
                results[symbol.upper()] = self.fetch_quote(symbol)
            except QuoteFetchError as e:
                logger.warning("%s", e)
                results[symbol.upper()] = None
        return results


def fetch_usd_rate(currency: str, fallback: Decimal) -> Decimal:
    """Live USD -> ``currency`` rate, or ``fallback`` when Yahoo has none."""
    currency = currency.upper()
    if currency == "USD":
        return Decimal("1")
    found = EquityFetcher._try_fetch(f"USD{currency}=X")
    if found is None:
        logger.warning("Using configured USD/%s rate %s", currency, fallback)
        return fallback
    return found[0].quantize(Decimal("0.0001"))
