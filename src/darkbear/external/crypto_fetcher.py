"""Crypto quotes via CoinGecko free API."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

import requests

from ..core.exceptions import QuoteFetchError
from ..core.models import MarketQuote, QuoteSource

logger = logging.getLogger(__name__)

# Map common crypto symbols to CoinGecko IDs
SYMBOL_TO_COINGECKO = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "BNB": "binancecoin",
    "XRP": "ripple",
    "DOGE": "dogecoin",
    "USDT": "tether",
}

COINGECKO_API = "https://api.coingecko.com/api/v3"


def coingecko_id(symbol: str) -> str:
    """Resolve a journal symbol such as ``BTC`` or ``BTC-IDR`` to a CoinGecko id."""
    s = symbol.upper()
    if s in SYMBOL_TO_COINGECKO:
        return SYMBOL_TO_COINGECKO[s]
    for marker, coin_id in SYMBOL_TO_COINGECKO.items():
        if marker in s:
            return coin_id
    # Try using symbol as-is (lowercase) as CoinGecko ID
    return symbol.lower()


class CryptoFetcher:
    """Fetches crypto quotes via CoinGecko (free, no API key)."""

    def __init__(self, currency: str = "IDR"):
        self.currency = currency.lower()

    def _get(self, coin_ids: list[str]) -> dict:
        resp = requests.get(
            f"{COINGECKO_API}/simple/price",
            params={
                "ids": ",".join(coin_ids),
                "vs_currencies": self.currency,
                "include_24hr_change": "true",
            },
            timeout=10,
        )
        resp.raise_for_status()
        return resp.json()

    def _quote(self, symbol: str, coin_id: str, data: dict) -> Optional[MarketQuote]:
        entry = data.get(coin_id) or {}
        if self.currency not in entry:
            return None
        change = entry.get(f"{self.currency}_24h_change") or 0
        return MarketQuote(
            symbol=symbol.upper(),
            price=Decimal(str(entry[self.currency])),
            change_24h=Decimal(str(change)).quantize(Decimal("0.0001")),
            last_updated=datetime.now(),
            sources=(QuoteSource(f"https://www.coingecko.com/en/coins/{coin_id}", "CoinGecko"),),
        )

    def fetch_quote(self, symbol: str) -> MarketQuote:
        """Fetch current quote for a single crypto symbol."""
        coin_id = coingecko_id(symbol)
        try:
            data = self._get([coin_id])
        except Exception as e:
            raise QuoteFetchError(f"Failed to fetch crypto price for {symbol}: {e}") from e
        quote = self._quote(symbol, coin_id, data)
        if quote is None:
            raise QuoteFetchError(f"CoinGecko has no {self.currency.upper()} price for {symbol}")
        return quote

    def fetch_batch(self, symbols: list[str]) -> dict[str, Optional[MarketQuote]]:
        """Fetch quotes for multiple crypto symbols in one request."""
        symbol_to_id = {s.upper(): coingecko_id(s) for s in symbols}
        results: dict[str, Optional[MarketQuote]] = {}
        try:
            data = self._get(sorted(set(symbol_to_id.values())))
        except Exception as e:
            logger.warning("CoinGecko batch request failed: %s", e)
            return {s: None for s in symbol_to_id}
        for symbol, coin_id in symbol_to_id.items():
            results[symbol] = self._quote(symbol, coin_id, data)
        return results
