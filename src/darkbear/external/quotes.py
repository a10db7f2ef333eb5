"""Quote refresh: route each symbol to the fetcher for its asset class."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ..core.classifier import AssetClassifier, classify
from ..core.config import AppConfig, get_config
from ..core.exceptions import InvalidQuoteError, QuoteFetchError
from ..core.models import AssetClass, FetchReport, MarketQuote, QuoteSource
from ..core.valuation import normalize_symbol
from .crypto_fetcher import CryptoFetcher
from .equity_fetcher import EquityFetcher, fetch_usd_rate

logger = logging.getLogger(__name__)


def fetch_quotes(
    symbols: Iterable[str],
    classifier: AssetClassifier = classify,
    config: Optional[AppConfig] = None,
    live_rate: bool = True,
) -> FetchReport:
    """Fetch a quote for every symbol. Unresolved symbols are listed in ``missing``."""
    cfg = config or get_config()
    usd_rate = fetch_usd_rate(cfg.currency, cfg.usd_rate) if live_rate else cfg.usd_rate

    by_class: dict[AssetClass, list[str]] = {}
    for s in dict.fromkeys(normalize_symbol(s) for s in symbols):
        by_class.setdefault(classifier(s), []).append(s)

    report = FetchReport(usd_rate=usd_rate)
    equity = EquityFetcher(cfg.currency, usd_rate, cfg.local_suffix)

    if by_class.get(AssetClass.STOCK):
        for symbol, quote in equity.fetch_batch(by_class[AssetClass.STOCK]).items():
            if quote is not None:
                report.quotes[symbol] = quote

    for symbol in by_class.get(AssetClass.GOLD, []):
        try:
            report.quotes[symbol] = equity.fetch_gold_quote(symbol)
        except QuoteFetchError as e:
            logger.warning("%s", e)

    if by_class.get(AssetClass.CRYPTO):
        batch = CryptoFetcher(cfg.currency).fetch_batch(by_class[AssetClass.CRYPTO])
        for symbol, quote in batch.items():
            if quote is not None:
                report.quotes[symbol] = quote

    report.missing = [s for cls in by_class.values() for s in cls if s not in report.quotes]
    return report


def quote_from_record(record: dict) -> MarketQuote:
    try:
        updated = record.get("last_updated")
        return MarketQuote(
            symbol=normalize_symbol(record["symbol"]),
            price=Decimal(str(record["price"])),
            change_24h=Decimal(str(record.get("change_24h") or 0)),
            last_updated=datetime.fromisoformat(updated) if updated else None,
            sources=tuple(
                QuoteSource(uri=s["uri"], title=s.get("title", "")) for s in record.get("sources", [])
            ),
        )
    except (KeyError, ValueError, ArithmeticError, AttributeError) as e:
        raise InvalidQuoteError(f"Malformed quote record {record!r}: {e}") from e


def quotes_from_records(records: Iterable[dict]) -> dict[str, MarketQuote]:
    """Parse the quotes file (a list of quote dicts) into a symbol -> quote map."""
    quotes = (quote_from_record(r) for r in records)
    return {q.symbol: q for q in quotes}


def quotes_to_records(quotes: Mapping[str, MarketQuote]) -> list[dict]:
    return [
        {
            "symbol": q.symbol,
            "price": str(q.price),
            "change_24h": str(q.change_24h),
            "last_updated": q.last_updated.isoformat() if q.last_updated else None,
            "sources": [{"uri": s.uri, "title": s.title} for s in q.sources],
        }
        for q in quotes.values()
    ]
