"""Data models for the valuation engine."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class AssetClass(str, Enum):
    STOCK = "STOCK"
    GOLD = "GOLD"
    CRYPTO = "CRYPTO"


class TransactionType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Transaction:
    """A single trade in the journal.

    quantity is in native units: lots for stocks, grams for gold, coins for
    crypto. price is per base unit (one share, one gram, one coin) in the
    reporting currency.
    """
    id: str
    symbol: str
    transaction_type: TransactionType
    date: date
    quantity: Decimal
    price: Decimal
    name: str = ""
    notes: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.symbol.upper()


@dataclass(frozen=True)
class QuoteSource:
    uri: str
    title: str = ""


@dataclass(frozen=True)
class MarketQuote:
    symbol: str
    price: Decimal
    change_24h: Decimal = Decimal("0")
    last_updated: Optional[datetime] = None
    sources: tuple[QuoteSource, ...] = ()


@dataclass(frozen=True)
class RunningSymbolState:
    """Per-symbol accumulator used during one aggregation pass."""
    name: str
    asset_class: AssetClass
    quantity: Decimal = Decimal("0")
    cost_basis: Decimal = Decimal("0")


@dataclass(frozen=True)
class PortfolioPosition:
    symbol: str
    name: str
    asset_class: AssetClass
    quantity: Decimal
    average_buy_price: Decimal
    current_price: Decimal
    market_value: Decimal
    unrealized_pl: Decimal
    unrealized_pl_percent: Decimal
    allocation_percent: Decimal
    color: str
    cost_basis: Decimal = Decimal("0")
    multiplier: int = 1

    @property
    def base_units(self) -> Decimal:
        """Held amount in base units (shares, grams, coins)."""
        return self.quantity * self.multiplier


@dataclass(frozen=True)
class GlobalStats:
    total_value: Decimal = Decimal("0")
    total_invested: Decimal = Decimal("0")
    all_time_pl: Decimal = Decimal("0")
    all_time_pl_percent: Decimal = Decimal("0")
    today_pl: Decimal = Decimal("0")
    today_pl_percent: Decimal = Decimal("0")


@dataclass(frozen=True)
class PerformanceEntry:
    """One bar of the relative performance ranking."""
    symbol: str
    percent: Decimal
    color: str


@dataclass
class FetchReport:
    """Outcome of a quote refresh."""
    quotes: dict[str, MarketQuote] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    usd_rate: Decimal = Decimal("0")
