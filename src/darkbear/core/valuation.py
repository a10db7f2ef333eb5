"""Position aggregation: average-cost folding of the transaction journal.

All functions are pure. Transactions must be supplied oldest first; the fold is
order-sensitive because every SELL is priced at the running average cost.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from functools import reduce
from types import MappingProxyType
from typing import Iterable, Mapping

from .classifier import DEFAULT_LOT_SIZE, AssetClassifier, asset_color, classify, unit_multiplier
from .exceptions import ConfigError, InsufficientQuantityError
from .models import (
    MarketQuote,
    PortfolioPosition,
    RunningSymbolState,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class SellPolicy(str, Enum):
    """What to do with a SELL that is not fully backed by held quantity."""
    IGNORE = "ignore"  # unbacked sells are no-ops, oversells go negative and close
    CLAMP = "clamp"    # unbacked sells are no-ops, oversells close at exactly zero
    REJECT = "reject"  # raise InsufficientQuantityError


def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def _apply(
    state: RunningSymbolState,
    tx: Transaction,
    sell_policy: SellPolicy,
    lot_size: int,
) -> RunningSymbolState:
    multiplier = unit_multiplier(state.asset_class, lot_size)

    if tx.transaction_type == TransactionType.BUY:
        return replace(
            state,
            quantity=state.quantity + tx.quantity,
            cost_basis=state.cost_basis + tx.quantity * multiplier * tx.price,
        )

    if state.quantity <= 0:
        if sell_policy == SellPolicy.REJECT:
            raise InsufficientQuantityError(
                f"Cannot sell {tx.quantity} {tx.symbol}: nothing held (tx {tx.id})"
            )
        logger.warning("Ignoring SELL %s of %s: nothing held", tx.id, tx.symbol)
        return state

    sold = tx.quantity
    if sold > state.quantity:
        if sell_policy == SellPolicy.REJECT:
            raise InsufficientQuantityError(
                f"Cannot sell {sold} {tx.symbol}: only {state.quantity} held (tx {tx.id})"
            )
        if sell_policy == SellPolicy.CLAMP:
            logger.warning(
                "Clamping SELL %s of %s from %s to %s", tx.id, tx.symbol, sold, state.quantity
            )
            return replace(state, quantity=ZERO, cost_basis=ZERO)
        logger.warning(
            "SELL %s of %s exceeds holdings (%s > %s)", tx.id, tx.symbol, sold, state.quantity
        )

    average_price = state.cost_basis / (state.quantity * multiplier)
    return replace(
        state,
        quantity=state.quantity - sold,
        cost_basis=state.cost_basis - sold * multiplier * average_price,
    )


def fold_transactions(
    transactions: Iterable[Transaction],
    classifier: AssetClassifier = classify,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
    lot_size: int = DEFAULT_LOT_SIZE,
) -> Mapping[str, RunningSymbolState]:
    """Reduce the journal to per-symbol running state, keyed by uppercase symbol.

    The asset class is resolved once, from the first transaction seen for a
    symbol. Keys keep first-appearance order. Raises ConfigError for a lot
    size below one.
    """
    if lot_size < 1:
        raise ConfigError(f"lot_size must be at least 1, got {lot_size}")
    sell_policy = SellPolicy(sell_policy)

    def step(acc: dict, tx: Transaction) -> dict:
        key = normalize_symbol(tx.symbol)
        state = acc.get(key)
        if state is None:
            state = RunningSymbolState(name=tx.display_name, asset_class=classifier(key))
        return {**acc, key: _apply(state, tx, sell_policy, lot_size)}

    return MappingProxyType(reduce(step, transactions, {}))


def _position(
    symbol: str,
    state: RunningSymbolState,
    quote: MarketQuote | None,
    lot_size: int,
) -> PortfolioPosition:
    multiplier = unit_multiplier(state.asset_class, lot_size)
    if quote is None:
        logger.debug("No quote for %s, valuing at 0", symbol)
    current_price = quote.price if quote is not None else ZERO
    base_units = state.quantity * multiplier
    market_value = base_units * current_price
    unrealized_pl = market_value - state.cost_basis
    pl_pct = unrealized_pl / state.cost_basis * 100 if state.cost_basis > 0 else ZERO
    return PortfolioPosition(
        symbol=symbol,
        name=state.name,
        asset_class=state.asset_class,
        quantity=state.quantity,
        average_buy_price=state.cost_basis / base_units,
        current_price=current_price,
        market_value=market_value,
        unrealized_pl=unrealized_pl,
        unrealized_pl_percent=pl_pct,
        allocation_percent=ZERO,
        color=asset_color(state.asset_class),
        cost_basis=state.cost_basis,
        multiplier=multiplier,
    )


def compute_positions(
    transactions: Iterable[Transaction],
    quotes: Mapping[str, MarketQuote],
    classifier: AssetClassifier = classify,
    sell_policy: SellPolicy = SellPolicy.IGNORE,
    lot_size: int = DEFAULT_LOT_SIZE,
) -> list[PortfolioPosition]:
    """Build open positions from an oldest-first journal and a quote map.

    Closed symbols (final quantity <= 0) are dropped. A missing quote values
    the position at zero instead of failing.
    """
    states = fold_transactions(transactions, classifier, sell_policy, lot_size)
    by_symbol = {normalize_symbol(k): q for k, q in quotes.items()}

    positions = [
        _position(symbol, state, by_symbol.get(symbol), lot_size)
        for symbol, state in states.items()
        if state.quantity > 0
    ]

    total = sum((p.market_value for p in positions), ZERO)
    if total <= 0:
        return positions
    return [replace(p, allocation_percent=p.market_value / total * 100) for p in positions]
