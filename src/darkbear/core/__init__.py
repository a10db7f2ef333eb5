"""Portfolio valuation core.

Pure functions that turn a transaction journal and market quotes into open
positions and portfolio statistics. No network access or file I/O.

Usage:
    from darkbear.core import compute_positions, compute_stats
"""

from .analytics import allocation_by_class, allocation_percent_by_class, rank_by_performance
from .classifier import RegistryClassifier, SubstringClassifier, classify, unit_multiplier
from .ledger import Ledger, new_transaction
from .models import (
    AssetClass,
    GlobalStats,
    MarketQuote,
    PortfolioPosition,
    Transaction,
    TransactionType,
)
from .stats import compute_stats
from .valuation import SellPolicy, compute_positions, fold_transactions

__all__ = [
    "AssetClass",
    "TransactionType",
    "Transaction",
    "MarketQuote",
    "PortfolioPosition",
    "GlobalStats",
    "classify",
    "unit_multiplier",
    "SubstringClassifier",
    "RegistryClassifier",
    "SellPolicy",
    "fold_transactions",
    "compute_positions",
    "compute_stats",
    "allocation_by_class",
    "allocation_percent_by_class",
    "rank_by_performance",
    "Ledger",
    "new_transaction",
]
