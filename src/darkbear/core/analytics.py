"""Allocation and performance breakdowns of open positions.

All functions are pure: they accept PortfolioPosition objects and return
Decimal values. No I/O.
"""

from decimal import Decimal
from typing import Sequence

from .models import AssetClass, PerformanceEntry, PortfolioPosition

GAIN_COLOR = "#10b981"
LOSS_COLOR = "#f43f5e"


def allocation_by_class(positions: Sequence[PortfolioPosition]) -> dict[AssetClass, Decimal]:
    """Sum market value per asset class.

    Classes appear in the order their first position appears.

    Args:
        positions: Output of compute_positions.

    Returns:
        Dict mapping AssetClass to total market value in the reporting currency.
    """
    result: dict[AssetClass, Decimal] = {}
    for p in positions:
        result[p.asset_class] = result.get(p.asset_class, Decimal("0")) + p.market_value
    return result


def allocation_percent_by_class(positions: Sequence[PortfolioPosition]) -> dict[AssetClass, Decimal]:
    """Share of total market value per asset class, in percent.

    Returns:
        Dict mapping AssetClass to percentage. Empty dict if the portfolio
        has no market value.
    """
    values = allocation_by_class(positions)
    total = sum(values.values(), Decimal("0"))
    if total <= 0:
        return {}
    return {cls: value / total * 100 for cls, value in values.items()}


def rank_by_performance(positions: Sequence[PortfolioPosition]) -> list[PerformanceEntry]:
    """Order positions by unrealized P/L percent, best first."""
    ranked = sorted(positions, key=lambda p: p.unrealized_pl_percent, reverse=True)
    return [
        PerformanceEntry(
            symbol=p.symbol,
            percent=p.unrealized_pl_percent,
            color=GAIN_COLOR if p.unrealized_pl_percent >= 0 else LOSS_COLOR,
        )
        for p in ranked
    ]
