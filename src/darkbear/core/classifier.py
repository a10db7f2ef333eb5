"""Asset classification by ticker heuristics.

The aggregator only needs a callable ``symbol -> AssetClass``. The default is a
substring heuristic; ``RegistryClassifier`` lets callers pin known symbols
explicitly and fall back to the heuristic for the rest.
"""

from typing import Callable, Iterable, Mapping, Optional

from .models import AssetClass

AssetClassifier = Callable[[str], AssetClass]

CRYPTO_MARKERS = ("BTC", "ETH", "SOL", "BNB", "XRP", "DOGE", "USDT")

# Gold platforms on the Indonesian market (Antam, Pegadaian "Emas", Treasury)
# and UBS bars.
GOLD_MARKERS = ("GOLD", "ANTM", "EMAS", "TREASURY", "UBS")

DEFAULT_LOT_SIZE = 100

ASSET_COLORS: dict[AssetClass, str] = {
    AssetClass.STOCK: "#3b82f6",
    AssetClass.GOLD: "#fbbf24",
    AssetClass.CRYPTO: "#f97316",
}


class SubstringClassifier:
    """Classify by checking for known ticker fragments. Crypto wins over gold."""

    def __init__(
        self,
        crypto_markers: Iterable[str] = CRYPTO_MARKERS,
        gold_markers: Iterable[str] = GOLD_MARKERS,
    ):
        self.crypto_markers = tuple(m.upper() for m in crypto_markers)
        self.gold_markers = tuple(m.upper() for m in gold_markers)

    def __call__(self, symbol: str) -> AssetClass:
        s = symbol.upper()
        if any(m in s for m in self.crypto_markers):
            return AssetClass.CRYPTO
        if any(m in s for m in self.gold_markers):
            return AssetClass.GOLD
        return AssetClass.STOCK


class RegistryClassifier:
    """Explicit symbol -> class table, deferring unknown symbols to ``fallback``."""

    def __init__(
        self,
        registry: Mapping[str, AssetClass],
        fallback: Optional[AssetClassifier] = None,
    ):
        self.registry = {k.strip().upper(): AssetClass(v) for k, v in registry.items()}
        self.fallback = fallback or classify

    def __call__(self, symbol: str) -> AssetClass:
        found = self.registry.get(symbol.strip().upper())
        if found is not None:
            return found
        return self.fallback(symbol)


_default = SubstringClassifier()


def classify(symbol: str) -> AssetClass:
    """Map a free-text ticker to an asset class. Never raises; defaults to STOCK."""
    return _default(symbol)


def unit_multiplier(asset_class: AssetClass, lot_size: int = DEFAULT_LOT_SIZE) -> int:
    """Base units per quantity unit: one stock lot is ``lot_size`` shares."""
    if asset_class == AssetClass.STOCK:
        return lot_size
    return 1


def asset_color(asset_class: AssetClass) -> str:
    return ASSET_COLORS[asset_class]
