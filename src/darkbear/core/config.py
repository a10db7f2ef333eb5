"""Application configuration — loaded from config.json at project root."""

import json
import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .classifier import DEFAULT_LOT_SIZE
from .exceptions import ConfigError
from .valuation import SellPolicy

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    currency: str = "IDR"
    usd_rate: Decimal = Decimal("15800")  # flat USD -> reporting currency multiplier
    lot_size: int = DEFAULT_LOT_SIZE
    sell_policy: SellPolicy = SellPolicy.IGNORE
    ledger_path: str = "transactions.json"
    quotes_path: str = "quotes.json"
    local_suffix: str = ".JK"  # tickers already quoted in the reporting currency


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None
_path_override: Optional[Path] = None


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (where pyproject.toml lives)."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent
    # Fallback: current working directory
    return Path.cwd()


def _config_path() -> Path:
    if _path_override is not None:
        return _path_override
    return _find_project_root() / "config.json"


def set_config_path(path: Optional[str]) -> None:
    """Point config loading at another file (None restores the default) and drop the cache."""
    global _cached, _path_override
    _path_override = Path(path) if path else None
    _cached = None


def resolve_path(name: str) -> Path:
    """Relative data paths are resolved next to the config file."""
    p = Path(name)
    if p.is_absolute():
        return p
    return _config_path().parent / p


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        _cached = AppConfig(
            currency=data.get("currency", _DEFAULTS.currency),
            usd_rate=Decimal(str(data.get("usd_rate", _DEFAULTS.usd_rate))),
            lot_size=int(data.get("lot_size", _DEFAULTS.lot_size)),
            sell_policy=SellPolicy(data.get("sell_policy", _DEFAULTS.sell_policy.value)),
            ledger_path=data.get("ledger_path", _DEFAULTS.ledger_path),
            quotes_path=data.get("quotes_path", _DEFAULTS.quotes_path),
            local_suffix=data.get("local_suffix", _DEFAULTS.local_suffix),
        )
        if _cached.lot_size < 1 or _cached.usd_rate <= 0:
            raise ValueError("lot_size and usd_rate must be positive")
    except (OSError, ValueError, TypeError, ArithmeticError, AttributeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    data = {
        "currency": cfg.currency,
        "usd_rate": str(cfg.usd_rate),
        "lot_size": cfg.lot_size,
        "sell_policy": cfg.sell_policy.value,
        "ledger_path": cfg.ledger_path,
        "quotes_path": cfg.quotes_path,
        "local_suffix": cfg.local_suffix,
    }
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def update_config(key: str, value: str) -> AppConfig:
    """Set one field from its string form and persist the result."""
    cfg = get_config()
    converters = {
        "currency": lambda v: v.upper(),
        "usd_rate": Decimal,
        "lot_size": int,
        "sell_policy": lambda v: SellPolicy(v.lower()),
        "ledger_path": str,
        "quotes_path": str,
        "local_suffix": str,
    }
    if key not in converters:
        raise ConfigError(f"Unknown config key '{key}'. Known keys: {', '.join(converters)}")
    try:
        converted = converters[key](value)
        positive = key not in ("usd_rate", "lot_size") or converted > 0
    except (ValueError, ArithmeticError) as e:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from e
    if not positive:
        raise ConfigError(f"{key} must be positive, got {value}")
    updated = replace(cfg, **{key: converted})
    save_config(updated)
    return updated
