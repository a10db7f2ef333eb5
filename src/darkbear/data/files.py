"""JSON files backing the CLI: the transaction journal and the last fetched quotes."""

import json
from pathlib import Path
from typing import Mapping

from ..core.config import get_config, resolve_path
from ..core.exceptions import InvalidQuoteError, LedgerError
from ..core.ledger import Ledger
from ..core.models import MarketQuote
from ..external.quotes import quotes_from_records, quotes_to_records


def ledger_path() -> Path:
    return resolve_path(get_config().ledger_path)


def quotes_path() -> Path:
    return resolve_path(get_config().quotes_path)


def _read_list(path: Path, error: type) -> list:
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise error(f"Cannot read {path}: {e}") from e
    if not isinstance(data, list):
        raise error(f"{path} must contain a JSON list")
    return data


def _write_list(path: Path, data: list) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def load_ledger(path: Path | None = None) -> Ledger:
    return Ledger.from_records(_read_list(path or ledger_path(), LedgerError))


def save_ledger(ledger: Ledger, path: Path | None = None) -> None:
    _write_list(path or ledger_path(), ledger.to_records())


def load_quotes(path: Path | None = None) -> dict[str, MarketQuote]:
    return quotes_from_records(_read_list(path or quotes_path(), InvalidQuoteError))


def save_quotes(quotes: Mapping[str, MarketQuote], path: Path | None = None) -> None:
    _write_list(path or quotes_path(), quotes_to_records(quotes))
