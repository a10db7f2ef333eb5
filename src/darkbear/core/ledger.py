"""In-memory transaction journal.

The journal keeps entries newest first, the way they are shown to the user.
``chronological()`` gives the oldest-first view the valuation fold needs.
"""

import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from .exceptions import (
    DuplicateTransactionError,
    InvalidTransactionError,
    TransactionNotFoundError,
)
from .models import Transaction, TransactionType
from .valuation import normalize_symbol


def to_decimal(value, field_name: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidTransactionError(f"Invalid number for {field_name}: {value!r}") from e
    if not result.is_finite():
        raise InvalidTransactionError(f"Invalid number for {field_name}: {value!r}")
    return result


def validate(tx: Transaction) -> Transaction:
    """Check a transaction and return it with a normalized symbol."""
    if not tx.symbol or not tx.symbol.strip():
        raise InvalidTransactionError("Symbol must not be empty")
    if tx.quantity <= 0:
        raise InvalidTransactionError(f"Quantity must be positive, got {tx.quantity}")
    if tx.price < 0:
        raise InvalidTransactionError(f"Price must be non-negative, got {tx.price}")
    return replace(tx, symbol=normalize_symbol(tx.symbol))


def new_transaction(
    symbol: str,
    transaction_type: TransactionType | str,
    quantity,
    price,
    tx_date: Optional[date] = None,
    name: str = "",
    notes: str = "",
) -> Transaction:
    """Build a validated transaction with a fresh id."""
    try:
        side = TransactionType(str(getattr(transaction_type, "value", transaction_type)).upper())
    except ValueError as e:
        raise InvalidTransactionError(f"Unknown transaction type: {transaction_type!r}") from e
    return validate(Transaction(
        id=uuid.uuid4().hex,
        symbol=symbol,
        transaction_type=side,
        date=tx_date or date.today(),
        quantity=to_decimal(quantity, "quantity"),
        price=to_decimal(price, "price"),
        name=name,
        notes=notes,
    ))


def transaction_from_record(record: dict) -> Transaction:
    try:
        tx_id = str(record["id"])
        symbol = str(record["symbol"])
        side = TransactionType(str(record["type"]).upper())
        tx_date = date.fromisoformat(str(record["date"])[:10])
    except KeyError as e:
        raise InvalidTransactionError(f"Transaction record missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise InvalidTransactionError(f"Malformed transaction record {record!r}: {e}") from e
    return validate(Transaction(
        id=tx_id,
        symbol=symbol,
        transaction_type=side,
        date=tx_date,
        quantity=to_decimal(record.get("quantity"), "quantity"),
        price=to_decimal(record.get("price"), "price"),
        name=record.get("name", ""),
        notes=record.get("notes", ""),
    ))


def transaction_to_record(tx: Transaction) -> dict:
    return {
        "id": tx.id,
        "symbol": tx.symbol,
        "name": tx.name,
        "type": tx.transaction_type.value,
        "date": tx.date.isoformat(),
        "quantity": str(tx.quantity),
        "price": str(tx.price),
        "notes": tx.notes,
    }


class Ledger:
    """Newest-first list of transactions with id-based editing."""

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._entries: list[Transaction] = []
        for tx in transactions:
            self._check_unique(tx.id)
            self._entries.append(validate(tx))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def _check_unique(self, tx_id: str) -> None:
        if any(t.id == tx_id for t in self._entries):
            raise DuplicateTransactionError(f"Transaction {tx_id} already exists")

    def _index(self, tx_id: str) -> int:
        for i, t in enumerate(self._entries):
            if t.id == tx_id:
                return i
        raise TransactionNotFoundError(f"Transaction {tx_id} not found")

    def get(self, tx_id: str) -> Transaction:
        return self._entries[self._index(tx_id)]

    def add(self, tx: Transaction) -> Transaction:
        """Record a new transaction at the head of the journal."""
        self._check_unique(tx.id)
        tx = validate(tx)
        self._entries.insert(0, tx)
        return tx

    def update(self, tx: Transaction) -> Transaction:
        """Replace the entry with the same id, keeping its position."""
        i = self._index(tx.id)
        tx = validate(tx)
        self._entries[i] = tx
        return tx

    def delete(self, tx_id: str) -> Transaction:
        return self._entries.pop(self._index(tx_id))

    def newest_first(self) -> list[Transaction]:
        return list(self._entries)

    def chronological(self) -> list[Transaction]:
        """Oldest first by trade date, the order the valuation fold expects.

        Entries sharing a date keep the order they were recorded in.
        """
        return sorted(reversed(self._entries), key=lambda tx: tx.date)

    def symbols(self) -> list[str]:
        """Distinct symbols in order of first trade."""
        seen: dict[str, None] = {}
        for tx in self.chronological():
            seen.setdefault(tx.symbol, None)
        return list(seen)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "Ledger":
        """Load from JSON-style dicts stored newest first."""
        return cls(transaction_from_record(r) for r in records)

    def to_records(self) -> list[dict]:
        return [transaction_to_record(t) for t in self._entries]
