"""Shared rich formatting helpers for CLI output."""

from decimal import Decimal


def money(value: Decimal, currency: str) -> str:
    return f"{currency} {value:,.2f}"


def signed_money(value: Decimal, currency: str) -> str:
    color = "green" if value >= 0 else "red"
    sign = "+" if value > 0 else ""
    return f"[{color}]{sign}{currency} {value:,.2f}[/{color}]"


def signed_pct(value: Decimal) -> str:
    color = "green" if value >= 0 else "red"
    return f"[{color}]{value:+.2f}%[/{color}]"


def quantity(value: Decimal) -> str:
    return f"{value.normalize():,f}"
