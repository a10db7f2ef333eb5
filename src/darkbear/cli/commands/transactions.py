"""Transaction commands — buy, sell, edit, delete, list."""

from dataclasses import replace
from datetime import date

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config
from ...core.exceptions import DarkBearError
from ...core.ledger import Ledger, new_transaction, to_decimal, validate
from ...core.models import TransactionType
from ...core.valuation import fold_transactions
from ...data.files import load_ledger, save_ledger
from ..formatting import money, quantity

app = typer.Typer(help="Record transactions")
console = Console()


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        console.print("[red]Invalid date format. Use YYYY-MM-DD[/red]")
        raise typer.Exit(1)


def _check_and_save(ledger: Ledger) -> None:
    """Replay the journal under the configured sell policy before writing it."""
    cfg = get_config()
    fold_transactions(ledger.chronological(), sell_policy=cfg.sell_policy, lot_size=cfg.lot_size)
    save_ledger(ledger)


def _record(tx_type: TransactionType, symbol: str, qty: str, price: str, tx_date: str | None, name: str, notes: str):
    cfg = get_config()
    try:
        ledger = load_ledger()
        tx = ledger.add(new_transaction(
            symbol, tx_type, qty, price, tx_date=_parse_date(tx_date), name=name, notes=notes,
        ))
        _check_and_save(ledger)
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    action = "Bought" if tx_type == TransactionType.BUY else "Sold"
    console.print(
        f"[green]{action} {quantity(tx.quantity)} × {tx.display_name} @ {money(tx.price, cfg.currency)}[/green]"
        f"  [dim](id {tx.id})[/dim]"
    )


@app.command("buy")
def buy(
    symbol: str = typer.Argument(..., help="Ticker, e.g. BBCA, BTC, ANTM"),
    qty: str = typer.Argument(..., help="Quantity (lots for stocks, grams for gold, coins for crypto)"),
    price: str = typer.Argument(..., help="Price per share / gram / coin"),
    tx_date: str = typer.Option(None, "--date", "-d", help="Transaction date (YYYY-MM-DD)"),
    name: str = typer.Option("", "--name", help="Display name"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
):
    """Record a buy transaction."""
    _record(TransactionType.BUY, symbol, qty, price, tx_date, name, notes)


@app.command("sell")
def sell(
    symbol: str = typer.Argument(..., help="Ticker"),
    qty: str = typer.Argument(..., help="Quantity (lots for stocks, grams for gold, coins for crypto)"),
    price: str = typer.Argument(..., help="Price per share / gram / coin"),
    tx_date: str = typer.Option(None, "--date", "-d", help="Transaction date (YYYY-MM-DD)"),
    name: str = typer.Option("", "--name", help="Display name"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
):
    """Record a sell transaction."""
    _record(TransactionType.SELL, symbol, qty, price, tx_date, name, notes)


@app.command("edit")
def edit(
    tx_id: str = typer.Argument(..., help="Transaction ID"),
    qty: str = typer.Option(None, "--qty", "-q", help="New quantity"),
    price: str = typer.Option(None, "--price", "-p", help="New price"),
    tx_date: str = typer.Option(None, "--date", "-d", help="New date (YYYY-MM-DD)"),
    notes: str = typer.Option(None, "--notes", "-n", help="New notes"),
):
    """Update a transaction in place."""
    try:
        ledger = load_ledger()
        tx = ledger.get(tx_id)
        changes = {}
        if qty is not None:
            changes["quantity"] = to_decimal(qty, "quantity")
        if price is not None:
            changes["price"] = to_decimal(price, "price")
        if tx_date is not None:
            changes["date"] = _parse_date(tx_date)
        if notes is not None:
            changes["notes"] = notes
        ledger.update(validate(replace(tx, **changes)))
        _check_and_save(ledger)
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Transaction {tx_id} updated.[/green]")


@app.command("delete")
def delete(
    tx_id: str = typer.Argument(..., help="Transaction ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a transaction."""
    try:
        ledger = load_ledger()
        tx = ledger.get(tx_id)
        if not force:
            confirm = typer.confirm(
                f"Delete {tx.transaction_type.value} {quantity(tx.quantity)} {tx.symbol} on {tx.date}?"
            )
            if not confirm:
                console.print("Cancelled.")
                return
        ledger.delete(tx_id)
        _check_and_save(ledger)
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Transaction {tx_id} deleted.[/green]")


@app.command("list")
def list_transactions(
    symbol: str = typer.Option(None, "--symbol", "-s", help="Only this symbol"),
):
    """List the journal, newest first."""
    cfg = get_config()
    try:
        ledger = load_ledger()
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    txs = [t for t in ledger if symbol is None or t.symbol == symbol.strip().upper()]
    if not txs:
        console.print("[yellow]No transactions yet. Record one with: darkbear tx buy <symbol> <qty> <price>[/yellow]")
        return

    table = Table(title="Journal")
    table.add_column("ID", style="cyan")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Symbol", style="bold")
    table.add_column("Qty", justify="right")
    table.add_column(f"Price ({cfg.currency})", justify="right")
    table.add_column("Notes")

    for tx in txs:
        color = "green" if tx.transaction_type == TransactionType.BUY else "red"
        table.add_row(
            tx.id,
            tx.date.isoformat(),
            f"[{color}]{tx.transaction_type.value}[/{color}]",
            tx.symbol,
            quantity(tx.quantity),
            f"{tx.price:,.2f}",
            tx.notes,
        )

    console.print(table)
