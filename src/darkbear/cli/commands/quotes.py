"""Quote commands — fetch and show."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ...core.classifier import classify
from ...core.config import get_config
from ...core.exceptions import DarkBearError
from ...data.files import load_ledger, load_quotes, save_quotes
from ...external.quotes import fetch_quotes

app = typer.Typer(help="Fetch and view quotes")
console = Console()


@app.command("fetch")
def fetch(
    symbols: Optional[List[str]] = typer.Argument(None, help="Symbols to fetch (default: every journal symbol)"),
    offline_rate: bool = typer.Option(False, "--offline-rate", help="Use the configured USD rate instead of a live one"),
):
    """Fetch latest quotes and store them in the quotes file.

    Stocks and gold come from Yahoo Finance, crypto from CoinGecko.
    """
    cfg = get_config()
    try:
        wanted = symbols or load_ledger().symbols()
        stored = load_quotes()
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not wanted:
        console.print("[yellow]No symbols to fetch quotes for[/yellow]")
        return

    console.print(f"Fetching quotes for {len(wanted)} symbols...")
    report = fetch_quotes(wanted, config=cfg, live_rate=not offline_rate)
    stored.update(report.quotes)
    save_quotes(stored)

    table = Table(title=f"Fetched Quotes (USD/{cfg.currency} {report.usd_rate:,.2f})")
    table.add_column("Symbol", style="bold")
    table.add_column("Class")
    table.add_column(f"Price ({cfg.currency})", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Status")

    for symbol in report.quotes:
        q = report.quotes[symbol]
        table.add_row(symbol, classify(symbol).value, f"{q.price:,.2f}", f"{q.change_24h:+.2f}%", "[green]OK[/green]")
    for symbol in report.missing:
        table.add_row(symbol, classify(symbol).value, "—", "—", "[red]FAILED[/red]")

    console.print(table)


@app.command("show")
def show():
    """Show stored quotes."""
    cfg = get_config()
    try:
        quotes = load_quotes()
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not quotes:
        console.print("[yellow]No quotes stored. Run: darkbear quotes fetch[/yellow]")
        return

    table = Table(title="Quotes")
    table.add_column("Symbol", style="bold")
    table.add_column(f"Price ({cfg.currency})", justify="right")
    table.add_column("24h", justify="right")
    table.add_column("Updated")
    table.add_column("Source")

    for q in quotes.values():
        color = "green" if q.change_24h >= 0 else "red"
        table.add_row(
            q.symbol,
            f"{q.price:,.2f}",
            f"[{color}]{q.change_24h:+.2f}%[/{color}]",
            q.last_updated.strftime("%Y-%m-%d %H:%M") if q.last_updated else "—",
            ", ".join(s.title or s.uri for s in q.sources),
        )

    console.print(table)
