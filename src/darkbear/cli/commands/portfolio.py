"""Portfolio commands — positions, stats, analytics."""

import typer
from rich.console import Console
from rich.table import Table

from ...core.analytics import allocation_by_class, allocation_percent_by_class, rank_by_performance
from ...core.config import get_config
from ...core.exceptions import DarkBearError
from ...core.stats import compute_stats
from ...core.valuation import compute_positions
from ...data.files import load_ledger, load_quotes
from ..formatting import money, quantity, signed_money, signed_pct

app = typer.Typer(help="Portfolio valuation")
console = Console()


def _load_positions():
    """Value the journal against stored quotes."""
    cfg = get_config()
    try:
        ledger = load_ledger()
        quotes = load_quotes()
        positions = compute_positions(
            ledger.chronological(), quotes, sell_policy=cfg.sell_policy, lot_size=cfg.lot_size,
        )
    except DarkBearError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return positions, quotes


@app.command("positions")
def positions():
    """Show open positions with P/L and allocation."""
    cfg = get_config()
    open_positions, _ = _load_positions()
    if not open_positions:
        console.print("[yellow]No open positions. Record a buy with: darkbear tx buy[/yellow]")
        return

    table = Table(title="Positions")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Class")
    table.add_column("Qty", justify="right")
    table.add_column("Avg Price", justify="right")
    table.add_column("Price", justify="right")
    table.add_column(f"Value ({cfg.currency})", justify="right")
    table.add_column("P/L", justify="right")
    table.add_column("P/L %", justify="right")
    table.add_column("Alloc", justify="right")

    for p in open_positions:
        table.add_row(
            f"[{p.color}]{p.symbol}[/{p.color}]",
            p.name,
            p.asset_class.value,
            quantity(p.quantity),
            f"{p.average_buy_price:,.2f}",
            f"{p.current_price:,.2f}" if p.current_price else "—",
            f"{p.market_value:,.2f}",
            signed_money(p.unrealized_pl, cfg.currency),
            signed_pct(p.unrealized_pl_percent),
            f"{p.allocation_percent:.1f}%",
        )

    console.print(table)


@app.command("stats")
def stats():
    """Show portfolio totals: value, invested capital, all-time and today's P/L."""
    cfg = get_config()
    open_positions, quotes = _load_positions()
    s = compute_stats(open_positions, quotes)

    console.print("\n[bold]Portfolio Summary[/bold]\n")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Net Worth", f"[bold]{money(s.total_value, cfg.currency)}[/bold]")
    table.add_row("Invested", money(s.total_invested, cfg.currency))
    table.add_row("All-time P/L", f"{signed_money(s.all_time_pl, cfg.currency)} ({signed_pct(s.all_time_pl_percent)})")
    table.add_row("Today's P/L", f"{signed_money(s.today_pl, cfg.currency)} ({signed_pct(s.today_pl_percent)})")
    table.add_row("Open positions", str(len(open_positions)))

    console.print(table)
    console.print()


@app.command("analytics")
def analytics():
    """Show allocation by asset class and relative performance."""
    cfg = get_config()
    open_positions, _ = _load_positions()
    if not open_positions:
        console.print("[yellow]No open positions.[/yellow]")
        return

    values = allocation_by_class(open_positions)
    pcts = allocation_percent_by_class(open_positions)
    alloc = Table(title="Allocation by Asset Class")
    alloc.add_column("Class", style="bold")
    alloc.add_column(f"Value ({cfg.currency})", justify="right")
    alloc.add_column("Share", justify="right")
    for cls, value in values.items():
        share = pcts.get(cls)
        alloc.add_row(cls.value, f"{value:,.2f}", f"{share:.1f}%" if share is not None else "—")
    console.print(alloc)

    perf = Table(title="Relative Performance")
    perf.add_column("Symbol", style="bold")
    perf.add_column("Unrealized P/L %", justify="right")
    for entry in rank_by_performance(open_positions):
        perf.add_row(entry.symbol, f"[{entry.color}]{entry.percent:+.2f}%[/{entry.color}]")
    console.print(perf)
