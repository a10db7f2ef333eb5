"""Settings commands."""

import typer
from rich.console import Console
from rich.table import Table

from ...core.config import get_config, update_config
from ...core.exceptions import ConfigError

app = typer.Typer(help="Show or change settings")
console = Console()


@app.command("show")
def show():
    """Show current settings."""
    cfg = get_config()
    table = Table(title="Settings", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("currency", cfg.currency)
    table.add_row("usd_rate", f"{cfg.usd_rate:,}")
    table.add_row("lot_size", str(cfg.lot_size))
    table.add_row("sell_policy", cfg.sell_policy.value)
    table.add_row("ledger_path", cfg.ledger_path)
    table.add_row("quotes_path", cfg.quotes_path)
    table.add_row("local_suffix", cfg.local_suffix)
    console.print(table)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
):
    """Change one setting, e.g. [bold]darkbear config set sell_policy reject[/bold]."""
    try:
        update_config(key, value)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]{key} = {value}[/green]")
