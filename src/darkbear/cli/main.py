"""darkbear CLI — main entry point."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..core.config import set_config_path
from .commands import config_cmd, portfolio, quotes, transactions

app = typer.Typer(
    name="darkbear",
    help="Portfolio journal and valuation for stocks, gold and crypto",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.add_typer(transactions.app, name="tx", help="Record buy/sell transactions")
app.add_typer(quotes.app, name="quotes", help="Fetch & view market quotes")
app.add_typer(portfolio.app, name="portfolio", help="Positions, statistics & analytics")
app.add_typer(config_cmd.app, name="config", help="Show or change settings")


@app.callback()
def startup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to config.json"),
):
    """Configure logging and settings location."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    if config:
        set_config_path(config)


if __name__ == "__main__":
    app()
