"""Shared helpers for the journal CLI commands."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

console = Console()


def get_config(ctx: click.Context):
    """Load configuration, honouring the group-level --config option."""
    from tradejournal.config import load_config

    obj = ctx.find_root().obj or {}
    config_path: Optional[Path] = obj.get("config_path")
    return load_config(config_path)


def get_ledger(ctx: click.Context):
    """Build the ledger from configuration."""
    from tradejournal.ledger import Ledger
    from tradejournal.storage import StorageGateway

    config = get_config(ctx)
    return Ledger(
        StorageGateway.from_config(config),
        missing_pnl=config.analytics.missing_pnl,
        review_interval_days=config.review.interval_days,
    )


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def money(amount: float, currency: str = "", signed: bool = False) -> str:
    """Format an amount with rich colour markup."""
    color = "green" if amount >= 0 else "red"
    sign = "+" if signed and amount >= 0 else ""
    prefix = f"{currency} " if currency else ""
    return f"[{color}]{prefix}{sign}{amount:,.2f}[/{color}]"
