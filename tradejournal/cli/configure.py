"""Configuration setup command."""

import click
from rich.panel import Panel

from tradejournal.cli.common import console


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config.")
@click.pass_context
def init(ctx: click.Context, force: bool) -> None:
    """Create a config file with default settings."""
    from tradejournal.config import CONFIG_PATH, JournalConfig, save_config

    path = ctx.find_root().obj.get("config_path") or CONFIG_PATH
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists at {path}[/yellow] (use --force to overwrite)")
        return

    save_config(JournalConfig(), path)
    console.print(Panel(
        f"Config written to [cyan]{path}[/cyan]\n\n"
        "[dim]Set storage.mode = \"durable\" to keep the journal in SQLite.[/dim]",
        title="[bold green]Initialized[/bold green]",
        border_style="green",
    ))
