"""Main CLI entry point for the trade journal.

This module provides the main click group and lazy loading
of command modules to keep startup fast.
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when they are actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                cmd = attr
                break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    "init": "tradejournal.cli.configure",
    # Accounts and capital
    "account": "tradejournal.cli.accounts",
    "deposit": "tradejournal.cli.accounts",
    "withdraw": "tradejournal.cli.accounts",
    # Trades
    "trade": "tradejournal.cli.trades",
    "trades": "tradejournal.cli.trades",
    "export": "tradejournal.cli.trades",
    # Analytics
    "stats": "tradejournal.cli.stats",
    "heatmap": "tradejournal.cli.stats",
    "tags": "tradejournal.cli.stats",
    "emotions": "tradejournal.cli.stats",
    "review": "tradejournal.cli.review",
    # Storage
    "sync": "tradejournal.cli.sync",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml (default: ~/.config/tradejournal/config.toml).",
)
@click.version_option(package_name="tradejournal")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """Trade Journal - record trades and review your performance.

    Keep trades, deposits and withdrawals per account, annotate them
    with emotions, mistakes and lessons, and review win rate,
    R-multiples, streaks and a daily P&L heatmap.

    \b
    Quick Start:
      tradejournal init                         # Create a config file
      tradejournal account add Main -b 10000    # Create an account
      tradejournal trade add ACCOUNT EURUSD --type buy --entry 1.08
      tradejournal stats ACCOUNT                # Performance summary
    """
    from tradejournal.config import load_config

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    setup_logging(load_config(config_path).logging.level)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
