"""Storage sync commands for the journal CLI."""

import click

from tradejournal.cli.common import console, fail, get_config


def _gateway(ctx: click.Context):
    from tradejournal.storage import StorageGateway

    return StorageGateway.from_config(get_config(ctx))


def _print_durable_counts(gateway) -> None:
    """Show how many rows the durable store holds after a sync."""
    from tradejournal.storage import StoreError

    try:
        stats = gateway.durable.get_stats()
    except StoreError as e:
        console.print(f"[yellow]Could not read durable store stats: {e}[/yellow]")
        return
    counts = ", ".join(f"{table}: {count}" for table, count in stats.items())
    console.print(f"[dim]Durable store rows - {counts}[/dim]")


@click.group()
def sync() -> None:
    """Move journal data between local and durable storage.

    \b
    Examples:
      tradejournal sync push     # Local JSON -> SQLite
      tradejournal sync pull     # SQLite -> local JSON
      tradejournal sync migrate  # Push, then make SQLite the primary store
    """
    pass


@sync.command("push")
@click.pass_context
def push(ctx: click.Context) -> None:
    """Copy local accounts and trades to the durable store."""
    gateway = _gateway(ctx)
    result = gateway.sync_to_durable()
    if not result.success:
        fail(result.error or "Sync failed", title="Sync Failed")
    console.print(f"[green]✓ Pushed {result.accounts} accounts and {result.trades} trades[/green]")
    _print_durable_counts(gateway)


@sync.command("pull")
@click.pass_context
def pull(ctx: click.Context) -> None:
    """Replace local data with the durable store's contents."""
    gateway = _gateway(ctx)
    result = gateway.sync_from_durable()
    if not result.success:
        fail(result.error or "Sync failed", title="Sync Failed")
    console.print(f"[green]✓ Pulled {result.accounts} accounts and {result.trades} trades[/green]")
    _print_durable_counts(gateway)


@sync.command("migrate")
@click.pass_context
def migrate(ctx: click.Context) -> None:
    """Push local data and switch the config to durable storage."""
    from tradejournal.config import save_config

    config = get_config(ctx)
    gateway = _gateway(ctx)
    result = gateway.migrate_to_durable()
    if not result.success:
        fail(result.error or "Migration failed", title="Migration Failed")

    config.storage.mode = "durable"
    path = save_config(config, ctx.find_root().obj.get("config_path"))
    console.print(
        f"[green]✓ Migrated {result.accounts} accounts and {result.trades} trades[/green]\n"
        f"[dim]Storage mode set to durable in {path}[/dim]"
    )
