"""Trade commands for the journal CLI.

Handles recording, editing, deleting, listing and exporting trades.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, fail, get_ledger, money
from tradejournal.ledger import JournalError

DATE = click.DateTime(formats=["%Y-%m-%d"])


def trade_options(func):
    """Options shared by `trade add` and `trade edit`."""
    options = [
        click.option("--date", "trade_date", type=DATE, default=None, help="Trade day (YYYY-MM-DD)."),
        click.option("--lots", "lot_size", type=float, default=None, help="Lot size."),
        click.option("--exit", "exit_price", type=float, default=None, help="Exit price."),
        click.option("--stop", "stop_loss", type=float, default=None, help="Stop loss."),
        click.option("--target", "take_profit", type=float, default=None, help="Take profit."),
        click.option("--pnl", type=float, default=None, help="Realized P&L."),
        click.option(
            "--status",
            type=click.Choice(["open", "closed", "stopped"]),
            default=None,
            help="Trade status.",
        ),
        click.option("--risk", "risk_amount", type=float, default=None, help="Amount risked."),
        click.option("--emotion", default=None, help="Emotional state."),
        click.option("--mistakes", default=None, help="Mistakes made."),
        click.option("--lessons", default=None, help="Lessons learned."),
        click.option("--notes", default=None, help="Notes."),
        click.option("--tag", "tags", multiple=True, help="Tag (repeatable)."),
        click.option("--screenshot", "screenshot_url", default=None, help="Screenshot URL."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def collect_fields(trade_date: Optional[datetime], tags: tuple[str, ...], **values) -> dict:
    """Drop unset options and convert click values to entry fields."""
    fields = {name: value for name, value in values.items() if value is not None}
    if trade_date is not None:
        fields["date"] = trade_date.date()
    if tags:
        fields["tags"] = list(tags)
    return fields


@click.group()
def trade() -> None:
    """Record, edit and delete trades.

    \b
    Examples:
      tradejournal trade add ACCOUNT EURUSD --type buy --entry 1.0850 --risk 50
      tradejournal trade edit TRADE_ID --exit 1.0900 --pnl 50 --status closed
      tradejournal trade delete TRADE_ID
    """
    pass


@trade.command("add")
@click.argument("account_id")
@click.argument("symbol")
@click.option("--type", "entry_type", type=click.Choice(["buy", "sell"]), required=True, help="Trade direction.")
@click.option("--entry", "entry_price", type=float, required=True, help="Entry price.")
@trade_options
@click.pass_context
def add_trade(
    ctx: click.Context,
    account_id: str,
    symbol: str,
    entry_type: str,
    entry_price: float,
    trade_date: Optional[datetime],
    tags: tuple[str, ...],
    **values,
) -> None:
    """Record a trade for ACCOUNT_ID on SYMBOL."""
    ledger = get_ledger(ctx)
    fields = collect_fields(trade_date, tags, **values)
    try:
        entry = ledger.record_trade(account_id, symbol, entry_type, entry_price, **fields)
    except (JournalError, ValidationError) as e:
        fail(str(e))

    console.print(f"[green]✓ {entry.symbol} trade recorded[/green] [dim]({entry.id})[/dim]")
    if entry.r_multiple is not None:
        console.print(f"[dim]R-multiple: {entry.r_multiple:.2f}R[/dim]")


@trade.command("edit")
@click.argument("entry_id")
@click.option("--symbol", default=None, help="Trading symbol.")
@click.option("--type", "entry_type", type=click.Choice(["buy", "sell"]), default=None, help="Trade direction.")
@click.option("--entry", "entry_price", type=float, default=None, help="Entry price.")
@trade_options
@click.pass_context
def edit_trade(
    ctx: click.Context,
    entry_id: str,
    symbol: Optional[str],
    entry_type: Optional[str],
    entry_price: Optional[float],
    trade_date: Optional[datetime],
    tags: tuple[str, ...],
    **values,
) -> None:
    """Edit fields of trade ENTRY_ID. Unset options are left unchanged."""
    ledger = get_ledger(ctx)
    fields = collect_fields(
        trade_date, tags, symbol=symbol, type=entry_type, entry_price=entry_price, **values
    )
    if not fields:
        fail("Nothing to change")
    try:
        entry = ledger.update_trade(entry_id, **fields)
    except (JournalError, ValidationError) as e:
        fail(str(e))

    console.print(f"[green]✓ {entry.symbol} trade updated[/green]")


@trade.command("delete")
@click.argument("entry_id")
@click.pass_context
def delete_trade(ctx: click.Context, entry_id: str) -> None:
    """Delete trade ENTRY_ID."""
    ledger = get_ledger(ctx)
    try:
        ledger.delete_trade(entry_id)
    except JournalError as e:
        fail(str(e))

    console.print("[green]✓ Trade deleted[/green]")


@click.command()
@click.option("--account", "account_id", default=None, help="Only this account.")
@click.option(
    "--status", "status_result",
    type=click.Choice(["all", "open", "closed", "stopped", "win", "loss"]),
    default="all",
    help="Status or result.",
)
@click.option("--emotion", default="all", help="Emotional state.")
@click.option("--tag", default="all", help="Tag (buy/sell trades only).")
@click.option(
    "--type", "entry_type",
    type=click.Choice(["all", "buy", "sell", "deposit", "withdrawal"]),
    default="all",
    help="Entry type.",
)
@click.option("--from", "date_from", type=DATE, default=None, help="Earliest day (YYYY-MM-DD).")
@click.option("--to", "date_to", type=DATE, default=None, help="Latest day (YYYY-MM-DD).")
@click.pass_context
def trades(
    ctx: click.Context,
    account_id: Optional[str],
    status_result: str,
    emotion: str,
    tag: str,
    entry_type: str,
    date_from: Optional[datetime],
    date_to: Optional[datetime],
) -> None:
    """List journal entries, optionally filtered.

    \b
    Examples:
      tradejournal trades --status win
      tradejournal trades --account ACCOUNT --tag breakout --from 2024-03-01
    """
    from tradejournal.analytics import filter_entries
    from tradejournal.models import EntryFilter

    ledger = get_ledger(ctx)
    criteria = EntryFilter(
        status_result=status_result,
        emotion=emotion,
        tag=tag,
        entry_type=entry_type,
        account_id=account_id,
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
    )
    entries = filter_entries(
        sorted(ledger.entries, key=lambda e: e.date, reverse=True), criteria
    )

    if not entries:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trade Journal[/bold]",
            border_style="dim",
        ))
        return

    currencies = {a.id: a.currency for a in ledger.accounts}

    table = Table(title="Trade Journal", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Date", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Type", justify="center")
    table.add_column("Status", justify="center")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("R", justify="right")
    table.add_column("Tags")

    for entry in entries:
        type_color = "green" if entry.type in ("buy", "deposit") else "red"
        table.add_row(
            entry.id,
            entry.date.isoformat(),
            entry.symbol,
            f"[{type_color}]{entry.type.upper()}[/{type_color}]",
            entry.status,
            f"{entry.entry_price:g}" if entry.is_trade else "-",
            f"{entry.exit_price:g}" if entry.exit_price is not None and entry.is_trade else "-",
            money(entry.pnl, currencies.get(entry.account_id, ""), signed=True)
            if entry.pnl is not None else "-",
            f"{entry.r_multiple:.2f}" if entry.r_multiple is not None else "-",
            ", ".join(entry.tags) if entry.is_trade else "",
        )

    console.print(table)
    console.print(f"\n[bold]Entries:[/bold] {len(entries)}")


@click.command()
@click.argument("account_id")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: <account>-trades-<date>.json).",
)
@click.pass_context
def export(ctx: click.Context, account_id: str, output: Optional[Path]) -> None:
    """Export the trades of ACCOUNT_ID as JSON."""
    ledger = get_ledger(ctx)
    try:
        document = ledger.export_trades(account_id)
        path = output or Path(ledger.export_filename(account_id))
    except JournalError as e:
        fail(str(e))

    path.write_text(document, encoding="utf-8")
    console.print(f"[green]✓ Exported to {path}[/green]")
