"""Trade review reminder command."""

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, get_ledger, money


@click.command()
@click.option("--check", is_flag=True, default=False, help="Only report whether a review is due.")
@click.pass_context
def review(ctx: click.Context, check: bool) -> None:
    """Review your last 3 trades and find 1 improvement opportunity."""
    ledger = get_ledger(ctx)
    due = ledger.review_due()

    if check:
        if due:
            console.print("[yellow]📊 Time for trade review![/yellow]")
        else:
            console.print("[green]Review is up to date[/green]")
        return

    recent = ledger.recent_trades(limit=3)
    if not recent:
        console.print(Panel(
            "[dim]No closed trades to review[/dim]",
            title="[bold]Trade Review[/bold]",
            border_style="dim",
        ))
        return

    currencies = {a.id: a.currency for a in ledger.accounts}
    table = Table(title="Trade Review", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("P&L", justify="right")
    table.add_column("Emotion")
    table.add_column("Mistakes", max_width=30)
    table.add_column("Lessons", max_width=30)

    for entry in recent:
        table.add_row(
            entry.date.isoformat(),
            entry.symbol,
            money(entry.pnl or 0.0, currencies.get(entry.account_id, ""), signed=True),
            entry.emotion or "-",
            entry.mistakes or "-",
            entry.lessons or "-",
        )

    console.print(table)
    ledger.mark_reviewed()
    console.print("\n[dim]Find 1 improvement opportunity before your next session.[/dim]")
