"""Analytics commands for the journal CLI.

Handles the performance summary, daily P&L heatmap, and tag and
emotion breakdowns.
"""

from datetime import datetime
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, fail, get_ledger, money
from tradejournal.ledger import JournalError

# rich styles per heatmap band
BAND_STYLES = {
    "profit-strong": "bold white on dark_green",
    "profit": "black on green",
    "profit-light": "black on pale_green3",
    "neutral": "dim",
    "loss-light": "black on light_pink3",
    "loss": "white on red",
    "loss-strong": "bold white on dark_red",
}


def _account_or_fail(ledger, account_id: str):
    try:
        return ledger.get_account(account_id)
    except JournalError as e:
        fail(f"{e}\n\nPlease select an account first.")


@click.command()
@click.argument("account_id")
@click.pass_context
def stats(ctx: click.Context, account_id: str) -> None:
    """Show performance analytics for ACCOUNT_ID."""
    from tradejournal.analytics import longest_streaks, recent_notes

    ledger = get_ledger(ctx)
    acc = _account_or_fail(ledger, account_id)
    perf = ledger.performance(account_id)
    cur = acc.currency
    owned = ledger.entries_for(account_id)
    longest = longest_streaks([e for e in owned if e.is_trade], missing_pnl=ledger.missing_pnl)

    if perf.streak_type == "win":
        streak = f"[green]{perf.current_streak} win[/green]"
    elif perf.streak_type == "loss":
        streak = f"[red]{perf.current_streak} loss[/red]"
    else:
        streak = "[dim]-[/dim]"

    text = (
        f"[bold]{acc.name}[/bold] [dim]({acc.id})[/dim]\n\n"
        f"[bold]Account[/bold]\n"
        f"Balance:        {cur} {perf.current_balance:,.2f}\n"
        f"Deposits:       {cur} {perf.total_deposits:,.2f}\n"
        f"Total P&L:      {money(perf.total_pnl, cur, signed=True)}\n"
        f"ROI:            {money(perf.roi)}%\n"
        f"{'─' * 30}\n"
        f"[bold]Trades[/bold]\n"
        f"Trades:         {perf.trade_count}\n"
        f"Win Rate:       {perf.win_rate:.1f}%\n"
        f"Winning:        [green]{perf.winning_count}[/green]\n"
        f"Losing:         [red]{perf.losing_count}[/red]\n"
        f"Best Trade:     {money(perf.best_trade, cur)}\n"
        f"Worst Trade:    {money(perf.worst_trade, cur)}\n"
        f"Avg R-Multiple: {money(perf.avg_r_multiple)}R\n"
        f"{'─' * 30}\n"
        f"[bold]Streaks[/bold]\n"
        f"Current:        {streak}\n"
        f"Longest Win:    {longest['win']}\n"
        f"Longest Loss:   {longest['loss']}"
    )

    console.print(Panel(
        text,
        title="[bold cyan]Performance[/bold cyan]",
        border_style="cyan",
    ))

    for field, title in (("mistakes", "Common Mistakes"), ("lessons", "Key Lessons")):
        noted = recent_notes(owned, account_id, field)
        if noted:
            lines = "\n".join(f"[bold]{e.symbol}:[/bold] {getattr(e, field)}" for e in noted)
            console.print(Panel(lines, title=f"[bold]{title}[/bold]", border_style="dim"))


@click.command()
@click.argument("account_id")
@click.option("--month", default=None, help="Month to show (YYYY-MM, default: current).")
@click.pass_context
def heatmap(ctx: click.Context, account_id: str, month: Optional[str]) -> None:
    """Show a calendar heatmap of daily P&L for ACCOUNT_ID."""
    from tradejournal.analytics import calendar_pnl, heatmap_band, month_grid

    ledger = get_ledger(ctx)
    acc = _account_or_fail(ledger, account_id)

    try:
        first = datetime.strptime(month, "%Y-%m") if month else datetime.now()
    except ValueError:
        fail(f"Invalid month '{month}', expected YYYY-MM")

    days = calendar_pnl(ledger.entries, account_id)

    table = Table(
        title=f"{acc.name} - {first.strftime('%B %Y')}",
        show_header=True,
        header_style="bold cyan",
    )
    for name in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(name, justify="center")

    month_total = 0.0
    for week in month_grid(first.year, first.month, days):
        cells = []
        for cell in week:
            if cell is None:
                cells.append("")
                continue
            day, pnl = cell
            month_total += pnl
            style = BAND_STYLES[heatmap_band(pnl)]
            amount = f"{pnl:+,.0f}" if pnl else ""
            cells.append(f"[{style}]{day:>2} {amount}[/{style}]")
        table.add_row(*cells)

    console.print(table)
    console.print(f"\n[bold]Month P&L:[/bold] {money(month_total, acc.currency, signed=True)}")


def _breakdown_table(title: str, label: str, groups, currency: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(label, style="bold")
    table.add_column("Trades", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Win Rate", justify="right")
    for group in groups:
        table.add_row(
            group.key,
            str(group.count),
            money(group.total_pnl, currency, signed=True),
            money(group.avg_pnl, currency),
            f"{group.win_rate:.1f}%",
        )
    return table


@click.command()
@click.argument("account_id")
@click.pass_context
def tags(ctx: click.Context, account_id: str) -> None:
    """Show performance per tag for ACCOUNT_ID."""
    from tradejournal.analytics import tag_performance

    ledger = get_ledger(ctx)
    acc = _account_or_fail(ledger, account_id)
    groups = tag_performance(ledger.entries, account_id)

    if not groups:
        console.print("[dim]No tagged trades[/dim]")
        return
    console.print(_breakdown_table("Tag Performance", "Tag", groups, acc.currency))


@click.command()
@click.argument("account_id")
@click.pass_context
def emotions(ctx: click.Context, account_id: str) -> None:
    """Show performance per emotional state for ACCOUNT_ID."""
    from tradejournal.analytics import emotion_performance

    ledger = get_ledger(ctx)
    acc = _account_or_fail(ledger, account_id)
    groups = emotion_performance(ledger.entries, account_id)

    if not groups:
        console.print("[dim]No emotions recorded[/dim]")
        return
    console.print(_breakdown_table("Emotional Patterns", "Emotion", groups, acc.currency))
