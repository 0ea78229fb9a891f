"""Account commands for the journal CLI.

Handles creating, listing and deleting accounts, and moving capital
in and out of them.
"""

import click
from pydantic import ValidationError
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.common import console, fail, get_ledger, money
from tradejournal.ledger import InsufficientFundsError, JournalError


@click.group()
def account() -> None:
    """Manage trading accounts.

    \b
    Examples:
      tradejournal account add Main --balance 10000 --currency USD
      tradejournal account list
      tradejournal account delete ACCOUNT_ID
    """
    pass


@account.command("add")
@click.argument("name")
@click.option("--balance", "-b", type=float, required=True, help="Initial balance (> 0).")
@click.option("--currency", "-c", default="USD", show_default=True, help="ISO currency code.")
@click.pass_context
def add_account(ctx: click.Context, name: str, balance: float, currency: str) -> None:
    """Create an account named NAME."""
    ledger = get_ledger(ctx)
    try:
        created = ledger.create_account(name, balance, currency)
    except (JournalError, ValidationError) as e:
        fail(str(e))

    console.print(f"[green]✓ Account '{created.name}' created[/green] [dim]({created.id})[/dim]")


@account.command("list")
@click.pass_context
def list_accounts(ctx: click.Context) -> None:
    """List accounts with balance and performance."""
    ledger = get_ledger(ctx)

    if not ledger.accounts:
        console.print(Panel(
            "[dim]No accounts yet[/dim]\n\n"
            "Run [cyan]tradejournal account add NAME --balance AMOUNT[/cyan] to create one.",
            title="[bold]Accounts[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Accounts", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Balance", justify="right")
    table.add_column("Deposits", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("ROI", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")

    for acc in ledger.accounts:
        perf = ledger.performance(acc.id)
        table.add_row(
            acc.id,
            acc.name,
            f"{acc.currency} {perf.current_balance:,.2f}",
            f"{acc.currency} {perf.total_deposits:,.2f}",
            money(perf.total_pnl, acc.currency, signed=True),
            money(perf.roi) + "%",
            str(perf.trade_count),
            f"{perf.win_rate:.1f}%",
        )

    console.print(table)


@account.command("delete")
@click.argument("account_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation.")
@click.pass_context
def delete_account(ctx: click.Context, account_id: str, yes: bool) -> None:
    """Delete ACCOUNT_ID and all of its trades."""
    ledger = get_ledger(ctx)
    try:
        acc = ledger.get_account(account_id)
        if not yes:
            click.confirm(
                f"Delete '{acc.name}'? This will delete all trades for this account.",
                abort=True,
            )
        ledger.delete_account(account_id)
    except JournalError as e:
        fail(str(e), title="Delete Failed")

    console.print("[green]✓ Account and all associated trades deleted[/green]")


@click.command()
@click.argument("account_id")
@click.argument("amount", type=float)
@click.pass_context
def deposit(ctx: click.Context, account_id: str, amount: float) -> None:
    """Deposit AMOUNT into ACCOUNT_ID."""
    ledger = get_ledger(ctx)
    try:
        ledger.deposit(account_id, amount)
    except JournalError as e:
        fail(str(e), title="Invalid Amount")

    acc = ledger.get_account(account_id)
    console.print(
        f"[green]✓ Added {amount:,.2f} to {acc.name}[/green] "
        f"[dim](balance {acc.currency} {acc.current_balance:,.2f})[/dim]"
    )


@click.command()
@click.argument("account_id")
@click.argument("amount", type=float)
@click.pass_context
def withdraw(ctx: click.Context, account_id: str, amount: float) -> None:
    """Withdraw AMOUNT from ACCOUNT_ID."""
    ledger = get_ledger(ctx)
    try:
        ledger.withdraw(account_id, amount)
    except InsufficientFundsError as e:
        fail(str(e), title="Insufficient Balance")
    except JournalError as e:
        fail(str(e), title="Invalid Amount")

    acc = ledger.get_account(account_id)
    console.print(
        f"[green]✓ Withdrew {amount:,.2f} from {acc.name}[/green] "
        f"[dim](balance {acc.currency} {acc.current_balance:,.2f})[/dim]"
    )
