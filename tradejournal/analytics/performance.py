"""Per-account performance metrics.

All functions here are pure reductions over a snapshot of entries.
Missing or malformed numeric fields are treated as absent, so every
function is total over well-formed input and never raises.
"""

import math
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from tradejournal.models import Account, LedgerEntry


class AccountPerformance(BaseModel):
    """Realized performance of an account's buy/sell entries."""

    account_id: str = Field(..., description="Account ID")
    trade_count: int = Field(..., ge=0, description="Number of buy/sell entries")
    total_pnl: float = Field(..., description="Sum of trade P&L")
    winning_count: int = Field(..., ge=0, description="Trades with P&L > 0")
    losing_count: int = Field(..., ge=0, description="Trades with P&L < 0")
    win_rate: float = Field(..., ge=0, le=100, description="Win rate percentage")
    best_trade: float = Field(..., description="Largest trade P&L")
    worst_trade: float = Field(..., description="Smallest trade P&L")
    avg_r_multiple: float = Field(..., description="Mean of defined R-multiples")
    roi: float = Field(..., description="Return on contributed capital, percent")
    current_balance: float = Field(..., description="Balance derived from entries")
    total_deposits: float = Field(..., description="Capital contributed")
    current_streak: int = Field(default=0, ge=0, description="Current streak length")
    streak_type: str = Field(default="", description="'win', 'loss' or ''")

    model_config = {"frozen": True}


def as_amount(value) -> Optional[float]:
    """Coerce an optional numeric field, returning None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount):
        return None
    return amount


def pnl_value(entry: LedgerEntry) -> float:
    """P&L of an entry, with missing values counted as zero."""
    return as_amount(entry.pnl) or 0.0


def defined_r_multiple(entry: LedgerEntry) -> Optional[float]:
    """R-multiple of a trade, or None when it is not meaningful.

    Requires an entry price, an exit price and a nonzero risk amount.
    Capital movements never have an R-multiple.
    """
    if entry.is_capital_movement:
        return None

    entry_price = as_amount(entry.entry_price)
    exit_price = as_amount(entry.exit_price)
    risk = as_amount(entry.risk_amount)
    # Zero prices count as missing, matching how the form leaves them blank
    if not entry_price or not exit_price or not risk:
        return None

    lot_size = as_amount(entry.lot_size) or 1.0
    if entry.type == "buy":
        profit = (exit_price - entry_price) * lot_size
    else:
        profit = (entry_price - exit_price) * lot_size
    return profit / risk


def r_multiple(entry: LedgerEntry) -> float:
    """R-multiple of a trade; 0 when it cannot be computed."""
    value = defined_r_multiple(entry)
    return 0.0 if value is None else value


def win_rate(winning: int, total: int) -> float:
    """Winning percentage, defined as 0 for an empty set."""
    if total <= 0:
        return 0.0
    return winning / total * 100


def roi(total_pnl: float, contributed: Optional[float]) -> float:
    """Return on investment in percent; 0 for a non-positive denominator."""
    if contributed is None or contributed <= 0:
        return 0.0
    return total_pnl / contributed * 100


def account_entries(
    entries: Iterable[LedgerEntry], account_id: Optional[str]
) -> list[LedgerEntry]:
    """Entries owned by an account (all entries when account_id is None)."""
    if account_id is None:
        return list(entries)
    return [e for e in entries if e.account_id == account_id]


def real_trades(entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    """Buy/sell entries only."""
    return [e for e in entries if e.is_trade]


def account_totals(
    account: Account, entries: Iterable[LedgerEntry]
) -> tuple[float, float]:
    """Recompute (current_balance, total_deposits) for an account.

    The balance is the initial balance plus every realized entry's P&L,
    deposits and withdrawals included. Contributed capital is the initial
    balance plus deposits; withdrawals do not reduce it.
    """
    balance = account.initial_balance
    deposits = account.initial_balance
    for entry in account_entries(entries, account.id):
        if not entry.is_realized:
            continue
        amount = pnl_value(entry)
        balance += amount
        if entry.type == "deposit":
            deposits += amount
    return balance, deposits


def account_performance(
    account: Account,
    entries: Iterable[LedgerEntry],
    missing_pnl: str = "loss",
) -> AccountPerformance:
    """Compute realized performance metrics for one account.

    Args:
        account: Account to report on.
        entries: All known entries; only the account's are used.
        missing_pnl: Streak policy for closed trades without P&L.

    Returns:
        AccountPerformance for the account.
    """
    from tradejournal.analytics.streaks import current_streak

    owned = account_entries(entries, account.id)
    trades = real_trades(owned)
    pnls = [pnl_value(t) for t in trades]

    winning = sum(1 for p in pnls if p > 0)
    losing = sum(1 for p in pnls if p < 0)

    r_values = [r for r in (defined_r_multiple(t) for t in trades) if r is not None]
    avg_r = sum(r_values) / len(r_values) if r_values else 0.0

    total_pnl = sum(pnls)
    balance, deposits = account_totals(account, owned)
    streak = current_streak(trades, missing_pnl=missing_pnl)

    return AccountPerformance(
        account_id=account.id,
        trade_count=len(trades),
        total_pnl=total_pnl,
        winning_count=winning,
        losing_count=losing,
        win_rate=win_rate(winning, len(trades)),
        best_trade=max(pnls) if pnls else 0.0,
        worst_trade=min(pnls) if pnls else 0.0,
        avg_r_multiple=avg_r,
        roi=roi(total_pnl, deposits),
        current_balance=balance,
        total_deposits=deposits,
        current_streak=streak.length,
        streak_type=streak.kind,
    )
