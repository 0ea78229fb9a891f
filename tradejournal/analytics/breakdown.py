"""Tag and emotion breakdowns, plus recent mistakes/lessons."""

from typing import Callable, Iterable, Literal, Optional

from pydantic import BaseModel, Field

from tradejournal.analytics.filters import available_emotions, available_tags
from tradejournal.analytics.performance import (
    account_entries,
    pnl_value,
    real_trades,
    win_rate,
)
from tradejournal.models import LedgerEntry


class GroupPerformance(BaseModel):
    """Aggregate results for a subset of trades sharing a tag or emotion."""

    key: str = Field(..., description="Tag or emotion")
    count: int = Field(..., ge=0, description="Number of trades")
    total_pnl: float = Field(..., description="Summed P&L")
    avg_pnl: float = Field(..., description="Average P&L per trade")
    win_rate: float = Field(..., ge=0, le=100, description="Win rate percentage")

    model_config = {"frozen": True}


def _summarize(key: str, trades: list[LedgerEntry]) -> GroupPerformance:
    pnls = [pnl_value(t) for t in trades]
    total = sum(pnls)
    return GroupPerformance(
        key=key,
        count=len(trades),
        total_pnl=total,
        avg_pnl=total / len(trades) if trades else 0.0,
        win_rate=win_rate(sum(1 for p in pnls if p > 0), len(trades)),
    )


def _group(
    trades: list[LedgerEntry],
    keys: list[str],
    member: Callable[[LedgerEntry, str], bool],
) -> list[GroupPerformance]:
    return [_summarize(key, [t for t in trades if member(t, key)]) for key in keys]


def tag_performance(
    entries: Iterable[LedgerEntry], account_id: Optional[str] = None
) -> list[GroupPerformance]:
    """Per-tag count, P&L and win rate over an account's buy/sell entries."""
    trades = real_trades(account_entries(entries, account_id))
    return _group(trades, available_tags(trades), lambda t, tag: tag in t.tags)


def emotion_performance(
    entries: Iterable[LedgerEntry], account_id: Optional[str] = None
) -> list[GroupPerformance]:
    """Per-emotion count, P&L and win rate over an account's buy/sell entries."""
    trades = real_trades(account_entries(entries, account_id))
    return _group(trades, available_emotions(trades), lambda t, e: t.emotion == e)


def recent_notes(
    entries: Iterable[LedgerEntry],
    account_id: Optional[str],
    field: Literal["mistakes", "lessons"],
    limit: int = 5,
) -> list[LedgerEntry]:
    """First `limit` entries of the account with non-empty mistakes or lessons."""
    if field not in ("mistakes", "lessons"):
        raise ValueError(f"Unsupported note field: {field}")
    noted = [e for e in account_entries(entries, account_id) if getattr(e, field)]
    return noted[:limit]
