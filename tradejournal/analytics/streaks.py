"""Win/loss streak detection over closed trades."""

from typing import Iterable, Literal, Optional

from pydantic import BaseModel, Field

from tradejournal.analytics.performance import as_amount
from tradejournal.models import LedgerEntry

# How a closed trade without P&L is classified:
#   loss  - counted as a loss (pnl treated as 0)
#   break - ends the run
#   skip  - ignored entirely
MissingPnlPolicy = Literal["loss", "break", "skip"]
MISSING_PNL_POLICIES = ("loss", "break", "skip")


class Streak(BaseModel):
    """A run of consecutive trades sharing the same outcome."""

    length: int = Field(default=0, ge=0, description="Number of trades in the run")
    kind: str = Field(default="", description="'win', 'loss' or '' when empty")

    model_config = {"frozen": True}


def _closed_trades_newest_first(entries: Iterable[LedgerEntry]) -> list[LedgerEntry]:
    closed = [e for e in entries if e.is_trade and e.status == "closed"]
    # sorted() is stable with reverse=True, so same-day entries keep input order
    return sorted(closed, key=lambda e: e.date, reverse=True)


def _outcome(entry: LedgerEntry, missing_pnl: str) -> Optional[str]:
    """Classify an entry as 'win'/'loss', or None under break/skip policies."""
    amount = as_amount(entry.pnl)
    if amount is None:
        if missing_pnl == "loss":
            return "loss"
        return None
    return "win" if amount > 0 else "loss"


def current_streak(
    entries: Iterable[LedgerEntry], missing_pnl: str = "loss"
) -> Streak:
    """Length and kind of the most recent run of closed trades.

    Args:
        entries: Entries to scan; only closed buy/sell entries count.
        missing_pnl: One of MISSING_PNL_POLICIES.

    Returns:
        Streak; empty when no entry qualifies.
    """
    if missing_pnl not in MISSING_PNL_POLICIES:
        raise ValueError(f"Unknown missing_pnl policy: {missing_pnl}")

    length = 0
    kind = ""
    for entry in _closed_trades_newest_first(entries):
        outcome = _outcome(entry, missing_pnl)
        if outcome is None:
            if missing_pnl == "skip":
                continue
            break
        if length == 0:
            length, kind = 1, outcome
        elif outcome == kind:
            length += 1
        else:
            break
    return Streak(length=length, kind=kind)


def longest_streaks(
    entries: Iterable[LedgerEntry], missing_pnl: str = "loss"
) -> dict[str, int]:
    """Longest win and loss runs across all closed trades."""
    if missing_pnl not in MISSING_PNL_POLICIES:
        raise ValueError(f"Unknown missing_pnl policy: {missing_pnl}")

    longest = {"win": 0, "loss": 0}
    run_kind = ""
    run_length = 0
    for entry in _closed_trades_newest_first(entries):
        outcome = _outcome(entry, missing_pnl)
        if outcome is None:
            if missing_pnl == "break":
                run_kind, run_length = "", 0
            continue
        if outcome == run_kind:
            run_length += 1
        else:
            run_kind, run_length = outcome, 1
        longest[run_kind] = max(longest[run_kind], run_length)
    return longest
