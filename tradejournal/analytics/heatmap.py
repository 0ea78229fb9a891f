"""Calendar aggregation of realized P&L."""

import calendar
from collections import defaultdict
from typing import Iterable, Optional

from tradejournal.analytics.performance import account_entries, pnl_value
from tradejournal.models import LedgerEntry

# (band, lower bound) pairs checked top-down for positive days
_PROFIT_BANDS = (("profit-strong", 1000.0), ("profit", 100.0), ("profit-light", 0.0))
_LOSS_BANDS = (("loss-strong", -1000.0), ("loss", -100.0), ("loss-light", 0.0))


def calendar_pnl(
    entries: Iterable[LedgerEntry], account_id: Optional[str] = None
) -> dict[str, float]:
    """Sum realized P&L per calendar day.

    Includes closed and stopped entries, so deposits and withdrawals are
    counted. Days without entries are absent from the result.

    Args:
        entries: Entries to aggregate.
        account_id: Restrict to one account; None aggregates everything.

    Returns:
        Mapping of 'YYYY-MM-DD' to summed P&L.
    """
    days: dict[str, float] = defaultdict(float)
    for entry in account_entries(entries, account_id):
        if entry.is_realized:
            days[entry.date.isoformat()] += pnl_value(entry)
    return dict(days)


def heatmap_band(pnl: float) -> str:
    """Display band for a day's P&L."""
    if pnl > 0:
        for band, floor in _PROFIT_BANDS:
            if pnl > floor:
                return band
    if pnl < 0:
        for band, ceiling in _LOSS_BANDS:
            if pnl < ceiling:
                return band
    return "neutral"


def month_grid(
    year: int, month: int, days: dict[str, float]
) -> list[list[Optional[tuple[int, float]]]]:
    """Lay out a month as Monday-first weeks of (day, pnl) cells.

    Cells outside the month are None; days without activity carry 0.
    """
    weeks = []
    for week in calendar.Calendar().monthdayscalendar(year, month):
        row: list[Optional[tuple[int, float]]] = []
        for day in week:
            if day == 0:
                row.append(None)
            else:
                key = f"{year:04d}-{month:02d}-{day:02d}"
                row.append((day, days.get(key, 0.0)))
        weeks.append(row)
    return weeks
