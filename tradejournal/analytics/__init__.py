"""Trade analytics for the journal.

Pure functions over an in-memory snapshot of accounts and ledger
entries. Nothing here performs I/O or keeps state between calls.
"""

from tradejournal.analytics.breakdown import (
    GroupPerformance,
    emotion_performance,
    recent_notes,
    tag_performance,
)
from tradejournal.analytics.filters import (
    available_emotions,
    available_tags,
    filter_entries,
    matches,
)
from tradejournal.analytics.heatmap import calendar_pnl, heatmap_band, month_grid
from tradejournal.analytics.performance import (
    AccountPerformance,
    account_performance,
    account_totals,
    defined_r_multiple,
    r_multiple,
    roi,
    win_rate,
)
from tradejournal.analytics.streaks import (
    MISSING_PNL_POLICIES,
    Streak,
    current_streak,
    longest_streaks,
)

__all__ = [
    "AccountPerformance",
    "GroupPerformance",
    "Streak",
    "MISSING_PNL_POLICIES",
    "account_performance",
    "account_totals",
    "available_emotions",
    "available_tags",
    "calendar_pnl",
    "current_streak",
    "defined_r_multiple",
    "emotion_performance",
    "filter_entries",
    "heatmap_band",
    "longest_streaks",
    "matches",
    "month_grid",
    "r_multiple",
    "recent_notes",
    "roi",
    "tag_performance",
    "win_rate",
]
