"""Data models for the trade journal."""

from tradejournal.models.account import Account
from tradejournal.models.entry import (
    CAPITAL_TYPES,
    ENTRY_STATUSES,
    ENTRY_TYPES,
    REALIZED_STATUSES,
    TRADE_TYPES,
    EntryStatus,
    EntryType,
    LedgerEntry,
)
from tradejournal.models.filters import EntryFilter

__all__ = [
    "Account",
    "LedgerEntry",
    "EntryFilter",
    "EntryType",
    "EntryStatus",
    "TRADE_TYPES",
    "CAPITAL_TYPES",
    "ENTRY_TYPES",
    "ENTRY_STATUSES",
    "REALIZED_STATUSES",
]
