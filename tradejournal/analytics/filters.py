"""Entry filtering and filter-option discovery."""

from typing import Iterable, Optional

from tradejournal.analytics.performance import as_amount
from tradejournal.models import EntryFilter, LedgerEntry


def _matches_status_result(entry: LedgerEntry, status_result: str) -> bool:
    if status_result in ("open", "closed", "stopped"):
        return entry.status == status_result
    if status_result in ("win", "loss"):
        if not entry.is_trade or entry.status != "closed":
            return False
        amount = as_amount(entry.pnl) or 0.0
        return amount > 0 if status_result == "win" else amount < 0
    return True


def matches(entry: LedgerEntry, criteria: EntryFilter) -> bool:
    """Check whether a single entry satisfies every filter dimension."""
    if not _matches_status_result(entry, criteria.status_result):
        return False
    if criteria.emotion != "all" and entry.emotion != criteria.emotion:
        return False
    # Capital movements carry internal tags only, never user-facing ones
    if criteria.tag != "all" and not (entry.is_trade and criteria.tag in entry.tags):
        return False
    if criteria.entry_type != "all" and entry.type != criteria.entry_type:
        return False
    if criteria.account_id is not None and entry.account_id != criteria.account_id:
        return False
    if criteria.date_from is not None and entry.date < criteria.date_from:
        return False
    if criteria.date_to is not None and entry.date > criteria.date_to:
        return False
    return True


def filter_entries(
    entries: Iterable[LedgerEntry], criteria: Optional[EntryFilter] = None
) -> list[LedgerEntry]:
    """Return the entries matching the criteria, preserving input order."""
    if criteria is None:
        return list(entries)
    return [e for e in entries if matches(e, criteria)]


def available_tags(entries: Iterable[LedgerEntry]) -> list[str]:
    """Distinct tags used on buy/sell entries, in first-seen order."""
    tags: list[str] = []
    for entry in entries:
        if not entry.is_trade:
            continue
        for tag in entry.tags:
            if tag not in tags:
                tags.append(tag)
    return tags


def available_emotions(entries: Iterable[LedgerEntry]) -> list[str]:
    """Distinct non-empty emotions recorded on buy/sell entries."""
    emotions: list[str] = []
    for entry in entries:
        if entry.is_trade and entry.emotion and entry.emotion not in emotions:
            emotions.append(entry.emotion)
    return emotions
