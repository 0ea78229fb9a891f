"""Conversion between stored records and journal models.

Stored records may spell fields in snake_case (database rows) or
camelCase (older browser exports). This module is the only place that
knows about both spellings; everything past it sees canonical models.
"""

from datetime import date, datetime
from typing import Any, Mapping, Optional

from tradejournal.analytics.performance import as_amount
from tradejournal.models import CAPITAL_TYPES, Account, LedgerEntry
from tradejournal.storage.base import Record

# Canonical field name -> accepted spellings, in lookup order
ACCOUNT_ALIASES = {
    "initial_balance": ("initial_balance", "initialBalance"),
    "current_balance": ("current_balance", "currentBalance"),
    "total_deposits": ("total_deposits", "totalDeposits"),
    "created_at": ("created_at", "createdAt"),
}

ENTRY_ALIASES = {
    "account_id": ("account_id", "accountId"),
    "lot_size": ("lot_size", "lotSize"),
    "entry_price": ("entry_price", "entryPrice"),
    "exit_price": ("exit_price", "exitPrice"),
    "stop_loss": ("stop_loss", "stopLoss"),
    "take_profit": ("take_profit", "takeProfit"),
    "risk_amount": ("risk_amount", "riskAmount"),
    "r_multiple": ("r_multiple", "rMultiple"),
    "screenshot_url": ("screenshot_url", "screenshotUrl", "screenshot"),
}

TEXT_FIELDS = ("emotion", "mistakes", "lessons", "notes")


def pick(record: Mapping[str, Any], names: tuple[str, ...], default: Any = None) -> Any:
    """First non-null value among the given keys."""
    for name in names:
        value = record.get(name)
        if value is not None:
            return value
    return default


def _price(value: Any) -> Optional[float]:
    amount = as_amount(value)
    if amount is None or amount < 0:
        return None
    return amount


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_day(value: Any) -> date:
    """Parse a calendar day, ignoring any time-of-day component.

    Raises:
        ValueError: If the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        return date.fromisoformat(value[:10])
    raise ValueError(f"Invalid date: {value!r}")


def parse_timestamp(value: Any) -> datetime:
    """Parse a timestamp as a naive local datetime; now when absent."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return datetime.now()
    else:
        return datetime.now()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    return [str(t) for t in value if t is not None]


def account_from_record(record: Mapping[str, Any]) -> Account:
    """Build an Account from a stored record in either spelling.

    Raises:
        pydantic.ValidationError: If the record lacks required fields.
    """
    initial = as_amount(pick(record, ACCOUNT_ALIASES["initial_balance"]))
    current = as_amount(pick(record, ACCOUNT_ALIASES["current_balance"]))
    return Account(
        id=_text(record.get("id")),
        name=_text(record.get("name")),
        currency=_text(record.get("currency")) or "USD",
        initial_balance=initial if initial is not None else 0.0,
        current_balance=current if current is not None else (initial or 0.0),
        total_deposits=as_amount(pick(record, ACCOUNT_ALIASES["total_deposits"])),
        created_at=parse_timestamp(pick(record, ACCOUNT_ALIASES["created_at"])),
    )


def entry_from_record(record: Mapping[str, Any]) -> LedgerEntry:
    """Build a LedgerEntry from a stored record in either spelling.

    Malformed optional numbers become absent; capital movements are
    forced closed and stripped of risk fields.

    Raises:
        ValueError: If the date is unreadable.
        pydantic.ValidationError: If required fields are missing.
    """
    entry_type = _text(record.get("type")).lower()
    capital = entry_type in CAPITAL_TYPES

    fields: dict[str, Any] = {
        "id": _text(record.get("id")),
        "account_id": _text(pick(record, ENTRY_ALIASES["account_id"])),
        "date": parse_day(record.get("date")),
        "symbol": _text(record.get("symbol")),
        "type": entry_type,
        "lot_size": _price(pick(record, ENTRY_ALIASES["lot_size"])) or 0.0,
        "entry_price": _price(pick(record, ENTRY_ALIASES["entry_price"])) or 0.0,
        "exit_price": _price(pick(record, ENTRY_ALIASES["exit_price"])),
        "stop_loss": _price(pick(record, ENTRY_ALIASES["stop_loss"])),
        "take_profit": _price(pick(record, ENTRY_ALIASES["take_profit"])),
        "pnl": as_amount(record.get("pnl")),
        "status": "closed" if capital else (_text(record.get("status")).lower() or "open"),
        "tags": _tags(record.get("tags")),
        "screenshot_url": pick(record, ENTRY_ALIASES["screenshot_url"]) or None,
    }
    if not capital:
        fields["risk_amount"] = as_amount(pick(record, ENTRY_ALIASES["risk_amount"]))
        fields["r_multiple"] = as_amount(pick(record, ENTRY_ALIASES["r_multiple"]))
    for name in TEXT_FIELDS:
        fields[name] = _text(record.get(name))
    return LedgerEntry(**fields)


def account_to_record(account: Account) -> Record:
    """Canonical snake_case record for an account."""
    return account.model_dump(mode="json")


def entry_to_record(entry: LedgerEntry) -> Record:
    """Canonical snake_case record for a ledger entry."""
    return entry.model_dump(mode="json")
