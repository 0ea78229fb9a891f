"""Ledger service for the trade journal.

Owns the in-memory snapshot of accounts and entries, applies user
actions to it, keeps each account's derived balance fields in step with
its entries and persists the result through the storage gateway.
"""

import json
import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Optional

from tradejournal.analytics import (
    AccountPerformance,
    account_performance,
    account_totals,
    defined_r_multiple,
)
from tradejournal.analytics.performance import as_amount
from tradejournal.models import TRADE_TYPES, Account, LedgerEntry
from tradejournal.storage import StorageGateway, StorageResult
from tradejournal.storage.records import entry_to_record

logger = logging.getLogger(__name__)

# Local preference key holding the last review timestamp
REVIEW_KEY = "last-review"

# Fields a user may change when editing a trade
EDITABLE_FIELDS = frozenset(
    {
        "date",
        "symbol",
        "type",
        "lot_size",
        "entry_price",
        "exit_price",
        "stop_loss",
        "take_profit",
        "pnl",
        "status",
        "risk_amount",
        "emotion",
        "mistakes",
        "lessons",
        "notes",
        "tags",
        "screenshot_url",
    }
)


class JournalError(ValueError):
    """Raised when a journal action is rejected."""


class InsufficientFundsError(JournalError):
    """Raised when a withdrawal exceeds the account balance."""


def _new_id(suffix: str = "") -> str:
    return uuid.uuid4().hex + (f"-{suffix}" if suffix else "")


class Ledger:
    """Accounts and ledger entries with their persistence.

    Every mutation recomputes the affected account's ``current_balance``
    and ``total_deposits`` from its entries, then saves both collections.
    """

    def __init__(
        self,
        gateway: StorageGateway,
        missing_pnl: str = "loss",
        review_interval_days: int = 3,
    ):
        """Initialize the ledger and load the current snapshot.

        Args:
            gateway: Storage gateway for accounts and entries.
            missing_pnl: Streak policy for closed trades without P&L.
            review_interval_days: Days between trade review reminders.
        """
        self.gateway = gateway
        self.missing_pnl = missing_pnl
        self.review_interval = timedelta(days=review_interval_days)
        self.accounts: list[Account] = []
        self.entries: list[LedgerEntry] = []
        self.last_results: list[StorageResult] = []
        self.load()

    def load(self) -> None:
        """Reload accounts and entries from storage."""
        self.accounts = self.gateway.get_accounts()
        self.entries = self.gateway.get_trades()

    # ==================== Lookups ====================

    def get_account(self, account_id: str) -> Account:
        for account in self.accounts:
            if account.id == account_id:
                return account
        raise JournalError(f"Account not found: {account_id}")

    def get_entry(self, entry_id: str) -> LedgerEntry:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        raise JournalError(f"Trade not found: {entry_id}")

    def entries_for(self, account_id: str) -> list[LedgerEntry]:
        """Entries of one account, most recent date first."""
        owned = [e for e in self.entries if e.account_id == account_id]
        return sorted(owned, key=lambda e: e.date, reverse=True)

    def performance(self, account_id: str) -> AccountPerformance:
        """Analytics summary for one account."""
        return account_performance(
            self.get_account(account_id), self.entries, missing_pnl=self.missing_pnl
        )

    # ==================== Persistence ====================

    def _refresh(self, account_id: str) -> None:
        """Recompute an account's derived balance fields from its entries."""
        updated = []
        for account in self.accounts:
            if account.id == account_id:
                balance, deposits = account_totals(account, self.entries)
                account = account.model_copy(
                    update={"current_balance": balance, "total_deposits": deposits}
                )
            updated.append(account)
        self.accounts = updated

    def _persist(self) -> None:
        self.last_results = [
            self.gateway.save_accounts(self.accounts),
            self.gateway.save_trades(self.entries),
        ]
        for result in self.last_results:
            if not result.success:
                logger.warning("Journal saved to fallback store: %s", result.error)

    # ==================== Accounts ====================

    def create_account(
        self, name: str, initial_balance: float, currency: str = "USD"
    ) -> Account:
        """Create an account funded with its initial balance.

        Raises:
            JournalError: If the name is empty or the balance is not positive.
        """
        name = (name or "").strip()
        balance = as_amount(initial_balance)
        if not name or balance is None or balance <= 0:
            raise JournalError("Please fill in all account details")

        account = Account(
            id=_new_id(),
            name=name,
            currency=(currency or "USD").strip().upper(),
            initial_balance=balance,
            current_balance=balance,
            total_deposits=balance,
        )
        self.accounts.append(account)
        self._persist()
        logger.info("Created account %s (%s)", account.name, account.id)
        return account

    def delete_account(self, account_id: str) -> None:
        """Delete an account and every entry it owns.

        Raises:
            JournalError: If the account is unknown or storage rejects the delete.
        """
        self.get_account(account_id)
        result = self.gateway.delete_account(account_id)
        if not result.success:
            raise JournalError(f"Failed to delete account: {result.error}")
        self.load()
        logger.info("Deleted account %s", account_id)

    # ==================== Trades ====================

    def record_trade(
        self,
        account_id: str,
        symbol: str,
        entry_type: str,
        entry_price: float,
        **fields: Any,
    ) -> LedgerEntry:
        """Journal a new buy/sell trade.

        Args:
            account_id: Owning account.
            symbol: Trading symbol.
            entry_type: 'buy' or 'sell'.
            entry_price: Nonzero entry price.
            **fields: Any other editable LedgerEntry field; 'date'
                defaults to today.

        Returns:
            The stored entry, with its R-multiple derived.

        Raises:
            JournalError: If required fields are missing or the account is unknown.
            pydantic.ValidationError: If a field value is invalid.
        """
        self.get_account(account_id)
        self._check_trade_fields(symbol, entry_type, entry_price)
        unknown = set(fields) - (EDITABLE_FIELDS - {"type"})
        if unknown:
            raise JournalError(f"Unknown trade fields: {', '.join(sorted(unknown))}")

        entry = LedgerEntry(
            id=_new_id(),
            account_id=account_id,
            date=fields.pop("date", None) or datetime.now().date(),
            symbol=symbol.strip().upper(),
            type=entry_type,
            entry_price=entry_price,
            **fields,
        )
        entry = entry.model_copy(update={"r_multiple": defined_r_multiple(entry)})

        self.entries.append(entry)
        self._refresh(account_id)
        self._persist()
        logger.info("Recorded %s %s on account %s", entry.type, entry.symbol, account_id)
        return entry

    def update_trade(self, entry_id: str, **changes: Any) -> LedgerEntry:
        """Edit an existing buy/sell trade.

        Raises:
            JournalError: If the entry is unknown, is a deposit/withdrawal,
                or the changes are invalid.
            pydantic.ValidationError: If a field value is invalid.
        """
        current = self.get_entry(entry_id)
        if current.is_capital_movement:
            raise JournalError("Deposits and withdrawals cannot be edited")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise JournalError(f"Unknown trade fields: {', '.join(sorted(unknown))}")

        data = current.model_dump()
        data.update(changes)
        self._check_trade_fields(data["symbol"], data["type"], data["entry_price"])
        data["r_multiple"] = None
        entry = LedgerEntry(**data)
        entry = entry.model_copy(update={"r_multiple": defined_r_multiple(entry)})

        self.entries = [entry if e.id == entry_id else e for e in self.entries]
        self._refresh(entry.account_id)
        self._persist()
        return entry

    def delete_trade(self, entry_id: str) -> None:
        """Delete one entry and rebalance its account.

        Raises:
            JournalError: If the entry is unknown or storage rejects the delete.
        """
        entry = self.get_entry(entry_id)
        result = self.gateway.delete_trade(entry_id)
        if not result.success:
            raise JournalError(f"Failed to delete trade: {result.error}")
        self.entries = [e for e in self.entries if e.id != entry_id]
        self._refresh(entry.account_id)
        self._persist()

    @staticmethod
    def _check_trade_fields(symbol: str, entry_type: str, entry_price: Any) -> None:
        if not symbol or not str(symbol).strip() or not as_amount(entry_price):
            raise JournalError("Please fill in required fields and select an account")
        if entry_type not in TRADE_TYPES:
            raise JournalError(f"Trade type must be buy or sell, got {entry_type!r}")

    # ==================== Capital movements ====================

    def _capital_entry(self, account_id: str, kind: str, pnl: float) -> LedgerEntry:
        return LedgerEntry(
            id=_new_id(kind),
            account_id=account_id,
            date=datetime.now().date(),
            symbol=kind.capitalize(),
            type=kind,
            pnl=pnl,
            status="closed",
            tags=[kind],
        )

    @staticmethod
    def _valid_amount(amount: Any) -> float:
        value = as_amount(amount)
        if value is None or value <= 0:
            raise JournalError("Please enter a valid amount greater than 0")
        return value

    def deposit(self, account_id: str, amount: float) -> LedgerEntry:
        """Add funds to an account.

        Raises:
            JournalError: If the account is unknown or the amount is not positive.
        """
        self.get_account(account_id)
        value = self._valid_amount(amount)

        entry = self._capital_entry(account_id, "deposit", value)
        self.entries.append(entry)
        self._refresh(account_id)
        self._persist()
        logger.info("Deposited %.2f into account %s", value, account_id)
        return entry

    def withdraw(self, account_id: str, amount: float) -> LedgerEntry:
        """Take funds out of an account.

        Raises:
            JournalError: If the account is unknown or the amount is not positive.
            InsufficientFundsError: If the amount exceeds the current balance.
        """
        account = self.get_account(account_id)
        value = self._valid_amount(amount)
        balance, _ = account_totals(account, self.entries)
        if value > balance:
            raise InsufficientFundsError(
                "You cannot withdraw more than the current balance."
            )

        entry = self._capital_entry(account_id, "withdrawal", -value)
        self.entries.append(entry)
        self._refresh(account_id)
        self._persist()
        logger.info("Withdrew %.2f from account %s", value, account_id)
        return entry

    # ==================== Export ====================

    def export_trades(self, account_id: str) -> str:
        """JSON document of an account's entries.

        Raises:
            JournalError: If the account is unknown.
        """
        self.get_account(account_id)
        records = [entry_to_record(e) for e in self.entries_for(account_id)]
        return json.dumps(records, indent=2)

    def export_filename(self, account_id: str, today: Optional[date] = None) -> str:
        account = self.get_account(account_id)
        day = today or datetime.now().date()
        return f"{account.name}-trades-{day.isoformat()}.json"

    # ==================== Review reminder ====================

    def review_due(self, now: Optional[datetime] = None) -> bool:
        """Whether the periodic trade review is due."""
        now = now or datetime.now()
        last = self.gateway.get_preference(REVIEW_KEY)
        if not last:
            return True
        try:
            last_review = datetime.fromisoformat(str(last))
        except ValueError:
            return True
        return now - last_review > self.review_interval

    def mark_reviewed(self, now: Optional[datetime] = None) -> None:
        """Record that a review happened."""
        self.gateway.set_preference(REVIEW_KEY, (now or datetime.now()).isoformat())

    def recent_trades(self, limit: int = 3) -> list[LedgerEntry]:
        """Most recent closed or stopped trades across all accounts."""
        realized = [e for e in self.entries if e.is_trade and e.is_realized]
        return sorted(realized, key=lambda e: e.date, reverse=True)[:limit]
