"""Storage gateway: durable store with a local fallback."""

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from pydantic import BaseModel, Field, ValidationError

from tradejournal.models import Account, LedgerEntry
from tradejournal.storage.base import ACCOUNTS, TRADES, Record, RecordStore, StoreError
from tradejournal.storage.local import JSONFileStore
from tradejournal.storage.records import (
    account_from_record,
    account_to_record,
    entry_from_record,
    entry_to_record,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorageResult(BaseModel):
    """Outcome of a write through the gateway."""

    success: bool = Field(..., description="Whether the target store accepted the write")
    error: Optional[str] = Field(default=None, description="Failure description")
    accounts: int = Field(default=0, ge=0, description="Accounts transferred (sync only)")
    trades: int = Field(default=0, ge=0, description="Trades transferred (sync only)")

    model_config = {"frozen": True}


OK = StorageResult(success=True)


class StorageGateway:
    """CRUD access to accounts and ledger entries.

    When ``use_durable`` is set, reads and writes go to the durable store
    and fall back to the local store if it fails. Otherwise only the
    local store is used. Reads always return a list, never an error.
    """

    def __init__(
        self,
        durable: RecordStore,
        local: JSONFileStore,
        use_durable: bool = False,
    ):
        """Initialize the gateway.

        Args:
            durable: Primary store (usually SQLiteStore).
            local: Local fallback store.
            use_durable: Whether the durable store is the primary target.
        """
        self.durable = durable
        self.local = local
        self.use_durable = use_durable

    @classmethod
    def from_config(cls, config) -> "StorageGateway":
        """Build a gateway from a JournalConfig."""
        from tradejournal.storage.sqlite import SQLiteStore

        storage = config.storage
        return cls(
            durable=SQLiteStore(storage.db_path),
            local=JSONFileStore(storage.local_path),
            use_durable=storage.mode == "durable",
        )

    # ==================== Reads ====================

    def _load(self, kind: str) -> list[Record]:
        if self.use_durable:
            try:
                return self.durable.load(kind)
            except StoreError as e:
                logger.warning("Durable load of %s failed, using local store: %s", kind, e)
        return self.local.load(kind)

    @staticmethod
    def _convert(
        records: Iterable[Record], convert: Callable[[Record], T], kind: str
    ) -> list[T]:
        items = []
        for record in records:
            try:
                items.append(convert(record))
            except (ValidationError, ValueError) as e:
                logger.warning("Skipping malformed %s record %r: %s", kind, record.get("id"), e)
        return items

    def get_accounts(self) -> list[Account]:
        """All accounts, newest first."""
        accounts = self._convert(self._load(ACCOUNTS), account_from_record, ACCOUNTS)
        return sorted(accounts, key=lambda a: a.created_at, reverse=True)

    def get_trades(self) -> list[LedgerEntry]:
        """All ledger entries, most recent date first."""
        entries = self._convert(self._load(TRADES), entry_from_record, TRADES)
        return sorted(entries, key=lambda e: e.date, reverse=True)

    # ==================== Writes ====================

    def _save_all(self, kind: str, records: list[Record]) -> StorageResult:
        if not self.use_durable:
            return self._local_write(self.local.replace, kind, records)
        try:
            self.durable.upsert(kind, records)
            return OK
        except StoreError as e:
            logger.warning("Durable save of %s failed, writing local copy: %s", kind, e)
            fallback = self._local_write(self.local.replace, kind, records)
            error = str(e) if fallback.success else f"{e}; {fallback.error}"
            return StorageResult(success=False, error=error)

    def _save_one(self, kind: str, record: Record) -> StorageResult:
        store = self.durable if self.use_durable else self.local
        try:
            store.upsert(kind, [record])
            return OK
        except StoreError as e:
            logger.warning("Save of %s %s failed: %s", kind, record.get("id"), e)
            return StorageResult(success=False, error=str(e))

    def _delete(self, kind: str, record_id: str) -> StorageResult:
        store = self.durable if self.use_durable else self.local
        try:
            store.delete(kind, record_id)
            return OK
        except StoreError as e:
            logger.warning("Delete of %s %s failed: %s", kind, record_id, e)
            return StorageResult(success=False, error=str(e))

    @staticmethod
    def _local_write(write: Callable[..., Any], kind: str, records: list[Record]) -> StorageResult:
        try:
            write(kind, records)
            return OK
        except StoreError as e:
            logger.error("Local save of %s failed: %s", kind, e)
            return StorageResult(success=False, error=str(e))

    def save_accounts(self, accounts: Iterable[Account]) -> StorageResult:
        """Persist the full account collection."""
        return self._save_all(ACCOUNTS, [account_to_record(a) for a in accounts])

    def save_trades(self, entries: Iterable[LedgerEntry]) -> StorageResult:
        """Persist the full ledger entry collection."""
        return self._save_all(TRADES, [entry_to_record(e) for e in entries])

    def save_account(self, account: Account) -> StorageResult:
        """Insert or update one account."""
        return self._save_one(ACCOUNTS, account_to_record(account))

    def save_trade(self, entry: LedgerEntry) -> StorageResult:
        """Insert or update one ledger entry."""
        return self._save_one(TRADES, entry_to_record(entry))

    def delete_trade(self, entry_id: str) -> StorageResult:
        """Delete one ledger entry."""
        return self._delete(TRADES, entry_id)

    def delete_account(self, account_id: str) -> StorageResult:
        """Delete an account together with all of its entries."""
        return self._delete(ACCOUNTS, account_id)

    # ==================== Preferences ====================

    def get_preference(self, key: str, default: Optional[Any] = None) -> Any:
        """Read a local preference value."""
        return self.local.get_value(key, default)

    def set_preference(self, key: str, value: Any) -> None:
        """Write a local preference value.

        Raises:
            StoreError: If the local store cannot be written.
        """
        self.local.set_value(key, value)

    # ==================== Sync ====================

    def sync_to_durable(self) -> StorageResult:
        """Copy local accounts and trades into the durable store."""
        accounts = [
            account_to_record(a)
            for a in self._convert(self.local.load(ACCOUNTS), account_from_record, ACCOUNTS)
        ]
        trades = [
            entry_to_record(e)
            for e in self._convert(self.local.load(TRADES), entry_from_record, TRADES)
        ]
        try:
            # Accounts first so trades satisfy their foreign key
            self.durable.upsert(ACCOUNTS, accounts)
            self.durable.upsert(TRADES, trades)
        except StoreError as e:
            logger.error("Sync to durable store failed: %s", e)
            return StorageResult(success=False, error=str(e))
        logger.info("Synced %d accounts and %d trades to durable store", len(accounts), len(trades))
        return StorageResult(success=True, accounts=len(accounts), trades=len(trades))

    def sync_from_durable(self) -> StorageResult:
        """Overwrite the local store with the durable store's contents."""
        try:
            accounts = self.durable.load(ACCOUNTS)
            trades = self.durable.load(TRADES)
            self.local.replace(ACCOUNTS, accounts)
            self.local.replace(TRADES, trades)
        except StoreError as e:
            logger.error("Sync from durable store failed: %s", e)
            return StorageResult(success=False, error=str(e))
        logger.info("Synced %d accounts and %d trades to local store", len(accounts), len(trades))
        return StorageResult(success=True, accounts=len(accounts), trades=len(trades))

    def migrate_to_durable(self) -> StorageResult:
        """Push local data to the durable store and switch to it."""
        result = self.sync_to_durable()
        if result.success:
            self.use_durable = True
        return result
