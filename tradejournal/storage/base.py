"""Base record store interface for the trade journal."""

from abc import ABC, abstractmethod
from typing import Any, Iterable

Record = dict[str, Any]

# Record kinds held by every store
ACCOUNTS = "accounts"
TRADES = "trades"
RECORD_KINDS = (ACCOUNTS, TRADES)


class StoreError(Exception):
    """Raised when a store cannot be read or written."""


class RecordStore(ABC):
    """Abstract base class for account/trade record stores.

    Stores hold plain snake_case records keyed by their ``id`` field.
    Converting records to models is the gateway's job, not the store's.
    """

    @abstractmethod
    def load(self, kind: str) -> list[Record]:
        """Load all records of a kind.

        Args:
            kind: One of RECORD_KINDS.

        Returns:
            List of records.

        Raises:
            StoreError: If the store cannot be read.
        """
        pass

    @abstractmethod
    def upsert(self, kind: str, records: Iterable[Record]) -> None:
        """Insert records, updating any that already exist by id.

        Raises:
            StoreError: If the store cannot be written.
        """
        pass

    @abstractmethod
    def replace(self, kind: str, records: Iterable[Record]) -> None:
        """Replace every record of a kind with the given records.

        Raises:
            StoreError: If the store cannot be written.
        """
        pass

    @abstractmethod
    def delete(self, kind: str, record_id: str) -> None:
        """Delete one record by id.

        For accounts, records of other kinds referencing the account
        are deleted as well.

        Raises:
            StoreError: If the store cannot be written.
        """
        pass


def check_kind(kind: str) -> None:
    """Raise ValueError for an unknown record kind."""
    if kind not in RECORD_KINDS:
        raise ValueError(f"Unknown record kind: {kind}")
