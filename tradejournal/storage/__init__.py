"""Persistence for accounts and ledger entries."""

from tradejournal.storage.base import RecordStore, StoreError
from tradejournal.storage.gateway import StorageGateway, StorageResult
from tradejournal.storage.local import JSONFileStore
from tradejournal.storage.sqlite import SQLiteStore

__all__ = [
    "JSONFileStore",
    "RecordStore",
    "SQLiteStore",
    "StorageGateway",
    "StorageResult",
    "StoreError",
]
