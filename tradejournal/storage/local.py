"""JSON file key-value store, the journal's local fallback storage."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Optional

from tradejournal.storage.base import (
    ACCOUNTS,
    TRADES,
    Record,
    RecordStore,
    StoreError,
    check_kind,
)

logger = logging.getLogger(__name__)

# Keys under which record collections are kept
RECORD_KEYS = {
    ACCOUNTS: "trading-accounts",
    TRADES: "trading-journal",
}


class JSONFileStore(RecordStore):
    """Key-value store persisted as a single JSON object on disk.

    Record collections live under RECORD_KEYS; any other key holds a
    preference value (e.g. the last review timestamp).
    """

    def __init__(self, path: Path):
        """Initialize the store.

        Args:
            path: Path to the JSON file. Created on first write.
        """
        self.path = Path(path)

    # ==================== Key-value ====================

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable local store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed local store %s", self.path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        """Write the whole store to a sibling temp file, then swap it in."""
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

    def get_value(self, key: str, default: Optional[Any] = None) -> Any:
        """Get a stored value, or default when absent."""
        return self._read().get(key, default)

    def set_value(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under key."""
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_value(self, key: str) -> None:
        """Remove a key if present."""
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    # ==================== Records ====================

    def load(self, kind: str) -> list[Record]:
        check_kind(kind)
        records = self.get_value(RECORD_KEYS[kind]) or []
        if not isinstance(records, list):
            logger.warning("Ignoring malformed %s collection in %s", kind, self.path)
            return []
        return [r for r in records if isinstance(r, dict)]

    def replace(self, kind: str, records: Iterable[Record]) -> None:
        check_kind(kind)
        self.set_value(RECORD_KEYS[kind], list(records))

    def upsert(self, kind: str, records: Iterable[Record]) -> None:
        check_kind(kind)
        existing = self.load(kind)
        index = {r.get("id"): i for i, r in enumerate(existing)}
        for record in records:
            position = index.get(record.get("id"))
            if position is None:
                index[record.get("id")] = len(existing)
                existing.append(record)
            else:
                existing[position] = record
        self.replace(kind, existing)

    def delete(self, kind: str, record_id: str) -> None:
        check_kind(kind)
        self.replace(kind, [r for r in self.load(kind) if r.get("id") != record_id])
        if kind == ACCOUNTS:
            # Local storage has no foreign keys; cascade by hand
            trades = self.load(TRADES)
            kept = [t for t in trades if t.get("account_id") != record_id]
            self.replace(TRADES, kept)
