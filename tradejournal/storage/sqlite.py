"""SQLite record store, the journal's durable storage."""

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from tradejournal.storage.base import (
    ACCOUNTS,
    TRADES,
    Record,
    RecordStore,
    StoreError,
    check_kind,
)

ACCOUNT_COLUMNS = (
    "id",
    "name",
    "currency",
    "initial_balance",
    "current_balance",
    "total_deposits",
    "created_at",
)

TRADE_COLUMNS = (
    "id",
    "account_id",
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
    "emotion",
    "mistakes",
    "lessons",
    "notes",
    "tags",
    "risk_amount",
    "r_multiple",
    "screenshot_url",
)

_COLUMNS = {ACCOUNTS: ACCOUNT_COLUMNS, TRADES: TRADE_COLUMNS}
_ORDER_BY = {ACCOUNTS: "created_at DESC", TRADES: "date DESC"}


class SQLiteStore(RecordStore):
    """SQLite-based record store.

    Trades reference accounts with ``ON DELETE CASCADE``, so deleting an
    account removes its trades in the same statement.

    Nothing touches the filesystem until the first operation, so an
    unusable ``db_path`` surfaces as a StoreError from that operation.
    """

    REQUIRED_TABLES = [ACCOUNTS, TRADES]

    def __init__(self, db_path: Path):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._schema_ready = False

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create database directory: {e}") from e

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, committing on success and always closing.

        Creates the database directory and schema on first use.
        """
        if not self._schema_ready:
            self._ensure_db_dir()
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            if not self._schema_ready:
                self._init_schema(conn)
                self._schema_ready = True
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def _init_schema(self, conn: sqlite3.Connection) -> None:
        """Initialize database schema on first run."""
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS accounts (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                currency TEXT NOT NULL DEFAULT 'USD',
                initial_balance REAL NOT NULL,
                current_balance REAL NOT NULL,
                total_deposits REAL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS trades (
                id TEXT PRIMARY KEY,
                account_id TEXT NOT NULL
                    REFERENCES accounts(id) ON DELETE CASCADE,
                date TEXT NOT NULL,
                symbol TEXT NOT NULL DEFAULT '',
                type TEXT NOT NULL,
                lot_size REAL NOT NULL DEFAULT 0,
                entry_price REAL NOT NULL DEFAULT 0,
                exit_price REAL,
                stop_loss REAL,
                take_profit REAL,
                pnl REAL,
                status TEXT NOT NULL DEFAULT 'open',
                emotion TEXT,
                mistakes TEXT,
                lessons TEXT,
                notes TEXT,
                tags TEXT NOT NULL DEFAULT '[]',
                risk_amount REAL,
                r_multiple REAL,
                screenshot_url TEXT,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_trades_account ON trades(account_id)"
        )

    # ==================== Records ====================

    def load(self, kind: str) -> list[Record]:
        check_kind(kind)
        columns = _COLUMNS[kind]
        with self._connection() as conn:
            cursor = conn.execute(
                f"SELECT {', '.join(columns)} FROM {kind} ORDER BY {_ORDER_BY[kind]}"
            )
            records = [dict(row) for row in cursor.fetchall()]
        if kind == TRADES:
            for record in records:
                record["tags"] = _decode_tags(record["tags"])
        return records

    def upsert(self, kind: str, records: Iterable[Record]) -> None:
        check_kind(kind)
        rows = [self._row(kind, record) for record in records]
        if not rows:
            return
        with self._connection() as conn:
            self._upsert_rows(conn, kind, rows)

    def replace(self, kind: str, records: Iterable[Record]) -> None:
        check_kind(kind)
        rows = [self._row(kind, record) for record in records]
        with self._connection() as conn:
            if kind == ACCOUNTS:
                # Trades of accounts that survive the replacement are kept
                ids = [row[0] for row in rows]
                placeholders = ", ".join("?" for _ in ids)
                conn.execute(
                    f"DELETE FROM accounts WHERE id NOT IN ({placeholders})", ids
                )
            else:
                conn.execute("DELETE FROM trades")
            if rows:
                self._upsert_rows(conn, kind, rows)

    def _upsert_rows(self, conn: sqlite3.Connection, kind: str, rows: list[tuple]) -> None:
        columns = _COLUMNS[kind]
        # ON CONFLICT ... DO UPDATE rather than INSERT OR REPLACE, which
        # would delete the account row and cascade to its trades
        updates = ", ".join(f"{c} = excluded.{c}" for c in columns[1:])
        conn.executemany(
            f"INSERT INTO {kind} ({', '.join(columns)}, updated_at) "
            f"VALUES ({', '.join('?' for _ in columns)}, ?) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}, updated_at = excluded.updated_at",
            rows,
        )

    def delete(self, kind: str, record_id: str) -> None:
        check_kind(kind)
        with self._connection() as conn:
            conn.execute(f"DELETE FROM {kind} WHERE id = ?", (record_id,))

    def _row(self, kind: str, record: Record) -> tuple:
        values = []
        for column in _COLUMNS[kind]:
            value = record.get(column)
            if column == "tags":
                value = json.dumps(list(value or []))
            values.append(value)
        values.append(datetime.now().isoformat())
        return tuple(values)

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        with self._connection() as conn:
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor = conn.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats


def _decode_tags(raw) -> list:
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except (TypeError, ValueError):
        return [t.strip() for t in str(raw).split(",") if t.strip()]
    return tags if isinstance(tags, list) else []
