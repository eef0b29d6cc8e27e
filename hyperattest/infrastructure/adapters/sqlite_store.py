"""SQLite-backed append-only key-value store.

Every put inserts a new row; reads return the row with the highest
sequence number for a key, so later writes supersede earlier ones while the
full history stays on disk. There is no UPDATE or DELETE anywhere.

Schema:
    entries(seq INTEGER PRIMARY KEY AUTOINCREMENT, key BLOB, value BLOB)

Blocking sqlite3 calls run in a worker thread (asyncio.to_thread); a
threading lock serializes them. The batch lock is a separate asyncio.Lock
shared by every batch of one store instance. Two processes writing the
same file are serialized by SQLite itself, but only batches of one
instance exclude each other's read-modify-write.
"""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from contextlib import closing
from pathlib import Path

from hyperattest.application.ports.kv_store import BatchPort, KeyValueStorePort
from hyperattest.domain.errors.dependency import StoreError
from hyperattest.domain.errors.lock import LockNotHeldError, LockTimeoutError
from hyperattest.infrastructure.observability.logging import get_logger_for_service

_SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    key BLOB NOT NULL,
    value BLOB NOT NULL
);
CREATE INDEX IF NOT EXISTS entries_key_seq ON entries (key, seq);
"""


class SqliteBatch(BatchPort):
    """Batch over a SqliteKeyValueStore; commits in one transaction."""

    def __init__(self, store: SqliteKeyValueStore) -> None:
        self._store = store
        self._pending: dict[bytes, bytes] = {}
        self._locked = False
        self._finished = False

    @property
    def locked(self) -> bool:
        return self._locked

    def _ensure_open(self) -> None:
        if self._finished:
            raise LockNotHeldError("Batch was already flushed or closed")

    async def lock(self, timeout: float | None = None) -> None:
        self._ensure_open()
        if self._locked:
            return
        try:
            async with asyncio.timeout(timeout):
                await self._store.lock.acquire()
                # Marked inside the scope so _finish releases a lock that was
                # acquired as a cancellation arrived.
                self._locked = True
        except TimeoutError as e:
            raise LockTimeoutError(timeout or 0.0) from e

    async def get(self, key: bytes) -> bytes | None:
        self._ensure_open()
        if key in self._pending:
            return self._pending[key]
        return await self._store.get(key)

    async def put(self, key: bytes, value: bytes) -> None:
        self._ensure_open()
        self._pending[key] = value

    async def flush(self) -> None:
        self._ensure_open()
        try:
            if self._pending:
                await self._store._insert_many(list(self._pending.items()))
        finally:
            self._finish()

    async def close(self) -> None:
        if not self._finished:
            self._finish()

    def _finish(self) -> None:
        self._pending = {}
        self._finished = True
        if self._locked:
            self._locked = False
            self._store.lock.release()


class SqliteKeyValueStore(KeyValueStorePort):
    """Append-only key-value store in a single SQLite file."""

    def __init__(self, path: Path | str) -> None:
        """Open (and create if needed) the store at path.

        Raises:
            StoreError: If the database cannot be initialized.
        """
        self.path = str(path)
        self._log = get_logger_for_service(
            self.__class__.__name__, component="store", path=self.path
        )
        self.lock = asyncio.Lock()
        self._db_lock = threading.Lock()
        try:
            with self._db_lock, closing(sqlite3.connect(self.path)) as conn:
                conn.executescript(_SCHEMA)
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot initialize store {self.path}: {e}") from e

    def _select_latest(self, key: bytes) -> bytes | None:
        with self._db_lock, closing(sqlite3.connect(self.path)) as conn:
            row = conn.execute(
                "SELECT value FROM entries WHERE key = ? ORDER BY seq DESC LIMIT 1",
                (key,),
            ).fetchone()
        return bytes(row[0]) if row else None

    def _insert_rows(self, rows: list[tuple[bytes, bytes]]) -> None:
        with self._db_lock, closing(sqlite3.connect(self.path)) as conn:
            with conn:
                conn.executemany("INSERT INTO entries (key, value) VALUES (?, ?)", rows)

    def _select_history(self, key: bytes) -> list[bytes]:
        with self._db_lock, closing(sqlite3.connect(self.path)) as conn:
            rows = conn.execute(
                "SELECT value FROM entries WHERE key = ? ORDER BY seq ASC", (key,)
            ).fetchall()
        return [bytes(row[0]) for row in rows]

    def _select_keys(self, prefix: bytes) -> list[bytes]:
        with self._db_lock, closing(sqlite3.connect(self.path)) as conn:
            rows = conn.execute("SELECT DISTINCT key FROM entries ORDER BY key").fetchall()
        return [bytes(row[0]) for row in rows if bytes(row[0]).startswith(prefix)]

    async def _insert_many(self, rows: list[tuple[bytes, bytes]]) -> None:
        try:
            await asyncio.to_thread(self._insert_rows, rows)
        except sqlite3.Error as e:
            self._log.error("sqlite_store_write_failed", error=str(e))
            raise StoreError(f"Failed to write to {self.path}: {e}") from e

    async def get(self, key: bytes) -> bytes | None:
        try:
            return await asyncio.to_thread(self._select_latest, key)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read from {self.path}: {e}") from e

    async def put(self, key: bytes, value: bytes) -> None:
        await self._insert_many([(key, value)])

    def batch(self) -> SqliteBatch:
        return SqliteBatch(self)

    async def history(self, key: bytes) -> list[bytes]:
        """All versions ever written at key, oldest first."""
        try:
            return await asyncio.to_thread(self._select_history, key)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read from {self.path}: {e}") from e

    async def keys(self, prefix: bytes = b"") -> list[bytes]:
        """Sorted distinct keys, optionally restricted to a prefix."""
        try:
            return await asyncio.to_thread(self._select_keys, prefix)
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read from {self.path}: {e}") from e
