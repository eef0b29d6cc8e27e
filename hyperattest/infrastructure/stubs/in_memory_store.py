"""In-memory append-only key-value store for testing and development.

Implements KeyValueStorePort with:
- per-key version history (put never overwrites; the latest version wins)
- batches with read-your-own-writes visibility
- one asyncio.Lock per store shared by all of its batches
- flush() applying every buffered put in one step (no await in between),
  so readers never observe half a batch
"""

from __future__ import annotations

import asyncio

from hyperattest.application.ports.kv_store import BatchPort, KeyValueStorePort
from hyperattest.domain.errors.lock import LockNotHeldError, LockTimeoutError


class InMemoryBatch(BatchPort):
    """Batch over an InMemoryKeyValueStore."""

    def __init__(self, store: InMemoryKeyValueStore) -> None:
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
        return self._store._latest(key)

    async def put(self, key: bytes, value: bytes) -> None:
        self._ensure_open()
        self._pending[key] = value

    async def flush(self) -> None:
        self._ensure_open()
        try:
            self._store._apply(self._pending)
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


class InMemoryKeyValueStore(KeyValueStorePort):
    """In-memory store keeping every version of every key."""

    def __init__(self) -> None:
        self._versions: dict[bytes, list[bytes]] = {}
        self.lock = asyncio.Lock()

    def _latest(self, key: bytes) -> bytes | None:
        versions = self._versions.get(key)
        return versions[-1] if versions else None

    def _apply(self, puts: dict[bytes, bytes]) -> None:
        for key, value in puts.items():
            self._versions.setdefault(key, []).append(value)

    async def get(self, key: bytes) -> bytes | None:
        return self._latest(key)

    async def put(self, key: bytes, value: bytes) -> None:
        self._apply({key: value})

    def batch(self) -> InMemoryBatch:
        return InMemoryBatch(self)

    # Test helpers

    def history(self, key: bytes) -> list[bytes]:
        """All versions ever written at key, oldest first."""
        return list(self._versions.get(key, []))

    def keys(self, prefix: bytes = b"") -> list[bytes]:
        """Sorted keys, optionally restricted to a prefix."""
        return sorted(k for k in self._versions if k.startswith(prefix))

    def clear(self) -> None:
        """Drop all data (for test isolation)."""
        self._versions.clear()
