"""Unit tests for InMemoryKeyValueStore."""

import asyncio
import contextlib

import pytest

from hyperattest.domain.errors import LockNotHeldError, LockTimeoutError
from hyperattest.infrastructure.stubs.in_memory_store import InMemoryKeyValueStore


class TestStore:
    @pytest.mark.asyncio
    async def test_put_appends_versions(self, store: InMemoryKeyValueStore) -> None:
        await store.put(b"k", b"1")
        await store.put(b"k", b"2")

        assert await store.get(b"k") == b"2"
        assert store.history(b"k") == [b"1", b"2"]

    @pytest.mark.asyncio
    async def test_keys_by_prefix(self, store: InMemoryKeyValueStore) -> None:
        await store.put(b"a/1", b"x")
        await store.put(b"a/2", b"x")
        await store.put(b"b/1", b"x")

        assert store.keys(b"a/") == [b"a/1", b"a/2"]

    @pytest.mark.asyncio
    async def test_clear(self, store: InMemoryKeyValueStore) -> None:
        await store.put(b"k", b"v")

        store.clear()

        assert await store.get(b"k") is None


class TestBatch:
    @pytest.mark.asyncio
    async def test_flush_applies_all_puts(self, store: InMemoryKeyValueStore) -> None:
        batch = store.batch()
        await batch.lock()
        await batch.put(b"a", b"1")
        await batch.put(b"b", b"2")

        assert await store.get(b"a") is None
        await batch.flush()

        assert await store.get(b"a") == b"1"
        assert await store.get(b"b") == b"2"
        assert not batch.locked

    @pytest.mark.asyncio
    async def test_close_discards(self, store: InMemoryKeyValueStore) -> None:
        batch = store.batch()
        await batch.lock()
        await batch.put(b"a", b"1")

        await batch.close()

        assert await store.get(b"a") is None
        assert not store.lock.locked()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, store: InMemoryKeyValueStore) -> None:
        batch = store.batch()
        await batch.lock()

        await batch.close()
        await batch.close()

        assert not store.lock.locked()

    @pytest.mark.asyncio
    async def test_lock_is_reentrant_per_batch(
        self, store: InMemoryKeyValueStore
    ) -> None:
        batch = store.batch()
        await batch.lock()
        await batch.lock()

        await batch.close()

        assert not store.lock.locked()

    @pytest.mark.asyncio
    async def test_second_batch_times_out(self, store: InMemoryKeyValueStore) -> None:
        first = store.batch()
        await first.lock()

        with pytest.raises(LockTimeoutError):
            await store.batch().lock(timeout=0.01)

        await first.close()

    @pytest.mark.asyncio
    async def test_flushed_batch_rejects_use(
        self, store: InMemoryKeyValueStore
    ) -> None:
        batch = store.batch()
        await batch.flush()

        with pytest.raises(LockNotHeldError):
            await batch.get(b"a")


class TestCancelledLockWaiter:
    """Cancelling a waiter around the lock hand-over never strands the lock."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timeout", [None, 5.0])
    @pytest.mark.parametrize("steps", [0, 1, 2, 3, 4])
    async def test_lock_free_after_cancel(
        self, store: InMemoryKeyValueStore, steps: int, timeout: float | None
    ) -> None:
        holder = store.batch()
        await holder.lock()
        waiter = store.batch()
        task = asyncio.create_task(waiter.lock(timeout=timeout))
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        await holder.close()
        for _ in range(steps):
            await asyncio.sleep(0)
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        await waiter.close()

        assert not store.lock.locked()
        follower = store.batch()
        await follower.lock(timeout=0.1)
        await follower.close()
