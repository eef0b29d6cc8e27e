"""Scoped batch lock acquisition.

Async context manager that opens a batch, takes the store-wide lock, and
guarantees the lock is released on every exit path. If the body raises
(or the task is cancelled) the batch is discarded before the exception
propagates, so no partial update ever becomes visible.

Usage:
    async with LockedBatch(store, timeout=5.0) as batch:
        current = await batch.get(key)
        await batch.put(key, new_value)
        await batch.flush()
        # On exception: batch discarded, lock released, exception re-raised
"""

from __future__ import annotations

from types import TracebackType

import structlog

from hyperattest.application.ports.kv_store import BatchPort, KeyValueStorePort

log = structlog.get_logger()


class LockedBatch:
    """Context manager holding a store batch under its exclusive lock.

    A body that exits normally is expected to have called flush(); if it did
    not, the batch is discarded (never committed implicitly).

    Attributes:
        _store: Store the batch is opened against.
        _timeout: Seconds to wait for the lock (None waits forever).
        _batch: The open batch, once entered.
    """

    def __init__(self, store: KeyValueStorePort, timeout: float | None = None) -> None:
        """Initialize the locked batch scope.

        Args:
            store: Store to open the batch against.
            timeout: Seconds to wait for the lock (None waits forever).
        """
        self._store = store
        self._timeout = timeout
        self._batch: BatchPort | None = None

    async def __aenter__(self) -> BatchPort:
        """Open the batch and acquire the lock.

        Raises:
            LockTimeoutError: If the lock was not acquired in time.
        """
        batch = self._store.batch()
        try:
            await batch.lock(timeout=self._timeout)
        except BaseException:
            await batch.close()
            raise
        self._batch = batch
        log.debug("batch_lock_acquired")
        return batch

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        """Release the lock, discarding the batch unless it was flushed.

        Returns:
            False - always re-raises the original exception if one occurred.
        """
        batch = self._batch
        self._batch = None
        if batch is None:
            return False

        if exc_val is not None:
            log.info(
                "locked_batch_abandoned",
                error=str(exc_val),
                error_type=exc_type.__name__ if exc_type else "Unknown",
            )
            try:
                await batch.close()
            except Exception as close_error:
                # Original exception takes precedence over cleanup failures
                log.error(
                    "locked_batch_close_failed",
                    close_error=str(close_error),
                    close_error_type=type(close_error).__name__,
                )
            return False

        if batch.locked:
            log.warning("locked_batch_not_flushed")
            await batch.close()
        return False
