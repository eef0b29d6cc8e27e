"""Key-value store port definition.

Defines the abstract interface of the authenticated append-only key-value
store the attestations are written to. The store's tree layout, replication
and on-disk format are the adapter's business.

Semantics required here:
- get/put over binary keys and binary values; a later put to a key
  supersedes earlier ones for reads (no delete methods exist)
- batch() opens a buffered unit with read-your-own-writes visibility
- BatchPort.lock() is exclusive across ALL batches of the same store
- BatchPort.flush() commits every buffered put atomically and releases
  the lock; BatchPort.close() discards them and releases the lock
"""

from abc import ABC, abstractmethod


class BatchPort(ABC):
    """A buffered, lockable unit of store operations committed together."""

    @abstractmethod
    async def lock(self, timeout: float | None = None) -> None:
        """Acquire the store-wide exclusive lock for this batch.

        Args:
            timeout: Seconds to wait before giving up (None waits forever).

        Raises:
            LockTimeoutError: If the lock was not acquired in time.
            LockError: If the batch is already finished.
        """
        ...

    @abstractmethod
    async def get(self, key: bytes) -> bytes | None:
        """Read a key, seeing this batch's own buffered puts first."""
        ...

    @abstractmethod
    async def put(self, key: bytes, value: bytes) -> None:
        """Buffer a put until flush()."""
        ...

    @abstractmethod
    async def flush(self) -> None:
        """Commit all buffered puts atomically and release the lock.

        Raises:
            StoreError: If the commit failed; nothing was written.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Discard buffered puts and release the lock. Idempotent."""
        ...

    @property
    @abstractmethod
    def locked(self) -> bool:
        """True while this batch holds the store lock."""
        ...


class KeyValueStorePort(ABC):
    """Abstract protocol for the append-only key-value store.

    Note:
        This port deliberately does NOT include delete methods.
    """

    @abstractmethod
    async def get(self, key: bytes) -> bytes | None:
        """Return the latest value for key, or None if absent.

        Raises:
            StoreError: For storage-related failures.
        """
        ...

    @abstractmethod
    async def put(self, key: bytes, value: bytes) -> None:
        """Durably write value at key as a single atomic put.

        Raises:
            StoreError: For storage-related failures.
        """
        ...

    @abstractmethod
    def batch(self) -> BatchPort:
        """Open a new batch against this store."""
        ...


# Anything an attestation can be written to or read from.
WriteTarget = KeyValueStorePort | BatchPort
