"""Stub implementations of ports for development and testing."""

from hyperattest.infrastructure.stubs.in_memory_store import (
    InMemoryBatch,
    InMemoryKeyValueStore,
)
from hyperattest.infrastructure.stubs.local_timestamp_authority import (
    LocalTimestampAuthorityStub,
)

__all__ = [
    "InMemoryBatch",
    "InMemoryKeyValueStore",
    "LocalTimestampAuthorityStub",
]
