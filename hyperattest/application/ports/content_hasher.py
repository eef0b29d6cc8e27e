"""Content hasher protocol - computes content identifiers for payloads.

Used by the archive importer to derive the subject CIDs of an archive and
its members. The identifier must match what the content network would
assign to the same bytes (chunking and DAG layout included), which is why
this is a port rather than a local hash.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from hyperattest.domain.models.content_identifier import ContentIdentifier


class ContentHasherProtocol(ABC):
    """Abstract interface for content identifier computation."""

    @abstractmethod
    async def hash_bytes(self, data: bytes) -> ContentIdentifier:
        """Compute the CID of an in-memory payload.

        Raises:
            ContentHasherError: If the CID could not be computed.
        """
        ...

    @abstractmethod
    async def hash_file(self, path: Path) -> ContentIdentifier:
        """Compute the CID of a file on disk.

        Raises:
            ContentHasherError: If the CID could not be computed.
        """
        ...
