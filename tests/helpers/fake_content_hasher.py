"""FakeContentHasher - deterministic CIDs without the ipfs binary.

Produces CIDv1 (raw codec, sha2-256) over the whole payload. That equals
what ipfs computes for single-chunk payloads with raw leaves, which is all
the tests need.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from hyperattest.application.ports.content_hasher import ContentHasherProtocol
from hyperattest.domain.errors.dependency import ContentHasherError
from hyperattest.domain.models.content_identifier import (
    CODEC_RAW,
    HASH_SHA2_256,
    ContentIdentifier,
)


def make_cid(data: bytes | str) -> ContentIdentifier:
    """CIDv1 (raw, sha2-256) of data."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    digest = hashlib.sha256(data).digest()
    return ContentIdentifier(
        version=1,
        codec=CODEC_RAW,
        multihash=bytes([HASH_SHA2_256, len(digest)]) + digest,
    )


class FakeContentHasher(ContentHasherProtocol):
    """Hashes in-process and records what it was asked to hash."""

    def __init__(self) -> None:
        self.hashed_bytes: list[bytes] = []
        self.hashed_files: list[Path] = []
        self._failure: str | None = None

    def set_failure(self, reason: str | None) -> None:
        self._failure = reason

    async def hash_bytes(self, data: bytes) -> ContentIdentifier:
        if self._failure is not None:
            raise ContentHasherError(self._failure)
        self.hashed_bytes.append(data)
        return make_cid(data)

    async def hash_file(self, path: Path) -> ContentIdentifier:
        if self._failure is not None:
            raise ContentHasherError(self._failure)
        self.hashed_files.append(Path(path))
        return make_cid(Path(path).read_bytes())
