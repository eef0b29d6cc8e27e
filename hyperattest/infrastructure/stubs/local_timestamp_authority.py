"""Local timestamp authority stub for development and testing.

Issues proofs by signing {digest, issued_at} with its own Ed25519 key.
The proofs are verifiable with verify(), but they are only as trustworthy
as this process's clock; never use this in production.
"""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Callable
from datetime import datetime, timezone

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from hyperattest.application.ports.timestamp_authority import (
    TimestampAuthorityProtocol,
)
from hyperattest.application.services.attestation_signer import verify_ed25519
from hyperattest.domain.canonical import canonical_json
from hyperattest.domain.errors.dependency import TimestampAuthorityError
from hyperattest.domain.models.timestamp_proof import TimestampProof
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalTimestampAuthorityStub(TimestampAuthorityProtocol):
    """Self-signed timestamp authority.

    Attributes:
        issued: Number of proofs issued (for assertions in tests).
    """

    def __init__(
        self,
        authority_id: str = "local-tsa",
        clock: Callable[[], datetime] | None = None,
        private_key: Ed25519PrivateKey | None = None,
    ) -> None:
        self._authority_id = authority_id
        self._clock = clock or _utcnow
        self._signer = Ed25519Signer(private_key or Ed25519PrivateKey.generate())
        self._failure: str | None = None
        self.issued = 0

    @property
    def authority_id(self) -> str:
        return self._authority_id

    def public_key_bytes(self) -> bytes:
        return self._signer.public_key_bytes()

    def set_failure(self, reason: str | None) -> None:
        """Make subsequent requests fail with reason (None to recover)."""
        self._failure = reason

    @staticmethod
    def _token_content(digest: str, issued_at: datetime) -> bytes:
        return canonical_json({"digest": digest, "issued_at": issued_at.isoformat()})

    async def timestamp(self, content: bytes) -> TimestampProof:
        # Always yield to the loop, like a remote authority would
        await asyncio.sleep(0)
        if self._failure is not None:
            raise TimestampAuthorityError(self._authority_id, self._failure)
        digest = hashlib.sha256(content).hexdigest()
        issued_at = self._clock()
        token = await self._signer.sign(self._token_content(digest, issued_at))
        self.issued += 1
        return TimestampProof(
            authority=self._authority_id,
            digest=digest,
            token=token,
            issued_at=issued_at,
        )

    def verify(self, proof: TimestampProof) -> bool:
        """Check that proof was issued by this authority."""
        if proof.authority != self._authority_id or proof.issued_at is None:
            return False
        return verify_ed25519(
            self.public_key_bytes(),
            self._token_content(proof.digest, proof.issued_at),
            proof.token,
        )
