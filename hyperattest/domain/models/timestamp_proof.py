"""Timestamp proof value object.

A timestamp proof is opaque evidence from an external authority that some
content existed at or before a point in time. This system only records it
and checks that it was issued over the right digest; verifying the proof
itself belongs to the authority's own tooling.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from hyperattest.domain.errors.format import RecordDecodeError


def content_digest(content: bytes) -> str:
    """SHA-256 hex digest of the content submitted for timestamping."""
    return hashlib.sha256(content).hexdigest()


@dataclass(frozen=True, eq=True)
class TimestampProof:
    """Proof returned by a timestamp authority.

    Attributes:
        authority: Identifier of the issuing authority (URL or name).
        digest: SHA-256 hex digest of the timestamped content.
        token: Opaque proof bytes as returned by the authority.
        issued_at: Time asserted by the authority, if it reports one.
    """

    authority: str
    digest: str
    token: bytes
    issued_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON form stored with the record."""
        return {
            "authority": self.authority,
            "digest": self.digest,
            "issued_at": self.issued_at.isoformat() if self.issued_at else None,
            "token": base64.b64encode(self.token).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, data: Any) -> TimestampProof:
        """Rebuild a proof from its stored JSON form.

        Raises:
            RecordDecodeError: If fields are missing or malformed.
        """
        try:
            issued_at = data.get("issued_at")
            return cls(
                authority=str(data["authority"]),
                digest=str(data["digest"]),
                token=base64.b64decode(data["token"], validate=True),
                issued_at=datetime.fromisoformat(issued_at) if issued_at else None,
            )
        except (AttributeError, KeyError, TypeError, ValueError, binascii.Error) as e:
            raise RecordDecodeError(f"Malformed timestamp proof: {e}") from e
