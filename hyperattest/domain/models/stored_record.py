"""Stored record model.

The unit actually written to the store for one (subject, attribute) key.
The attestation part is a tagged union: either the plaintext value or the
ciphertext, never both. The signature always covers the plaintext form
(see hyperattest.domain.signing), so it is identical for both variants.

Stored layout (canonical JSON):
    {
        "attestation": {"attribute", "encrypted": false, "subject", "value"}
                     | {"attribute", "ciphertext", "encrypted": true, "subject"},
        "signature": "<base64>",
        "timestamp": {"authority", "digest", "issued_at", "token"}
    }
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any

from hyperattest.domain.canonical import canonical_json, parse_canonical_json
from hyperattest.domain.errors.format import (
    FormatError,
    InvalidAttributeError,
    RecordDecodeError,
)
from hyperattest.domain.models.attribute_value import AttributeValue
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.domain.models.timestamp_proof import TimestampProof
from hyperattest.domain.signing import signature_from_base64, signature_to_base64


@dataclass(frozen=True, eq=True)
class PlainAttestation:
    """Attestation stored with its plaintext value."""

    subject: ContentIdentifier
    attribute: str
    value: AttributeValue

    encrypted = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "attribute": self.attribute,
            "encrypted": False,
            "subject": str(self.subject),
            "value": self.value.to_wire(),
        }


@dataclass(frozen=True, eq=True)
class EncryptedAttestation:
    """Attestation stored with an encrypted value."""

    subject: ContentIdentifier
    attribute: str
    ciphertext: bytes

    encrypted = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "attribute": self.attribute,
            "ciphertext": base64.b64encode(self.ciphertext).decode("ascii"),
            "encrypted": True,
            "subject": str(self.subject),
        }


StoredAttestation = PlainAttestation | EncryptedAttestation


def _attestation_from_dict(data: Any) -> StoredAttestation:
    if not isinstance(data, dict):
        raise RecordDecodeError("Stored attestation must be an object")
    try:
        subject = ContentIdentifier.parse(data["subject"])
        attribute = data["attribute"]
        if not isinstance(attribute, str) or not attribute:
            raise InvalidAttributeError(f"Invalid stored attribute: {attribute!r}")
        encrypted = data["encrypted"]
        if encrypted is True:
            return EncryptedAttestation(
                subject=subject,
                attribute=attribute,
                ciphertext=base64.b64decode(data["ciphertext"], validate=True),
            )
        if encrypted is False:
            return PlainAttestation(
                subject=subject,
                attribute=attribute,
                value=AttributeValue.from_wire(data["value"]),
            )
        raise RecordDecodeError(f"Invalid encrypted flag: {encrypted!r}")
    except (KeyError, TypeError, binascii.Error) as e:
        raise RecordDecodeError(f"Malformed stored attestation: {e}") from e
    except RecordDecodeError:
        raise
    except FormatError as e:
        raise RecordDecodeError(f"Malformed stored attestation: {e}") from e


@dataclass(frozen=True, eq=True)
class StoredRecord:
    """Encoded unit written at encode_key(subject, attribute).

    Attributes:
        attestation: PlainAttestation or EncryptedAttestation.
        signature: Ed25519 signature over the plaintext signable content.
        timestamp: Proof over the signed attestation.
    """

    attestation: StoredAttestation
    signature: bytes
    timestamp: TimestampProof

    @property
    def encrypted(self) -> bool:
        return self.attestation.encrypted

    def to_bytes(self) -> bytes:
        """Encode the record as canonical JSON bytes."""
        return canonical_json(
            {
                "attestation": self.attestation.to_dict(),
                "signature": signature_to_base64(self.signature),
                "timestamp": self.timestamp.to_dict(),
            }
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> StoredRecord:
        """Decode a record written by to_bytes().

        Raises:
            RecordDecodeError: If the bytes are not a well-formed record.
        """
        document = parse_canonical_json(data)
        if not isinstance(document, dict):
            raise RecordDecodeError("Stored record must be an object")
        try:
            return cls(
                attestation=_attestation_from_dict(document["attestation"]),
                signature=signature_from_base64(document["signature"]),
                timestamp=TimestampProof.from_dict(document["timestamp"]),
            )
        except KeyError as e:
            raise RecordDecodeError(f"Stored record is missing {e}") from e
