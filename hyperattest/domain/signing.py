"""Attestation signing utilities.

This module provides functions for computing the signable content of an
attestation and converting signatures between bytes and base64 format.

The signable content always covers the PLAINTEXT value plus the encrypted
flag, never the ciphertext. A verifier can therefore confirm authorship and
intent of an encrypted record once it holds the decryption key, and the
signature does not change when a value is re-encrypted.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from hyperattest.domain.canonical import canonical_json
from hyperattest.domain.errors.format import RecordDecodeError
from hyperattest.domain.models.attribute_value import AttributeValue
from hyperattest.domain.models.content_identifier import ContentIdentifier

SIG_ALG_NAME: str = "Ed25519"
ED25519_SIGNATURE_LENGTH: int = 64
ED25519_PUBLIC_KEY_LENGTH: int = 32


def signable_attestation(
    subject: ContentIdentifier,
    attribute: str,
    value: AttributeValue,
    encrypted: bool,
) -> dict[str, Any]:
    """Build the plaintext attestation mapping that gets signed."""
    return {
        "attribute": attribute,
        "encrypted": encrypted,
        "subject": str(subject),
        "value": value.to_wire(),
    }


def compute_signable_content(
    subject: ContentIdentifier,
    attribute: str,
    value: AttributeValue,
    encrypted: bool,
) -> bytes:
    """Compute the bytes to be signed for an attestation.

    Args:
        subject: Content identifier the attestation is about.
        attribute: Attribute name.
        value: Plaintext value (never the ciphertext).
        encrypted: Whether the value is stored encrypted.

    Returns:
        Canonical JSON bytes of {attribute, encrypted, subject, value}.

    Example:
        >>> from hyperattest.domain.models.content_identifier import ContentIdentifier
        >>> cid = ContentIdentifier(1, 0x55, b"\\x12\\x20" + bytes(32))
        >>> content = compute_signable_content(
        ...     cid, "filename", AttributeValue.of("site.wacz"), False
        ... )
        >>> content.startswith(b'{"attribute":"filename"')
        True
    """
    return canonical_json(signable_attestation(subject, attribute, value, encrypted))


def compute_timestamp_content(signable: bytes, signature: bytes) -> bytes:
    """Compute the bytes submitted to the timestamp authority.

    The proof binds the signature and the signed plaintext attestation
    together, so it also dates the signer's assertion.
    """
    return canonical_json(
        {
            "attestation": signable.decode("utf-8"),
            "signature": signature_to_base64(signature),
        }
    )


def signature_to_base64(signature: bytes) -> str:
    """Convert raw signature bytes to base64 string for storage.

    Ed25519 signatures are 64 bytes, which produces 88 base64 characters.
    """
    return base64.b64encode(signature).decode("ascii")


def signature_from_base64(signature_b64: str) -> bytes:
    """Convert base64 signature string back to bytes.

    Raises:
        RecordDecodeError: If input is not valid base64.
    """
    try:
        return base64.b64decode(signature_b64, validate=True)
    except (binascii.Error, TypeError) as e:
        raise RecordDecodeError("Signature is not valid base64") from e
