"""Attestation reader (db_get).

Reads one record, decrypts it if needed, and refuses to return anything
that does not authenticate:
- the signature must verify for the expected signer's public key, over the
  plaintext recomputed for the REQUESTED subject and attribute (a record
  copied to another key therefore fails)
- the timestamp proof must have been issued over that signed attestation
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hyperattest.application.ports.kv_store import WriteTarget
from hyperattest.application.services.attestation_signer import verify_ed25519
from hyperattest.application.services.base import LoggingMixin
from hyperattest.application.services.value_crypter import ValueCrypter
from hyperattest.domain.attestation_key import (
    encode_key,
    normalize_subject,
    validate_attribute,
)
from hyperattest.domain.errors.authentication import (
    SignatureVerificationError,
    TimestampMismatchError,
)
from hyperattest.domain.errors.configuration import MissingEncryptionKeyError
from hyperattest.domain.models.attribute_value import AttributeValue
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.domain.models.stored_record import (
    EncryptedAttestation,
    StoredRecord,
)
from hyperattest.domain.models.timestamp_proof import TimestampProof, content_digest
from hyperattest.domain.signing import (
    compute_signable_content,
    compute_timestamp_content,
)


@dataclass(frozen=True)
class AttestationRecord:
    """A verified attestation as returned by the reader.

    Attributes:
        subject: Content identifier of the record.
        attribute: Attribute name.
        attribute_value: Decoded (and decrypted) tagged value.
        encrypted: Whether the value was stored encrypted.
        signature: Verified Ed25519 signature.
        timestamp: Timestamp proof stored with the record.
    """

    subject: ContentIdentifier
    attribute: str
    attribute_value: AttributeValue
    encrypted: bool
    signature: bytes
    timestamp: TimestampProof

    @property
    def value(self) -> Any:
        """Plain Python copy of the value."""
        return self.attribute_value.to_python()


class AttestationReader(LoggingMixin):
    """Reads and verifies attestations."""

    def __init__(self, crypter: ValueCrypter | None = None) -> None:
        """Initialize the reader.

        Args:
            crypter: Value crypter (defaults to AES-256-GCM ValueCrypter).
        """
        self._crypter = crypter or ValueCrypter()
        self._init_logger()

    async def get(
        self,
        target: WriteTarget,
        subject: ContentIdentifier | str,
        attribute: str,
        public_key: bytes,
        encryption_key: bytes | None = None,
    ) -> AttestationRecord | None:
        """Read and verify the latest record at (subject, attribute).

        Args:
            target: Store or open batch to read from.
            subject: Content identifier (parsed or string form).
            attribute: Attribute name.
            public_key: Raw 32-byte Ed25519 public key of the expected signer.
            encryption_key: Key for encrypted records.

        Returns:
            The verified record, or None if nothing is stored.

        Raises:
            FormatError: If subject or attribute is malformed, or the stored
                bytes are not a record.
            MissingEncryptionKeyError: If the record is encrypted and no key
                was given.
            DecryptionError: If the key does not decrypt the record.
            SignatureVerificationError: If the signature does not verify.
            TimestampMismatchError: If the proof covers other content.
        """
        cid = normalize_subject(subject)
        validate_attribute(attribute)
        key = encode_key(cid, attribute)

        raw = await target.get(key)
        if raw is None:
            return None

        record = StoredRecord.from_bytes(raw)
        stored = record.attestation
        log = self._log_operation(
            "get", subject=str(cid), attribute=attribute, encrypted=stored.encrypted
        )

        if isinstance(stored, EncryptedAttestation):
            if encryption_key is None:
                raise MissingEncryptionKeyError(str(cid), attribute)
            value = self._crypter.decrypt(
                stored.ciphertext, encryption_key, associated_data=key
            )
        else:
            value = stored.value

        signable = compute_signable_content(cid, attribute, value, stored.encrypted)
        if not verify_ed25519(public_key, signable, record.signature):
            log.warning("attestation_signature_invalid")
            raise SignatureVerificationError(str(cid), attribute)

        expected_digest = content_digest(
            compute_timestamp_content(signable, record.signature)
        )
        if record.timestamp.digest != expected_digest:
            log.warning("attestation_timestamp_mismatch")
            raise TimestampMismatchError(expected_digest, record.timestamp.digest)

        log.debug("attestation_read", kind=value.kind.value)
        return AttestationRecord(
            subject=cid,
            attribute=attribute,
            attribute_value=value,
            encrypted=stored.encrypted,
            signature=record.signature,
            timestamp=record.timestamp,
        )
