"""Attestation writer (db_put).

Composes signing, optional encryption and timestamping into one stored
record, written with a single put. Either the complete record lands, or
nothing does.

The write performs these steps:
1. Build the plaintext attestation {subject, attribute, value, encrypted}
2. Sign the plaintext attestation
3. If an encryption key was given, replace the value with its ciphertext
   (the signature from step 2 is kept; it always covers the plaintext)
4. Obtain a timestamp proof over the signed plaintext attestation
5. Encode the record and put it at encode_key(subject, attribute)

Errors from the signer, crypter, timestamp authority and store propagate
unchanged. Nothing is retried here; retry policy belongs to the caller.
"""

from __future__ import annotations

from typing import Any

from hyperattest.application.ports.kv_store import WriteTarget
from hyperattest.application.ports.timestamp_authority import (
    TimestampAuthorityProtocol,
)
from hyperattest.application.services.attestation_signer import AttestationSigner
from hyperattest.application.services.base import LoggingMixin
from hyperattest.application.services.value_crypter import ValueCrypter
from hyperattest.domain.attestation_key import (
    encode_key,
    normalize_subject,
    validate_attribute,
)
from hyperattest.domain.models.attribute_value import AttributeValue
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.domain.models.stored_record import (
    EncryptedAttestation,
    PlainAttestation,
    StoredAttestation,
    StoredRecord,
)
from hyperattest.domain.signing import (
    compute_signable_content,
    compute_timestamp_content,
)


class AttestationWriter(LoggingMixin):
    """Writes signed, timestamped, optionally encrypted attestations.

    Attributes:
        _signer: Attestation signer (process signing identity).
        _timestamp_authority: External timestamp authority.
        _crypter: Value crypter used when an encryption key is supplied.
    """

    def __init__(
        self,
        signer: AttestationSigner,
        timestamp_authority: TimestampAuthorityProtocol,
        crypter: ValueCrypter | None = None,
    ) -> None:
        """Initialize the attestation writer.

        Args:
            signer: Attestation signer.
            timestamp_authority: Timestamp authority for proofs.
            crypter: Value crypter (defaults to AES-256-GCM ValueCrypter).
        """
        self._signer = signer
        self._timestamp_authority = timestamp_authority
        self._crypter = crypter or ValueCrypter()
        self._init_logger()

    async def put(
        self,
        target: WriteTarget,
        subject: ContentIdentifier | str,
        attribute: str,
        value: Any,
        encryption_key: bytes | None = None,
    ) -> StoredRecord:
        """Write one attestation.

        Providing an open batch instead of a store is allowed; the record
        is then buffered until the batch is flushed.

        Args:
            target: Store or open batch to write to.
            subject: Content identifier (parsed or string form).
            attribute: Attribute name.
            value: Value to attest (raw Python value or AttributeValue).
            encryption_key: 32-byte key; if given the value is stored
                encrypted.

        Returns:
            The StoredRecord that was written.

        Raises:
            FormatError: If subject, attribute or value is malformed.
            SigningKeyNotConfiguredError: If no signing key is configured.
            CrypterError: If the encryption key is malformed.
            TimestampAuthorityError: If no timestamp proof was obtained.
            StoreError: If the store rejected the write.
        """
        cid = normalize_subject(subject)
        validate_attribute(attribute)
        attribute_value = AttributeValue.of(value)
        encrypted = encryption_key is not None
        key = encode_key(cid, attribute)

        log = self._log_operation(
            "put",
            subject=str(cid),
            attribute=attribute,
            kind=attribute_value.kind.value,
            encrypted=encrypted,
        )

        # Step 1-2: sign the plaintext attestation
        signable = compute_signable_content(cid, attribute, attribute_value, encrypted)
        signature = await self._signer.sign_content(signable)

        # Step 3: swap in the ciphertext, keep the plaintext signature
        stored: StoredAttestation
        if encryption_key is not None:
            stored = EncryptedAttestation(
                subject=cid,
                attribute=attribute,
                ciphertext=self._crypter.encrypt(
                    attribute_value, encryption_key, associated_data=key
                ),
            )
        else:
            stored = PlainAttestation(
                subject=cid,
                attribute=attribute,
                value=attribute_value,
            )

        # Step 4: timestamp the signed plaintext attestation
        proof = await self._timestamp_authority.timestamp(
            compute_timestamp_content(signable, signature)
        )

        # Step 5: single atomic put
        record = StoredRecord(attestation=stored, signature=signature, timestamp=proof)
        encoded = record.to_bytes()
        await target.put(key, encoded)

        log.info(
            "attestation_written",
            record_size=len(encoded),
            timestamp_authority=proof.authority,
        )
        return record
