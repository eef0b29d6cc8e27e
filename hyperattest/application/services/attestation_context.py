"""Attestation context: the explicit carrier of the process signing identity.

Instead of a module-level signing key, one AttestationContext is built at
startup and threaded into every caller. It wires the signer, timestamp
authority and crypter into the writer, reader and appender, and exposes
the three store operations under their conventional names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hyperattest.application.ports.kv_store import KeyValueStorePort, WriteTarget
from hyperattest.application.ports.signer import SignerProtocol
from hyperattest.application.ports.timestamp_authority import (
    TimestampAuthorityProtocol,
)
from hyperattest.application.services.atomic_list_appender import AtomicListAppender
from hyperattest.application.services.attestation_reader import (
    AttestationReader,
    AttestationRecord,
)
from hyperattest.application.services.attestation_signer import AttestationSigner
from hyperattest.application.services.attestation_writer import AttestationWriter
from hyperattest.application.services.value_crypter import ValueCrypter
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.domain.models.stored_record import StoredRecord


@dataclass(frozen=True)
class AttestationContext:
    """Wired attestation services sharing one signing identity."""

    signer: AttestationSigner
    writer: AttestationWriter
    reader: AttestationReader
    appender: AtomicListAppender
    crypter: ValueCrypter

    @classmethod
    def create(
        cls,
        signer: SignerProtocol,
        timestamp_authority: TimestampAuthorityProtocol,
        lock_timeout: float | None = None,
    ) -> AttestationContext:
        """Wire the services around a signer and a timestamp authority."""
        crypter = ValueCrypter()
        attestation_signer = AttestationSigner(signer)
        writer = AttestationWriter(attestation_signer, timestamp_authority, crypter)
        reader = AttestationReader(crypter)
        appender = AtomicListAppender(
            writer, reader, attestation_signer, lock_timeout=lock_timeout
        )
        return cls(
            signer=attestation_signer,
            writer=writer,
            reader=reader,
            appender=appender,
            crypter=crypter,
        )

    async def db_put(
        self,
        target: WriteTarget,
        subject: ContentIdentifier | str,
        attribute: str,
        value: Any,
        encryption_key: bytes | None = None,
    ) -> StoredRecord:
        """Write one signed, timestamped attestation (store or batch)."""
        return await self.writer.put(target, subject, attribute, value, encryption_key)

    async def db_get(
        self,
        target: WriteTarget,
        subject: ContentIdentifier | str,
        attribute: str,
        encryption_key: bytes | None = None,
        public_key: bytes | None = None,
    ) -> AttestationRecord | None:
        """Read and verify one attestation.

        Verifies against this context's own signer unless public_key is given.
        """
        if public_key is None:
            public_key = self.signer.public_key_bytes()
        return await self.reader.get(
            target, subject, attribute, public_key, encryption_key
        )

    async def db_append(
        self,
        store: KeyValueStorePort,
        subject: ContentIdentifier | str,
        attribute: str,
        value: Any,
        encryption_key: bytes | None = None,
    ) -> list[Any]:
        """Atomically append value to the list at (subject, attribute)."""
        return await self.appender.append(
            store, subject, attribute, value, encryption_key
        )
