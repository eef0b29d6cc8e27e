"""Atomic list appender (db_append).

Grows a list-typed attribute under concurrent writers without losing
updates. The store offers no list or transaction primitives beyond batch
locking and read-your-writes, so the whole read-decide-write sequence runs
inside one locked batch:

1. Open a batch and acquire the store-wide lock
2. Read and verify the current record through the batch
3. Absent: start from []; not a list: TypeMismatchError; list: keep it
4. Append the value and write the new list through the batch
5. Flush (commit + release)

Two appenders can therefore never both read the same prior list and each
write a list that drops the other's element. Any failure after the lock is
taken discards the batch; the previously stored record stays untouched.
"""

from __future__ import annotations

from typing import Any

from hyperattest.application.ports.kv_store import KeyValueStorePort
from hyperattest.application.services.attestation_reader import AttestationReader
from hyperattest.application.services.attestation_signer import AttestationSigner
from hyperattest.application.services.attestation_writer import AttestationWriter
from hyperattest.application.services.base import LoggingMixin
from hyperattest.application.services.locked_batch import LockedBatch
from hyperattest.domain.attestation_key import normalize_subject, validate_attribute
from hyperattest.domain.errors.type_mismatch import TypeMismatchError
from hyperattest.domain.models.attribute_value import AttributeValue
from hyperattest.domain.models.content_identifier import ContentIdentifier


class AtomicListAppender(LoggingMixin):
    """Locked read-modify-write append onto list attributes.

    Attributes:
        _writer: Writer used inside the locked batch.
        _reader: Reader used inside the locked batch.
        _signer: Signer whose public key verifies the current record.
        _lock_timeout: Seconds to wait for the batch lock (None = forever).
    """

    def __init__(
        self,
        writer: AttestationWriter,
        reader: AttestationReader,
        signer: AttestationSigner,
        lock_timeout: float | None = None,
    ) -> None:
        """Initialize the appender.

        Args:
            writer: Attestation writer.
            reader: Attestation reader.
            signer: Attestation signer (own identity; the list must have
                been written by this signer to be extended).
            lock_timeout: Seconds to wait for the batch lock.
        """
        self._writer = writer
        self._reader = reader
        self._signer = signer
        self._lock_timeout = lock_timeout
        self._init_logger()

    async def append(
        self,
        store: KeyValueStorePort,
        subject: ContentIdentifier | str,
        attribute: str,
        value: Any,
        encryption_key: bytes | None = None,
    ) -> list[Any]:
        """Append value to the list stored at (subject, attribute).

        If the attribute does not exist yet, a one-element list is created.

        Args:
            store: Store to append in (a batch is opened internally).
            subject: Content identifier (parsed or string form).
            attribute: Attribute name.
            value: Element to append.
            encryption_key: Key to decrypt the current list and encrypt
                the new one.

        Returns:
            The new list contents.

        Raises:
            TypeMismatchError: If a non-list value is stored there.
            LockError: If the batch lock could not be acquired.
            AttestationError: Any reader or writer failure, unchanged.
        """
        cid = normalize_subject(subject)
        validate_attribute(attribute)
        element = AttributeValue.of(value)
        public_key = self._signer.public_key_bytes()

        log = self._log_operation("append", subject=str(cid), attribute=attribute)

        async with LockedBatch(store, timeout=self._lock_timeout) as batch:
            current = await self._reader.get(
                batch, cid, attribute, public_key, encryption_key
            )

            if current is None:
                updated = AttributeValue.of([element])
            elif not current.attribute_value.is_list:
                log.warning(
                    "list_append_type_mismatch",
                    stored_kind=current.attribute_value.kind.value,
                )
                raise TypeMismatchError(
                    str(cid), attribute, current.attribute_value.kind.value
                )
            else:
                updated = current.attribute_value.appended(element)

            await self._writer.put(batch, cid, attribute, updated, encryption_key)
            await batch.flush()

        log.info("list_append_completed", length=len(updated.data))
        return updated.to_python()
