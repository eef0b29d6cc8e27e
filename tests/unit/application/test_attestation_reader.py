"""Unit tests for AttestationReader (db_get)."""

import json
from dataclasses import replace

import pytest

from hyperattest.application.services.attestation_context import AttestationContext
from hyperattest.application.services.attestation_reader import AttestationReader
from hyperattest.domain.attestation_key import encode_key
from hyperattest.domain.canonical import canonical_json
from hyperattest.domain.errors import (
    DecryptionError,
    MissingEncryptionKeyError,
    RecordDecodeError,
    SignatureVerificationError,
    TimestampMismatchError,
)
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer
from hyperattest.infrastructure.stubs.in_memory_store import InMemoryKeyValueStore


@pytest.fixture
def reader() -> AttestationReader:
    return AttestationReader()


class TestRead:
    @pytest.mark.asyncio
    async def test_absent_returns_none(
        self,
        reader: AttestationReader,
        store: InMemoryKeyValueStore,
        signer: Ed25519Signer,
        subject: ContentIdentifier,
    ) -> None:
        assert (
            await reader.get(store, subject, "filename", signer.public_key_bytes())
            is None
        )

    @pytest.mark.asyncio
    async def test_reads_verified_value(
        self,
        context: AttestationContext,
        reader: AttestationReader,
        store: InMemoryKeyValueStore,
        signer: Ed25519Signer,
        subject: ContentIdentifier,
    ) -> None:
        written = await context.db_put(store, subject, "filename", "site.wacz")

        record = await reader.get(store, subject, "filename", signer.public_key_bytes())

        assert record is not None
        assert record.value == "site.wacz"
        assert not record.encrypted
        assert record.signature == written.signature
        assert record.timestamp == written.timestamp

    @pytest.mark.asyncio
    async def test_latest_version_wins(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
    ) -> None:
        await context.db_put(store, subject, "title", "first")
        await context.db_put(store, subject, "title", "second")

        record = await context.db_get(store, subject, "title")

        assert record is not None
        assert record.value == "second"
        assert len(store.history(encode_key(subject, "title"))) == 2


class TestEncrypted:
    @pytest.mark.asyncio
    async def test_decrypts_with_key(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
        encryption_key: bytes,
    ) -> None:
        await context.db_put(store, subject, "location", "Paris", encryption_key)

        record = await context.db_get(store, subject, "location", encryption_key)

        assert record is not None
        assert record.encrypted
        assert record.value == "Paris"

    @pytest.mark.asyncio
    async def test_missing_key(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
        encryption_key: bytes,
    ) -> None:
        await context.db_put(store, subject, "location", "Paris", encryption_key)

        with pytest.raises(MissingEncryptionKeyError):
            await context.db_get(store, subject, "location")

    @pytest.mark.asyncio
    async def test_wrong_key(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
        encryption_key: bytes,
    ) -> None:
        await context.db_put(store, subject, "location", "Paris", encryption_key)

        with pytest.raises(DecryptionError):
            await context.db_get(
                store, subject, "location", context.crypter.new_key()
            )


class TestTampering:
    """Anything that does not authenticate is refused."""

    @pytest.mark.asyncio
    async def test_other_signer_rejected(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
    ) -> None:
        await context.db_put(store, subject, "filename", "site.wacz")

        with pytest.raises(SignatureVerificationError):
            await context.db_get(
                store,
                subject,
                "filename",
                public_key=Ed25519Signer.generate().public_key_bytes(),
            )

    @pytest.mark.asyncio
    async def test_record_copied_to_other_key_rejected(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
    ) -> None:
        await context.db_put(store, subject, "filename", "site.wacz")
        raw = await store.get(encode_key(subject, "filename"))
        await store.put(encode_key(subject, "zipname"), raw)

        with pytest.raises(SignatureVerificationError):
            await context.db_get(store, subject, "zipname")

    @pytest.mark.asyncio
    async def test_edited_value_rejected(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
    ) -> None:
        await context.db_put(store, subject, "filename", "site.wacz")
        key = encode_key(subject, "filename")
        document = json.loads(await store.get(key))
        document["attestation"]["value"]["value"] = "evil.wacz"
        await store.put(key, canonical_json(document))

        with pytest.raises(SignatureVerificationError):
            await context.db_get(store, subject, "filename")

    @pytest.mark.asyncio
    async def test_swapped_timestamp_rejected(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
    ) -> None:
        first = await context.db_put(store, subject, "filename", "site.wacz")
        second = await context.db_put(store, subject, "zipname", "site.zip")
        forged = replace(first, timestamp=second.timestamp)
        await store.put(encode_key(subject, "filename"), forged.to_bytes())

        with pytest.raises(TimestampMismatchError):
            await context.db_get(store, subject, "filename")

    @pytest.mark.asyncio
    async def test_garbage_rejected(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        subject: ContentIdentifier,
    ) -> None:
        await store.put(encode_key(subject, "filename"), b"garbage")

        with pytest.raises(RecordDecodeError):
            await context.db_get(store, subject, "filename")
