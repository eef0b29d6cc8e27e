"""Unit tests for ArchiveImportService."""

from pathlib import Path

import pytest

from hyperattest.application.dtos.archive import ArchiveContents, ContentMetadata
from hyperattest.application.services.archive_import_service import (
    ENCRYPTION_KEY_ATTRIBUTE,
    ArchiveImportService,
)
from hyperattest.application.services.attestation_context import AttestationContext
from hyperattest.domain.errors import (
    ArchiveFormatError,
    ContentHasherError,
    InvalidContentIdentifierError,
    SigningKeyNotConfiguredError,
)
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer
from hyperattest.infrastructure.stubs.in_memory_store import InMemoryKeyValueStore
from tests.helpers import FakeContentHasher, FakeTimestampAuthority, make_cid

ASSET_BYTES = b"WARC/1.1 web archive bytes"
PARENT_ARCHIVE_CID = str(make_cid(b"encrypted parent archive"))
PARENT_CONTENT_CID = make_cid(b"parent content")


@pytest.fixture
def key_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def hasher() -> FakeContentHasher:
    return FakeContentHasher()


@pytest.fixture
def archive_file(tmp_path: Path) -> Path:
    path = tmp_path / "capture-2026.zip"
    path.write_bytes(b"PK zip bytes")
    return path


def make_archive(path: Path, metadata: dict) -> ArchiveContents:
    return ArchiveContents(
        path=path,
        asset_name="site.wacz",
        asset_data=ASSET_BYTES,
        content_metadata=metadata,
    )


@pytest.fixture
def metadata() -> dict:
    return {
        "name": "Example capture",
        "sourceId": 42,
        "extras": {"relatedAssetCid": PARENT_ARCHIVE_CID, "tool": "browsertrix"},
        "private": {"location": "Paris", "contacts": ["a@example.org"]},
    }


@pytest.fixture
def service(
    context: AttestationContext,
    store: InMemoryKeyValueStore,
    key_store: InMemoryKeyValueStore,
    hasher: FakeContentHasher,
) -> ArchiveImportService:
    return ArchiveImportService(
        context,
        store,
        key_store,
        hasher,
        {PARENT_ARCHIVE_CID: str(PARENT_CONTENT_CID)},
    )


class TestIdentity:
    @pytest.mark.asyncio
    async def test_cids_come_from_hasher(
        self,
        service: ArchiveImportService,
        hasher: FakeContentHasher,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        report = await service.import_archive(make_archive(archive_file, metadata))

        assert report.asset_cid == make_cid(ASSET_BYTES)
        assert report.archive_cid == make_cid(archive_file.read_bytes())
        assert hasher.hashed_bytes == [ASSET_BYTES]
        assert hasher.hashed_files == [archive_file]

    @pytest.mark.asyncio
    async def test_identity_attributes(
        self,
        service: ArchiveImportService,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        report = await service.import_archive(make_archive(archive_file, metadata))
        asset = report.asset_cid

        async def value(subject, attribute):
            record = await context.db_get(store, subject, attribute)
            assert record is not None
            return record.value

        assert await value(asset, "asset") == asset
        assert await value(asset, "filename") == "site.wacz"
        assert await value(asset, "zipname") == "capture-2026.zip"
        assert await value(asset, "zipcid") == report.archive_cid
        assert await value(report.archive_cid, "assetcid") == asset

    @pytest.mark.asyncio
    async def test_encryption_key_goes_to_key_store(
        self,
        service: ArchiveImportService,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        key_store: InMemoryKeyValueStore,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        report = await service.import_archive(make_archive(archive_file, metadata))

        key_record = await context.db_get(
            key_store, report.asset_cid, ENCRYPTION_KEY_ATTRIBUTE
        )
        assert key_record is not None
        assert len(key_record.value) == 32
        assert await context.db_get(store, report.asset_cid, "enckey") is None


class TestMetadata:
    @pytest.mark.asyncio
    async def test_public_and_extras_fields_written_plain(
        self,
        service: ArchiveImportService,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        report = await service.import_archive(make_archive(archive_file, metadata))

        assert report.ok
        for attribute, expected in [
            ("name", "Example capture"),
            ("sourceId", 42),
            ("tool", "browsertrix"),
            ("relatedAssetCid", PARENT_ARCHIVE_CID),
        ]:
            record = await context.db_get(store, report.asset_cid, attribute)
            assert record is not None
            assert not record.encrypted
            assert record.value == expected

    @pytest.mark.asyncio
    async def test_private_fields_encrypted_with_asset_key(
        self,
        service: ArchiveImportService,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        key_store: InMemoryKeyValueStore,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        report = await service.import_archive(make_archive(archive_file, metadata))
        key_record = await context.db_get(
            key_store, report.asset_cid, ENCRYPTION_KEY_ATTRIBUTE
        )
        assert key_record is not None

        location = await context.db_get(
            store, report.asset_cid, "location", key_record.value
        )
        contacts = await context.db_get(
            store, report.asset_cid, "contacts", key_record.value
        )

        assert location is not None and location.encrypted
        assert location.value == "Paris"
        assert contacts is not None and contacts.value == ["a@example.org"]

    @pytest.mark.asyncio
    async def test_related_asset_links_parent_and_child(
        self,
        service: ArchiveImportService,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        report = await service.import_archive(make_archive(archive_file, metadata))

        child_of = await context.db_get(store, report.asset_cid, "childOf")
        parent_of = await context.db_get(store, PARENT_CONTENT_CID, "parentOf")

        assert child_of is not None and child_of.value == [PARENT_CONTENT_CID]
        assert parent_of is not None and parent_of.value == [report.asset_cid]
        assert "childOf/parentOf" in report.written

    def test_metadata_model_splits_fields(self, metadata: dict) -> None:
        model = ContentMetadata.model_validate(metadata)

        assert model.public_fields() == {"name": "Example capture", "sourceId": 42}
        assert model.private == {
            "location": "Paris",
            "contacts": ["a@example.org"],
        }


class TestFailures:
    @pytest.mark.asyncio
    async def test_unmapped_parent_is_reported(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        key_store: InMemoryKeyValueStore,
        hasher: FakeContentHasher,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        service = ArchiveImportService(context, store, key_store, hasher)

        report = await service.import_archive(make_archive(archive_file, metadata))

        assert not report.ok
        assert [f.label for f in report.failures] == ["childOf/parentOf"]
        assert report.failures[0].error_type == "InvalidContentIdentifierError"
        assert "name" in report.written
        assert await context.db_get(store, report.asset_cid, "childOf") is None

    @pytest.mark.asyncio
    async def test_fail_fast_raises_first_failure(
        self,
        context: AttestationContext,
        store: InMemoryKeyValueStore,
        key_store: InMemoryKeyValueStore,
        hasher: FakeContentHasher,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        service = ArchiveImportService(context, store, key_store, hasher)

        with pytest.raises(InvalidContentIdentifierError):
            await service.import_archive(
                make_archive(archive_file, metadata), fail_fast=True
            )

    @pytest.mark.asyncio
    async def test_invalid_metadata_shape(
        self, service: ArchiveImportService, archive_file: Path
    ) -> None:
        with pytest.raises(ArchiveFormatError):
            await service.import_archive(
                make_archive(archive_file, {"extras": "not a mapping"})
            )

    @pytest.mark.asyncio
    async def test_hasher_failure_writes_nothing(
        self,
        service: ArchiveImportService,
        hasher: FakeContentHasher,
        store: InMemoryKeyValueStore,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        hasher.set_failure("ipfs not installed")

        with pytest.raises(ContentHasherError):
            await service.import_archive(make_archive(archive_file, metadata))

        assert store.keys() == []

    @pytest.mark.asyncio
    async def test_identity_failure_propagates(
        self,
        timestamp_authority: FakeTimestampAuthority,
        store: InMemoryKeyValueStore,
        key_store: InMemoryKeyValueStore,
        hasher: FakeContentHasher,
        archive_file: Path,
        metadata: dict,
    ) -> None:
        context = AttestationContext.create(Ed25519Signer(), timestamp_authority)
        service = ArchiveImportService(context, store, key_store, hasher)

        with pytest.raises(SigningKeyNotConfiguredError):
            await service.import_archive(make_archive(archive_file, metadata))
