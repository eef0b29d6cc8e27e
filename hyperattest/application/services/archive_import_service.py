"""Archive import service.

Turns one capture archive into a set of attestations about its web archive
member (the asset):

- identity: asset, filename, zipname, zipcid, plus the reverse alias
  assetcid on the archive CID
- a fresh encryption key, stored under enckey in the separate key store
- one attestation per metadata field; extras.relatedAssetCid also links
  the asset to its parent with childOf/parentOf list appends
- private fields, encrypted with the asset's key

Identity writes run in order before anything else. Metadata writes run
concurrently and fail independently unless fail_fast is set.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any

from pydantic import ValidationError

from hyperattest.application.dtos.archive import (
    RELATED_ASSET_FIELD,
    ArchiveContents,
    ContentMetadata,
    ImportFailure,
    ImportReport,
)
from hyperattest.application.ports.content_hasher import ContentHasherProtocol
from hyperattest.application.ports.kv_store import KeyValueStorePort
from hyperattest.application.services.attestation_context import AttestationContext
from hyperattest.application.services.base import LoggingMixin
from hyperattest.domain.errors.format import (
    ArchiveFormatError,
    InvalidContentIdentifierError,
)
from hyperattest.domain.exceptions import AttestationError
from hyperattest.domain.models.content_identifier import ContentIdentifier

ENCRYPTION_KEY_ATTRIBUTE = "enckey"


class ArchiveImportService(LoggingMixin):
    """Imports capture archives into a data store and a key store."""

    def __init__(
        self,
        context: AttestationContext,
        data_store: KeyValueStorePort,
        key_store: KeyValueStorePort,
        hasher: ContentHasherProtocol,
        cid_mapping: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the importer.

        Args:
            context: Wired attestation services (signing identity).
            data_store: Store receiving the asset attestations.
            key_store: Store receiving the per-asset encryption keys.
            hasher: Computes CIDs for the asset and the archive.
            cid_mapping: Encrypted-archive CID to content CID, used to
                resolve relatedAssetCid.
        """
        self._context = context
        self._data_store = data_store
        self._key_store = key_store
        self._hasher = hasher
        self._cid_mapping = dict(cid_mapping or {})
        self._init_logger(component="import")

    def resolve_related(self, archive_cid: str) -> ContentIdentifier:
        """Map a related encrypted-archive CID to its content CID.

        Raises:
            InvalidContentIdentifierError: If the CID is not in the mapping.
        """
        content_cid = self._cid_mapping.get(archive_cid)
        if content_cid is None:
            raise InvalidContentIdentifierError(archive_cid, "not in CID mapping")
        return ContentIdentifier.parse(content_cid)

    async def _link_parent(
        self, asset_cid: ContentIdentifier, related: Any
    ) -> None:
        parent = self.resolve_related(str(related))
        await self._context.db_append(self._data_store, asset_cid, "childOf", parent)
        await self._context.db_append(self._data_store, parent, "parentOf", asset_cid)

    def _field_writes(
        self,
        asset_cid: ContentIdentifier,
        metadata: ContentMetadata,
        encryption_key: bytes,
    ) -> list[tuple[str, Awaitable[Any]]]:
        put = self._context.db_put
        store = self._data_store
        writes: list[tuple[str, Awaitable[Any]]] = []

        for name, value in metadata.extras.items():
            if name == RELATED_ASSET_FIELD:
                writes.append(("childOf/parentOf", self._link_parent(asset_cid, value)))
            writes.append((name, put(store, asset_cid, name, value)))

        for name, value in metadata.private.items():
            writes.append((name, put(store, asset_cid, name, value, encryption_key)))

        for name, value in metadata.public_fields().items():
            writes.append((name, put(store, asset_cid, name, value)))

        return writes

    async def import_archive(
        self, archive: ArchiveContents, fail_fast: bool = False
    ) -> ImportReport:
        """Attest everything known about an archive.

        Args:
            archive: Members read from the archive file.
            fail_fast: Cancel outstanding field writes and re-raise on the
                first failure instead of collecting failures in the report.

        Returns:
            ImportReport listing written and failed attributes.

        Raises:
            AttestationError: If an identity write fails, or any write
                fails while fail_fast is set.
        """
        try:
            metadata = ContentMetadata.model_validate(archive.content_metadata)
        except ValidationError as e:
            raise ArchiveFormatError(f"Invalid contentMetadata: {e}") from e
        asset_cid = await self._hasher.hash_bytes(archive.asset_data)
        archive_cid = await self._hasher.hash_file(archive.path)

        log = self._log_operation(
            "import_archive",
            asset_cid=str(asset_cid),
            archive_cid=str(archive_cid),
        )
        log.info("archive_import_started", archive=archive.path.name)

        report = ImportReport(asset_cid=asset_cid, archive_cid=archive_cid)
        put = self._context.db_put
        store = self._data_store

        await put(store, asset_cid, "asset", asset_cid)
        await put(store, asset_cid, "filename", archive.asset_name)
        await put(store, asset_cid, "zipname", archive.path.name)
        await put(store, asset_cid, "zipcid", archive_cid)
        await put(store, archive_cid, "assetcid", asset_cid)
        report.written.extend(["asset", "filename", "zipname", "zipcid", "assetcid"])

        encryption_key = self._context.crypter.new_key()
        await put(self._key_store, asset_cid, ENCRYPTION_KEY_ATTRIBUTE, encryption_key)
        report.written.append(ENCRYPTION_KEY_ATTRIBUTE)

        writes = self._field_writes(asset_cid, metadata, encryption_key)
        labels = [label for label, _ in writes]

        if fail_fast:
            try:
                async with asyncio.TaskGroup() as group:
                    for _, write in writes:
                        group.create_task(write)
            except ExceptionGroup as eg:
                first = eg.exceptions[0]
                if not isinstance(first, AttestationError):
                    raise
                log.error("archive_import_aborted", error_type=type(first).__name__)
                raise first from None
            report.written.extend(labels)
        else:
            results = await asyncio.gather(
                *(write for _, write in writes), return_exceptions=True
            )
            for label, result in zip(labels, results):
                if isinstance(result, AttestationError):
                    log.warning(
                        "archive_field_failed",
                        attribute=label,
                        error_type=type(result).__name__,
                    )
                    report.failures.append(
                        ImportFailure(label, type(result).__name__, str(result))
                    )
                elif isinstance(result, BaseException):
                    raise result
                else:
                    report.written.append(label)

        log.info(
            "archive_import_completed",
            written=len(report.written),
            failed=len(report.failures),
        )
        return report
