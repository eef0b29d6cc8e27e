"""Archive import DTOs.

ArchiveContents is what an archive reader hands to the importer; the
importer validates its metadata into ContentMetadata and returns an
ImportReport describing every attribute write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hyperattest.domain.models.content_identifier import ContentIdentifier

RELATED_ASSET_FIELD = "relatedAssetCid"


@dataclass(frozen=True)
class ArchiveContents:
    """Members extracted from one archive.

    Attributes:
        path: Archive file on disk (hashed as a whole for the zip CID).
        asset_name: Member name of the web archive (the asset).
        asset_data: Bytes of the web archive member.
        content_metadata: The "contentMetadata" object of the meta-content file.
        recorder_metadata: Parsed meta-recorder file (not attested).
    """

    path: Path
    asset_name: str
    asset_data: bytes
    content_metadata: dict[str, Any]
    recorder_metadata: dict[str, Any] = field(default_factory=dict)


class ContentMetadata(BaseModel):
    """Validated contentMetadata object.

    "extras" and "private" are nested mappings with special handling; every
    other top-level field is attested as-is.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    extras: dict[str, Any] = Field(default_factory=dict)
    private: dict[str, Any] = Field(default_factory=dict)

    def public_fields(self) -> dict[str, Any]:
        """Top-level fields other than extras and private."""
        return dict(self.model_extra or {})


@dataclass(frozen=True)
class ImportFailure:
    """One attribute write that failed."""

    label: str
    error_type: str
    message: str


@dataclass
class ImportReport:
    """Outcome of one archive import.

    Attributes:
        asset_cid: CID of the web archive member (the subject).
        archive_cid: CID of the whole archive file.
        written: Labels of the writes that succeeded.
        failures: Writes that failed, with their error.
    """

    asset_cid: ContentIdentifier
    archive_cid: ContentIdentifier
    written: list[str] = field(default_factory=list)
    failures: list[ImportFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
