"""Data transfer objects for the application layer."""

from hyperattest.application.dtos.archive import (
    ArchiveContents,
    ContentMetadata,
    ImportFailure,
    ImportReport,
)

__all__ = ["ArchiveContents", "ContentMetadata", "ImportFailure", "ImportReport"]
