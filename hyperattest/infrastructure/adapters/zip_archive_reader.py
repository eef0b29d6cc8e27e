"""Reads capture archives (zip) for import.

An archive must contain at least three members, among them:
- "*-meta-content.json": JSON with a "contentMetadata" object
- "*-meta-recorder.json": JSON recorder metadata
- "*.wacz": the web archive itself (the asset)

Only the location of these members and the contentMetadata object are
interpreted here.
"""

from __future__ import annotations

import json
import zipfile
from pathlib import Path
from typing import Any

from hyperattest.application.dtos.archive import ArchiveContents
from hyperattest.domain.errors.format import ArchiveFormatError

META_CONTENT_SUFFIX = "-meta-content.json"
META_RECORDER_SUFFIX = "-meta-recorder.json"
ASSET_SUFFIX = ".wacz"
MINIMUM_MEMBERS = 3


def _load_json(archive: zipfile.ZipFile, name: str) -> Any:
    try:
        return json.loads(archive.read(name).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ArchiveFormatError(f"Member {name} is not valid JSON: {e}") from e


def read_archive(path: Path | str) -> ArchiveContents:
    """Extract the members needed for import.

    Raises:
        ArchiveFormatError: If the file is not a zip or members are missing.
    """
    path = Path(path)
    try:
        with zipfile.ZipFile(path) as archive:
            names = archive.namelist()
            if len(names) < MINIMUM_MEMBERS:
                raise ArchiveFormatError(
                    f"Archive must have at least {MINIMUM_MEMBERS} files, has {len(names)}"
                )

            meta_content = meta_recorder = asset = None
            for name in names:
                if name.endswith(META_CONTENT_SUFFIX):
                    meta_content = name
                elif name.endswith(META_RECORDER_SUFFIX):
                    meta_recorder = name
                elif name.endswith(ASSET_SUFFIX):
                    asset = name

            if meta_content is None or meta_recorder is None or asset is None:
                raise ArchiveFormatError(
                    "Archive must contain *-meta-content.json, "
                    "*-meta-recorder.json and *.wacz"
                )

            content = _load_json(archive, meta_content)
            recorder = _load_json(archive, meta_recorder)
            asset_data = archive.read(asset)
    except zipfile.BadZipFile as e:
        raise ArchiveFormatError(f"{path} is not a zip archive") from e
    except OSError as e:
        raise ArchiveFormatError(f"Cannot read {path}: {e}") from e

    if not isinstance(content, dict) or not isinstance(
        content.get("contentMetadata"), dict
    ):
        raise ArchiveFormatError(f"{meta_content} has no contentMetadata object")

    return ArchiveContents(
        path=path,
        asset_name=asset,
        asset_data=asset_data,
        content_metadata=content["contentMetadata"],
        recorder_metadata=recorder if isinstance(recorder, dict) else {},
    )
