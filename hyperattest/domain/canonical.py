"""Canonical JSON encoding.

Every byte string that is signed, timestamped, encrypted or stored goes
through canonical_json() so that a signature computed at write time can be
recomputed byte-for-byte at read time: sorted keys, no whitespace, UTF-8,
no NaN or Infinity.
"""

from __future__ import annotations

import json
from typing import Any

from hyperattest.domain.errors.format import InvalidValueError, RecordDecodeError


def canonical_json(obj: Any) -> bytes:
    """Encode obj as canonical JSON bytes.

    Raises:
        InvalidValueError: If obj holds values JSON cannot represent.
    """
    try:
        text = json.dumps(
            obj,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise InvalidValueError(f"Value is not canonically encodable: {e}") from e
    return text.encode("utf-8")


def parse_canonical_json(data: bytes) -> Any:
    """Decode JSON bytes produced by canonical_json().

    Raises:
        RecordDecodeError: If the bytes are not valid UTF-8 JSON.
    """
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordDecodeError(f"Stored bytes are not valid JSON: {e}") from e
