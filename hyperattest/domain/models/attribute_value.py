"""Attribute value model: a tagged variant that carries its own kind.

Values are classified once, when they enter the system, as SCALAR, LIST or
STRUCTURED. The kind is stored alongside the value so that list appends
decide on the tag rather than on the runtime shape of a decoded payload.

Wire form (canonical JSON friendly):
    {"kind": "list", "value": [...]}

Nested values follow DAG-JSON conventions:
    ContentIdentifier -> {"/": "<cid string>"}
    bytes             -> {"/": {"bytes": "<base64, no padding>"}}

A mapping that itself has a "/" key is wrapped so it cannot be read back
as a link:
    {"/": ..., "a": 1} -> {"/": {"map": {"/": ..., "a": 1}}}
"""

from __future__ import annotations

import base64
import binascii
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from hyperattest.domain.errors.format import (
    InvalidContentIdentifierError,
    InvalidValueError,
)
from hyperattest.domain.models.content_identifier import ContentIdentifier

LINK_KEY = "/"
ESCAPED_MAP_KEY = "map"


class ValueKind(str, Enum):
    """Logical type of an attribute value."""

    SCALAR = "scalar"
    LIST = "list"
    STRUCTURED = "structured"


def _encode_bytes(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def _decode_bytes(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.b64decode(text + padding, validate=True)


def _freeze(raw: Any) -> Any:
    """Validate a raw Python value and convert it to an immutable form."""
    if raw is None or isinstance(raw, (bool, str, ContentIdentifier)):
        return raw
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not math.isfinite(raw):
            raise InvalidValueError(f"Non-finite float is not allowed: {raw!r}")
        return raw
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, AttributeValue):
        return raw.data
    if isinstance(raw, Mapping):
        frozen: dict[str, Any] = {}
        for key, item in raw.items():
            if not isinstance(key, str):
                raise InvalidValueError(
                    f"Mapping keys must be strings, got {type(key).__name__}"
                )
            frozen[key] = _freeze(item)
        return _FrozenMapping(frozen)
    if isinstance(raw, Sequence):
        return tuple(_freeze(item) for item in raw)
    raise InvalidValueError(f"Unsupported value type: {type(raw).__name__}")


class _FrozenMapping(dict):  # type: ignore[type-arg]
    """Read-only dict used for STRUCTURED data."""

    def _readonly(self, *args: Any, **kwargs: Any) -> None:
        raise TypeError("AttributeValue data is immutable")

    __setitem__ = _readonly  # type: ignore[assignment]
    __delitem__ = _readonly  # type: ignore[assignment]
    clear = _readonly  # type: ignore[assignment]
    pop = _readonly  # type: ignore[assignment]
    popitem = _readonly  # type: ignore[assignment]
    setdefault = _readonly  # type: ignore[assignment]
    update = _readonly  # type: ignore[assignment]

    def __hash__(self) -> int:  # type: ignore[override]
        return hash(tuple(sorted(self.items())))


def _thaw(data: Any) -> Any:
    """Convert frozen data back into plain, mutable Python values."""
    if isinstance(data, _FrozenMapping):
        return {key: _thaw(item) for key, item in data.items()}
    if isinstance(data, tuple):
        return [_thaw(item) for item in data]
    return data


def _to_wire(data: Any) -> Any:
    if isinstance(data, ContentIdentifier):
        return {LINK_KEY: str(data)}
    if isinstance(data, bytes):
        return {LINK_KEY: {"bytes": _encode_bytes(data)}}
    if isinstance(data, _FrozenMapping):
        node = {key: _to_wire(item) for key, item in data.items()}
        if LINK_KEY in node:
            return {LINK_KEY: {ESCAPED_MAP_KEY: node}}
        return node
    if isinstance(data, tuple):
        return [_to_wire(item) for item in data]
    return data


def _from_wire(node: Any) -> Any:
    if isinstance(node, dict):
        if LINK_KEY in node:
            if len(node) != 1:
                raise InvalidValueError("Link object must only contain the '/' key")
            link = node[LINK_KEY]
            if isinstance(link, str):
                try:
                    return ContentIdentifier.parse(link)
                except InvalidContentIdentifierError as e:
                    raise InvalidValueError(f"Invalid link: {link!r}") from e
            if isinstance(link, dict) and set(link) == {"bytes"}:
                try:
                    return _decode_bytes(link["bytes"])
                except (binascii.Error, TypeError) as e:
                    raise InvalidValueError("Invalid base64 bytes node") from e
            if isinstance(link, dict) and set(link) == {ESCAPED_MAP_KEY}:
                escaped = link[ESCAPED_MAP_KEY]
                if not isinstance(escaped, dict) or LINK_KEY not in escaped:
                    raise InvalidValueError(f"Invalid escaped mapping: {node!r}")
                return _FrozenMapping(
                    {key: _from_wire(item) for key, item in escaped.items()}
                )
            raise InvalidValueError(f"Unrecognised link object: {node!r}")
        return _FrozenMapping({key: _from_wire(item) for key, item in node.items()})
    if isinstance(node, list):
        return tuple(_from_wire(item) for item in node)
    if isinstance(node, float) and not math.isfinite(node):
        raise InvalidValueError(f"Non-finite float is not allowed: {node!r}")
    return node


@dataclass(frozen=True, eq=True)
class AttributeValue:
    """Immutable attribute value with an explicit kind tag.

    Construct with AttributeValue.of(raw); read back plain Python values
    with to_python().

    Attributes:
        kind: SCALAR, LIST or STRUCTURED.
        data: Frozen representation (tuples for lists, read-only dicts for
            mappings, bytes and ContentIdentifier kept as-is).
    """

    kind: ValueKind
    data: Any

    @classmethod
    def of(cls, raw: Any) -> AttributeValue:
        """Classify and freeze a raw Python value.

        Strings and bytes are scalars even though they are sequences.

        Raises:
            InvalidValueError: If the value cannot be represented.
        """
        if isinstance(raw, AttributeValue):
            return raw
        data = _freeze(raw)
        if isinstance(data, _FrozenMapping):
            return cls(kind=ValueKind.STRUCTURED, data=data)
        if isinstance(data, tuple):
            return cls(kind=ValueKind.LIST, data=data)
        return cls(kind=ValueKind.SCALAR, data=data)

    @classmethod
    def from_wire(cls, wire: Any) -> AttributeValue:
        """Rebuild a value from its wire form.

        Raises:
            InvalidValueError: If the wire form is malformed or its kind tag
                disagrees with the payload.
        """
        if not isinstance(wire, dict) or set(wire) != {"kind", "value"}:
            raise InvalidValueError("Value wire form must be {'kind', 'value'}")
        try:
            kind = ValueKind(wire["kind"])
        except ValueError as e:
            raise InvalidValueError(f"Unknown value kind: {wire['kind']!r}") from e
        value = cls.of(_from_wire(wire["value"]))
        if value.kind is not kind:
            raise InvalidValueError(
                f"Kind tag {kind.value!r} does not match payload ({value.kind.value})"
            )
        return value

    @property
    def is_list(self) -> bool:
        """True if this value is list-typed."""
        return self.kind is ValueKind.LIST

    def appended(self, item: Any) -> AttributeValue:
        """Return a new LIST value with item appended.

        Raises:
            InvalidValueError: If this value is not a list, or item is not
                representable.
        """
        if not self.is_list:
            raise InvalidValueError(f"Cannot append to a {self.kind.value} value")
        return AttributeValue(kind=ValueKind.LIST, data=self.data + (_freeze(item),))

    def to_wire(self) -> dict[str, Any]:
        """Render the tagged wire form."""
        return {"kind": self.kind.value, "value": _to_wire(self.data)}

    def to_python(self) -> Any:
        """Return a plain, mutable Python copy of the value."""
        return _thaw(self.data)
