"""Content identifier value object (CIDv0 / CIDv1).

Subjects of attestations are content identifiers: self-describing,
content-derived handles. This module parses and renders them; it does not
compute them from content (see ContentHasherProtocol for that).

Supported string forms:
- CIDv1 with multibase prefix "b" / "B" (base32), "z" (base58btc) or
  "f" (base16)
- CIDv0: bare base58btc multihash ("Qm...", 46 characters)

The canonical string form of a CIDv1 is lowercase base32 ("b..."), so two
encodings of the same identifier always render, and key, identically.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from hyperattest.domain.errors.format import InvalidContentIdentifierError

# Multicodec codes
CODEC_RAW: int = 0x55
CODEC_DAG_PB: int = 0x70
CODEC_DAG_CBOR: int = 0x71
HASH_SHA2_256: int = 0x12

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: index for index, char in enumerate(_BASE58_ALPHABET)}

CIDV0_STRING_LENGTH: int = 46
CIDV0_MULTIHASH_LENGTH: int = 34


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _decode_varint(data: bytes, offset: int) -> tuple[int, int]:
    """Decode an unsigned LEB128 varint.

    Returns:
        Tuple of (value, new_offset).

    Raises:
        ValueError: If the varint is truncated or longer than 9 bytes.
    """
    value = 0
    shift = 0
    for index in range(offset, min(len(data), offset + 9)):
        byte = data[index]
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, index + 1
        shift += 7
    raise ValueError("truncated or oversized varint")


def _b58decode(text: str) -> bytes:
    number = 0
    for char in text:
        if char not in _BASE58_INDEX:
            raise ValueError(f"invalid base58 character {char!r}")
        number = number * 58 + _BASE58_INDEX[char]
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    leading_zeros = len(text) - len(text.lstrip("1"))
    return b"\x00" * leading_zeros + body


def _b58encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    chars: list[str] = []
    while number:
        number, remainder = divmod(number, 58)
        chars.append(_BASE58_ALPHABET[remainder])
    leading_zeros = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading_zeros + "".join(reversed(chars))


def _b32decode(text: str) -> bytes:
    upper = text.upper()
    padding = "=" * (-len(upper) % 8)
    return base64.b32decode(upper + padding)


def _b32encode(data: bytes) -> str:
    return base64.b32encode(data).decode("ascii").rstrip("=").lower()


def _split_multihash(data: bytes, offset: int) -> tuple[bytes, int]:
    """Read one multihash starting at offset.

    Returns:
        Tuple of (multihash_bytes, end_offset).
    """
    _, after_code = _decode_varint(data, offset)
    length, digest_start = _decode_varint(data, after_code)
    end = digest_start + length
    if length == 0 or end > len(data):
        raise ValueError("multihash digest length does not match data")
    return data[offset:end], end


@dataclass(frozen=True, eq=True)
class ContentIdentifier:
    """Parsed content identifier.

    Attributes:
        version: CID version (0 or 1).
        codec: Multicodec of the addressed content (dag-pb for CIDv0).
        multihash: Full multihash bytes (hash code, length, digest).
    """

    version: int
    codec: int
    multihash: bytes

    @classmethod
    def parse(cls, text: str) -> ContentIdentifier:
        """Parse a CID from its string form.

        Args:
            text: CID string (CIDv0 "Qm..." or multibase-prefixed CIDv1).

        Returns:
            The parsed ContentIdentifier.

        Raises:
            InvalidContentIdentifierError: If the string is not a valid CID.
        """
        if isinstance(text, ContentIdentifier):
            return text
        if not isinstance(text, str) or not text:
            raise InvalidContentIdentifierError(text, "expected non-empty string")

        if len(text) == CIDV0_STRING_LENGTH and text.startswith("Qm"):
            try:
                raw = _b58decode(text)
            except ValueError as e:
                raise InvalidContentIdentifierError(text, str(e)) from e
            return cls.from_bytes(raw)

        prefix, body = text[0], text[1:]
        try:
            if prefix in ("b", "B"):
                raw = _b32decode(body)
            elif prefix == "z":
                raw = _b58decode(body)
            elif prefix == "f":
                raw = bytes.fromhex(body)
            else:
                raise InvalidContentIdentifierError(
                    text, f"unsupported multibase prefix {prefix!r}"
                )
        except (ValueError, binascii.Error) as e:
            raise InvalidContentIdentifierError(text, str(e)) from e

        cid = cls.from_bytes(raw)
        if cid.version == 0:
            raise InvalidContentIdentifierError(
                text, "CIDv0 must not carry a multibase prefix"
            )
        return cid

    @classmethod
    def from_bytes(cls, data: bytes) -> ContentIdentifier:
        """Parse a CID from its binary form.

        Args:
            data: Binary CID (a bare sha2-256 multihash for CIDv0).

        Returns:
            The parsed ContentIdentifier.

        Raises:
            InvalidContentIdentifierError: If the bytes are not a valid CID.
        """
        if not isinstance(data, (bytes, bytearray)) or not data:
            raise InvalidContentIdentifierError(data, "expected non-empty bytes")
        data = bytes(data)

        if (
            len(data) == CIDV0_MULTIHASH_LENGTH
            and data[0] == HASH_SHA2_256
            and data[1] == 0x20
        ):
            return cls(version=0, codec=CODEC_DAG_PB, multihash=data)

        try:
            version, offset = _decode_varint(data, 0)
            if version != 1:
                raise ValueError(f"unsupported CID version {version}")
            codec, offset = _decode_varint(data, offset)
            multihash, end = _split_multihash(data, offset)
        except ValueError as e:
            raise InvalidContentIdentifierError(data, str(e)) from e
        if end != len(data):
            raise InvalidContentIdentifierError(data, "trailing bytes after multihash")
        return cls(version=1, codec=codec, multihash=multihash)

    @property
    def hash_code(self) -> int:
        """Multihash function code (0x12 for sha2-256)."""
        return _decode_varint(self.multihash, 0)[0]

    @property
    def digest(self) -> bytes:
        """Raw digest bytes of the multihash."""
        _, offset = _decode_varint(self.multihash, 0)
        _, offset = _decode_varint(self.multihash, offset)
        return self.multihash[offset:]

    def to_bytes(self) -> bytes:
        """Render the binary form of this CID."""
        if self.version == 0:
            return self.multihash
        return _encode_varint(1) + _encode_varint(self.codec) + self.multihash

    def __str__(self) -> str:
        """Render the canonical string form of this CID."""
        if self.version == 0:
            return _b58encode(self.multihash)
        return "b" + _b32encode(self.to_bytes())

    def __repr__(self) -> str:
        return f"ContentIdentifier({str(self)!r})"
