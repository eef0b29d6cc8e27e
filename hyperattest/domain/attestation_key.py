"""Deterministic store keys for (subject, attribute) pairs.

Key layout: UTF-8 of "<canonical cid>/<attribute>".

CID string forms never contain "/", so the first "/" always splits the
pair back apart and distinct pairs never collide. All keys of one subject
share the "<cid>/" prefix, so a range scan over a subject stays contiguous.
"""

from __future__ import annotations

from hyperattest.domain.errors.format import (
    InvalidAttributeError,
    InvalidContentIdentifierError,
    RecordDecodeError,
)
from hyperattest.domain.models.content_identifier import ContentIdentifier

KEY_SEPARATOR = "/"


def normalize_subject(subject: ContentIdentifier | str) -> ContentIdentifier:
    """Parse subject if it is given as a string.

    Raises:
        InvalidContentIdentifierError: If subject is malformed.
    """
    if isinstance(subject, ContentIdentifier):
        return subject
    return ContentIdentifier.parse(subject)


def validate_attribute(attribute: str) -> str:
    """Return attribute unchanged if it is a usable attribute name.

    Raises:
        InvalidAttributeError: If attribute is not a non-empty string.
    """
    if not isinstance(attribute, str) or not attribute:
        raise InvalidAttributeError(
            f"Attribute must be a non-empty string, got {attribute!r}"
        )
    return attribute


def encode_key(subject: ContentIdentifier | str, attribute: str) -> bytes:
    """Build the store key for a (subject, attribute) pair.

    Args:
        subject: Content identifier (parsed or string form).
        attribute: Attribute name.

    Returns:
        Key bytes.

    Raises:
        InvalidContentIdentifierError: If subject is malformed.
        InvalidAttributeError: If attribute is empty.
    """
    cid = normalize_subject(subject)
    validate_attribute(attribute)
    return f"{cid}{KEY_SEPARATOR}{attribute}".encode("utf-8")


def subject_prefix(subject: ContentIdentifier | str) -> bytes:
    """Key prefix shared by every attribute of subject."""
    return f"{normalize_subject(subject)}{KEY_SEPARATOR}".encode("utf-8")


def decode_key(key: bytes) -> tuple[ContentIdentifier, str]:
    """Split a store key back into (subject, attribute).

    Raises:
        RecordDecodeError: If key was not produced by encode_key().
    """
    try:
        text = key.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecordDecodeError("Key is not valid UTF-8") from e
    subject_text, separator, attribute = text.partition(KEY_SEPARATOR)
    if not separator or not attribute:
        raise RecordDecodeError(f"Key has no attribute part: {text!r}")
    try:
        return ContentIdentifier.parse(subject_text), attribute
    except InvalidContentIdentifierError as e:
        raise RecordDecodeError(f"Key has an invalid subject: {text!r}") from e
