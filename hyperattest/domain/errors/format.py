"""Format errors for identifiers, keys, values and stored records."""

from hyperattest.domain.exceptions import AttestationError


class FormatError(AttestationError):
    """Base exception for malformed input.

    Raised before any signing or storage work is done.
    """

    pass


class InvalidContentIdentifierError(FormatError):
    """Raised when a content identifier cannot be parsed."""

    def __init__(self, value: object, reason: str = "") -> None:
        """Initialize with the rejected value.

        Args:
            value: The string or bytes that failed to parse.
            reason: Optional detail about the failure.
        """
        message = f"Invalid content identifier: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.value = value
        self.reason = reason


class InvalidAttributeError(FormatError):
    """Raised when an attribute name is empty or not a string."""

    pass


class InvalidValueError(FormatError):
    """Raised when a value cannot be represented as an attestation value.

    Examples: NaN floats, mappings with non-string keys, unsupported types,
    or malformed link, bytes or escaped-mapping nodes on the wire.
    """

    pass


class RecordDecodeError(FormatError):
    """Raised when a stored record or key cannot be decoded."""

    pass


class ArchiveFormatError(FormatError):
    """Raised when an archive does not hold the expected members."""

    pass
