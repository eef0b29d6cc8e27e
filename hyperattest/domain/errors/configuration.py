"""Configuration errors.

These are programmer or deployment mistakes, not retryable conditions.
"""

from hyperattest.domain.exceptions import AttestationError


class ConfigurationError(AttestationError):
    """Base exception for configuration failures."""

    pass


class SigningKeyNotConfiguredError(ConfigurationError):
    """Raised when an attestation is signed before a signing key is set.

    The signing key must be configured once at startup, before any write.
    """

    def __init__(self, message: str = "No signing key configured") -> None:
        """Initialize with default message for a missing signing key."""
        super().__init__(message)


class MissingEncryptionKeyError(ConfigurationError):
    """Raised when an encrypted record is read without an encryption key.

    An encrypted record always has a key for its subject; not supplying it
    is a caller error.
    """

    def __init__(self, subject: str = "", attribute: str = "") -> None:
        """Initialize with the record coordinates.

        Args:
            subject: Content identifier of the record.
            attribute: Attribute name of the record.
        """
        if subject and attribute:
            message = f"Record {subject}/{attribute} is encrypted but no key was given"
        else:
            message = "Encrypted record requires an encryption key"
        super().__init__(message)
        self.subject = subject
        self.attribute = attribute


class InvalidSettingError(ConfigurationError):
    """Raised when an environment setting cannot be parsed."""

    def __init__(self, name: str, value: str, expected: str) -> None:
        """Initialize with setting details.

        Args:
            name: Environment variable name.
            value: Raw value that failed to parse.
            expected: Description of the expected format.
        """
        super().__init__(f"Invalid value for {name}: {value!r} (expected {expected})")
        self.name = name
        self.value = value
