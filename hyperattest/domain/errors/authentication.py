"""Authentication errors.

Raised when a ciphertext or a signature does not authenticate. These are
never swallowed: returning a plausible-looking value from a forged or
mis-keyed record would defeat the point of the store.
"""

from hyperattest.domain.exceptions import AttestationError


class AuthenticationError(AttestationError):
    """Base exception for authentication failures."""

    pass


class DecryptionError(AuthenticationError):
    """Raised when decryption fails (wrong key, tampered or truncated data)."""

    def __init__(self, message: str = "Ciphertext failed authentication") -> None:
        """Initialize with default message."""
        super().__init__(message)


class SignatureVerificationError(AuthenticationError):
    """Raised when a stored signature does not verify for the expected signer."""

    def __init__(self, subject: str = "", attribute: str = "") -> None:
        """Initialize with the record coordinates.

        Args:
            subject: Content identifier of the record.
            attribute: Attribute name of the record.
        """
        if subject and attribute:
            message = f"Signature verification failed for {subject}/{attribute}"
        else:
            message = "Signature verification failed"
        super().__init__(message)
        self.subject = subject
        self.attribute = attribute


class TimestampMismatchError(AuthenticationError):
    """Raised when a timestamp proof was issued over different content."""

    def __init__(self, expected_digest: str, actual_digest: str) -> None:
        """Initialize with both digests.

        Args:
            expected_digest: Digest recomputed from the stored record.
            actual_digest: Digest carried by the timestamp proof.
        """
        super().__init__(
            f"Timestamp proof digest mismatch: expected {expected_digest}, "
            f"got {actual_digest}"
        )
        self.expected_digest = expected_digest
        self.actual_digest = actual_digest
