"""Dependency errors for external collaborators.

Raised by store, timestamp authority, crypter and hasher adapters. The
attestation services propagate them unchanged and never retry; retry
policy belongs to the caller.
"""

from hyperattest.domain.exceptions import AttestationError


class DependencyError(AttestationError):
    """Base exception for collaborator failures."""

    pass


class StoreError(DependencyError):
    """Raised when the key-value store fails a read, write or commit.

    Usage:
        raise StoreError("Failed to commit batch: database is locked")
    """

    pass


class TimestampAuthorityError(DependencyError):
    """Raised when a timestamp proof cannot be obtained."""

    def __init__(self, authority: str, reason: str) -> None:
        """Initialize with authority details.

        Args:
            authority: Identifier or URL of the timestamp authority.
            reason: Why the request failed.
        """
        super().__init__(f"Timestamp authority {authority} failed: {reason}")
        self.authority = authority
        self.reason = reason


class CrypterError(DependencyError):
    """Raised when the cipher cannot run (e.g. malformed key material)."""

    pass


class ContentHasherError(DependencyError):
    """Raised when a content identifier cannot be computed for a payload."""

    pass
