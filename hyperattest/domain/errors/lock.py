"""Batch lock errors.

A LockError during an append is a guaranteed no-op: the batch is discarded
and the previously stored record is left untouched.
"""

from hyperattest.domain.exceptions import AttestationError


class LockError(AttestationError):
    """Base exception for batch lock failures."""

    pass


class LockTimeoutError(LockError):
    """Raised when the batch lock is not acquired within the timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        """Initialize with the timeout that elapsed.

        Args:
            timeout_seconds: Seconds waited before giving up.
        """
        super().__init__(f"Batch lock not acquired within {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class LockNotHeldError(LockError):
    """Raised when a batch operation requires the lock but it is not held.

    Also raised when a batch is used after it was flushed or closed.
    """

    pass
