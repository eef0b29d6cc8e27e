"""Base exception classes for the hyperattest domain layer."""


class AttestationError(Exception):
    """Base exception for all hyperattest errors.

    All domain-specific exceptions MUST inherit from this class so callers
    driving bulk imports can catch one type per attribute write.

    Families (see hyperattest.domain.errors):
    - ConfigurationError
    - FormatError
    - TypeMismatchError
    - AuthenticationError
    - DependencyError
    - LockError
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
