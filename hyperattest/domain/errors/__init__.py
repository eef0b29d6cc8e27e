"""Domain errors for hyperattest.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from AttestationError.
"""

from hyperattest.domain.errors.authentication import (
    AuthenticationError,
    DecryptionError,
    SignatureVerificationError,
    TimestampMismatchError,
)
from hyperattest.domain.errors.configuration import (
    ConfigurationError,
    InvalidSettingError,
    MissingEncryptionKeyError,
    SigningKeyNotConfiguredError,
)
from hyperattest.domain.errors.dependency import (
    ContentHasherError,
    CrypterError,
    DependencyError,
    StoreError,
    TimestampAuthorityError,
)
from hyperattest.domain.errors.format import (
    ArchiveFormatError,
    FormatError,
    InvalidAttributeError,
    InvalidContentIdentifierError,
    InvalidValueError,
    RecordDecodeError,
)
from hyperattest.domain.errors.lock import LockError, LockNotHeldError, LockTimeoutError
from hyperattest.domain.errors.type_mismatch import TypeMismatchError

__all__: list[str] = [
    "ArchiveFormatError",
    "AuthenticationError",
    "ConfigurationError",
    "ContentHasherError",
    "CrypterError",
    "DecryptionError",
    "DependencyError",
    "FormatError",
    "InvalidAttributeError",
    "InvalidContentIdentifierError",
    "InvalidSettingError",
    "InvalidValueError",
    "LockError",
    "LockNotHeldError",
    "LockTimeoutError",
    "MissingEncryptionKeyError",
    "RecordDecodeError",
    "SignatureVerificationError",
    "SigningKeyNotConfiguredError",
    "StoreError",
    "TimestampAuthorityError",
    "TimestampMismatchError",
    "TypeMismatchError",
]
