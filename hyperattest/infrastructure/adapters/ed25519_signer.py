"""Software Ed25519 signer.

Keeps the process signing key in memory. Keys are loaded from a PEM file
(PKCS#8, optionally password protected) or generated for development.
"""

from __future__ import annotations

from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from hyperattest.application.ports.signer import SignerProtocol
from hyperattest.domain.errors.configuration import (
    ConfigurationError,
    SigningKeyNotConfiguredError,
)


def load_signing_key_from_pem(
    path: Path | str, password: bytes | None = None
) -> Ed25519PrivateKey:
    """Load an Ed25519 private key from a PEM file.

    Raises:
        ConfigurationError: If the file is missing, unreadable, or not an
            Ed25519 private key.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Cannot read signing key {path}: {e}") from e
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Cannot parse signing key {path}: {e}") from e
    if not isinstance(key, Ed25519PrivateKey):
        raise ConfigurationError(
            f"Signing key {path} is {type(key).__name__}, expected Ed25519"
        )
    return key


def signing_key_to_pem(key: Ed25519PrivateKey) -> bytes:
    """Serialize a private key as unencrypted PKCS#8 PEM."""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


class Ed25519Signer(SignerProtocol):
    """In-memory Ed25519 signing identity.

    Configure once at startup with set_signing_key() (or the constructor);
    the key is read-only for the rest of the process lifetime.
    """

    def __init__(self, private_key: Ed25519PrivateKey | None = None) -> None:
        self._private_key = private_key
        self._public_key_bytes = (
            self._raw_public_key(private_key) if private_key else None
        )

    @staticmethod
    def _raw_public_key(private_key: Ed25519PrivateKey) -> bytes:
        return private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    @classmethod
    def generate(cls) -> Ed25519Signer:
        """Create a signer with a freshly generated key."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_pem_file(
        cls, path: Path | str, password: bytes | None = None
    ) -> Ed25519Signer:
        """Create a signer from a PEM private key file."""
        return cls(load_signing_key_from_pem(path, password))

    def set_signing_key(self, private_key: Ed25519PrivateKey | bytes) -> None:
        """Configure the signing key.

        Accepts an Ed25519PrivateKey or its 32 raw private bytes. Call once
        before any write; changing it while writes are in flight is the
        caller's responsibility.
        """
        if isinstance(private_key, (bytes, bytearray)):
            try:
                private_key = Ed25519PrivateKey.from_private_bytes(bytes(private_key))
            except ValueError as e:
                raise ConfigurationError(f"Invalid Ed25519 private key: {e}") from e
        self._private_key = private_key
        self._public_key_bytes = self._raw_public_key(private_key)

    def is_configured(self) -> bool:
        return self._private_key is not None

    async def sign(self, content: bytes) -> bytes:
        if self._private_key is None:
            raise SigningKeyNotConfiguredError()
        return self._private_key.sign(content)

    def public_key_bytes(self) -> bytes:
        if self._public_key_bytes is None:
            raise SigningKeyNotConfiguredError()
        return self._public_key_bytes

    def private_key_pem(self) -> bytes:
        """Export the private key as PEM (for key generation tooling)."""
        if self._private_key is None:
            raise SigningKeyNotConfiguredError()
        return signing_key_to_pem(self._private_key)
