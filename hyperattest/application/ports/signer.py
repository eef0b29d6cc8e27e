"""Signer protocol definition.

Defines the abstract interface for the process signing identity. The
software adapter keeps an Ed25519 key in memory; a hardware-backed adapter
can implement the same protocol without touching the services.
"""

from abc import ABC, abstractmethod


class SignerProtocol(ABC):
    """Abstract protocol for signing operations.

    One signer identity per process lifetime. Implementations must produce
    Ed25519 signatures so any reader can verify them from the raw 32-byte
    public key alone.
    """

    @abstractmethod
    async def sign(self, content: bytes) -> bytes:
        """Sign content and return the raw 64-byte signature.

        Raises:
            SigningKeyNotConfiguredError: If no key is configured.
        """
        ...

    @abstractmethod
    def public_key_bytes(self) -> bytes:
        """Return the raw 32-byte public key of the signing identity.

        Raises:
            SigningKeyNotConfiguredError: If no key is configured.
        """
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True if a signing key is available."""
        ...
