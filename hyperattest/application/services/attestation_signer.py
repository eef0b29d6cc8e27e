"""Attestation signer.

All attestation signing MUST go through this service so that the signed
bytes are always produced by compute_signable_content() and can be
recomputed independently at read time.

The signing identity is configured once, before any write, and read-only
afterwards. It is carried by this object (threaded through
AttestationContext) rather than a module global. Swapping the key while
writes are in flight is the caller's responsibility and is not guarded.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from hyperattest.application.ports.signer import SignerProtocol
from hyperattest.application.services.base import LoggingMixin
from hyperattest.domain.errors.configuration import SigningKeyNotConfiguredError
from hyperattest.domain.models.attribute_value import AttributeValue
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.domain.signing import (
    ED25519_PUBLIC_KEY_LENGTH,
    ED25519_SIGNATURE_LENGTH,
    compute_signable_content,
)


def verify_ed25519(public_key: bytes, content: bytes, signature: bytes) -> bool:
    """Verify an Ed25519 signature over content.

    Returns:
        True if the signature is valid, False otherwise (including
        malformed keys or signatures).
    """
    if (
        len(public_key) != ED25519_PUBLIC_KEY_LENGTH
        or len(signature) != ED25519_SIGNATURE_LENGTH
    ):
        return False
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, content)
    except (InvalidSignature, ValueError):
        return False
    return True


class AttestationSigner(LoggingMixin):
    """Signs and verifies attestation payloads.

    Attributes:
        _signer: Signer port holding the process signing identity.
    """

    def __init__(self, signer: SignerProtocol) -> None:
        """Initialize the attestation signer.

        Args:
            signer: Signer port implementation (may still be unconfigured;
                signing then fails with SigningKeyNotConfiguredError).
        """
        self._signer = signer
        self._init_logger()

    @property
    def signer(self) -> SignerProtocol:
        return self._signer

    def public_key_bytes(self) -> bytes:
        """Raw 32-byte public key of the signing identity.

        Raises:
            SigningKeyNotConfiguredError: If no key is configured.
        """
        if not self._signer.is_configured():
            raise SigningKeyNotConfiguredError()
        return self._signer.public_key_bytes()

    async def sign_content(self, signable: bytes) -> bytes:
        """Sign precomputed signable content.

        Raises:
            SigningKeyNotConfiguredError: If no key is configured.
        """
        if not self._signer.is_configured():
            self._log_operation("sign").error("signing_key_not_configured")
            raise SigningKeyNotConfiguredError()
        return await self._signer.sign(signable)

    async def sign_attestation(
        self,
        subject: ContentIdentifier,
        attribute: str,
        value: AttributeValue,
        encrypted: bool,
    ) -> bytes:
        """Sign the plaintext attestation.

        Returns:
            Raw 64-byte Ed25519 signature.

        Raises:
            SigningKeyNotConfiguredError: If no key is configured.
        """
        return await self.sign_content(
            compute_signable_content(subject, attribute, value, encrypted)
        )

    @staticmethod
    def verify_attestation(
        public_key: bytes,
        subject: ContentIdentifier,
        attribute: str,
        value: AttributeValue,
        encrypted: bool,
        signature: bytes,
    ) -> bool:
        """Verify a signature over the plaintext attestation."""
        return verify_ed25519(
            public_key,
            compute_signable_content(subject, attribute, value, encrypted),
            signature,
        )
