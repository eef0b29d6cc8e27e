"""Value encryption with AES-256-GCM.

Encryption is value-scoped: each attribute write supplies its own key.
Key storage is the caller's business; the importer stores each subject's
key as an attestation in a separate key store.

Ciphertext format:
    [nonce (12 bytes)] [ciphertext + GCM tag (16 bytes)]

The plaintext is the canonical JSON wire form of the AttributeValue, so the
value's kind survives encryption. Callers may bind associated data (the
writer binds the store key) so a ciphertext copied to another record fails
authentication instead of decrypting.
"""

from __future__ import annotations

import secrets
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from hyperattest.domain.canonical import canonical_json, parse_canonical_json
from hyperattest.domain.errors.authentication import DecryptionError
from hyperattest.domain.errors.dependency import CrypterError
from hyperattest.domain.errors.format import FormatError
from hyperattest.domain.models.attribute_value import AttributeValue

KEY_SIZE: int = 32
NONCE_SIZE: int = 12
TAG_SIZE: int = 16


def new_key() -> bytes:
    """Generate a new random 256-bit encryption key."""
    return AESGCM.generate_key(bit_length=KEY_SIZE * 8)


class ValueCrypter:
    """Encrypts and decrypts attribute values with AES-256-GCM."""

    @staticmethod
    def new_key() -> bytes:
        """Generate a new random 256-bit encryption key."""
        return new_key()

    @staticmethod
    def _cipher(key: bytes) -> AESGCM:
        if not isinstance(key, (bytes, bytearray)) or len(key) != KEY_SIZE:
            size = len(key) if isinstance(key, (bytes, bytearray)) else type(key).__name__
            raise CrypterError(f"Encryption key must be {KEY_SIZE} bytes, got {size}")
        return AESGCM(bytes(key))

    def encrypt(
        self,
        value: Any,
        key: bytes,
        associated_data: bytes = b"",
    ) -> bytes:
        """Encrypt a value.

        Args:
            value: Raw Python value or AttributeValue.
            key: 32-byte encryption key.
            associated_data: Optional data authenticated but not encrypted.

        Returns:
            nonce || ciphertext || tag

        Raises:
            CrypterError: If the key is malformed.
            InvalidValueError: If the value cannot be represented.
        """
        cipher = self._cipher(key)
        plaintext = canonical_json(AttributeValue.of(value).to_wire())
        nonce = secrets.token_bytes(NONCE_SIZE)
        return nonce + cipher.encrypt(nonce, plaintext, associated_data or None)

    def decrypt(
        self,
        ciphertext: bytes,
        key: bytes,
        associated_data: bytes = b"",
    ) -> AttributeValue:
        """Decrypt a value produced by encrypt().

        Raises:
            DecryptionError: If the key is wrong, the associated data differs,
                or the ciphertext was tampered with or truncated.
            CrypterError: If the key is malformed.
        """
        cipher = self._cipher(key)
        if len(ciphertext) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionError("Ciphertext is too short")
        nonce, sealed = ciphertext[:NONCE_SIZE], ciphertext[NONCE_SIZE:]
        try:
            plaintext = cipher.decrypt(nonce, sealed, associated_data or None)
        except InvalidTag as e:
            raise DecryptionError() from e
        try:
            return AttributeValue.from_wire(parse_canonical_json(plaintext))
        except FormatError as e:
            raise DecryptionError("Decrypted payload is not a valid value") from e
