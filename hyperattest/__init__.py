"""
hyperattest - Signed, timestamped attestations on an append-only store

Every write binds a content identifier, an attribute name and a value to
an Ed25519 signature and an external timestamp proof, so any reader can
later verify who asserted what, when, and whether the value was encrypted
at rest.

Guarantees:
- Signatures always cover the plaintext value and the encrypted flag
- Encrypted values use authenticated encryption (AES-256-GCM)
- List attributes grow through a single locked read-modify-write
- Records are never mutated in place; later writes supersede earlier ones
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
