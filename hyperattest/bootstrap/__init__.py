"""Composition root for wiring dependencies.

Infrastructure-aware wiring lives here so application services depend
only on ports.
"""

from hyperattest.bootstrap.attestation import (
    create_attestation_context,
    create_signer,
    create_timestamp_authority,
    load_cid_mapping,
)
from hyperattest.bootstrap.logging import configure_structlog

__all__ = [
    "configure_structlog",
    "create_attestation_context",
    "create_signer",
    "create_timestamp_authority",
    "load_cid_mapping",
]
