"""Configuration for hyperattest."""

from hyperattest.config.attestation_config import AttestationConfig, TimestampMode

__all__ = ["AttestationConfig", "TimestampMode"]
