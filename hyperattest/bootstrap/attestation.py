"""Bootstrap wiring for the attestation services."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from hyperattest.application.ports.signer import SignerProtocol
from hyperattest.application.ports.timestamp_authority import (
    TimestampAuthorityProtocol,
)
from hyperattest.application.services.attestation_context import AttestationContext
from hyperattest.config.attestation_config import AttestationConfig, TimestampMode
from hyperattest.domain.errors.configuration import ConfigurationError
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer
from hyperattest.infrastructure.adapters.opentimestamps_calendar import (
    OpenTimestampsCalendarClient,
)
from hyperattest.infrastructure.stubs.local_timestamp_authority import (
    LocalTimestampAuthorityStub,
)

log = structlog.get_logger()


def create_signer(config: AttestationConfig) -> SignerProtocol:
    """Build the process signer.

    Without ATTEST_SIGNING_KEY_PATH the signer is left unconfigured; reads
    still work but every write raises SigningKeyNotConfiguredError.
    """
    if config.signing_key_path is None:
        log.warning("signing_key_not_configured")
        return Ed25519Signer()
    return Ed25519Signer.from_pem_file(config.signing_key_path)


def create_timestamp_authority(config: AttestationConfig) -> TimestampAuthorityProtocol:
    """Build the configured timestamp authority."""
    if config.timestamp_mode is TimestampMode.LOCAL:
        log.warning("using_local_timestamp_authority")
        return LocalTimestampAuthorityStub()
    return OpenTimestampsCalendarClient(
        config.calendar_url, timeout_seconds=config.timestamp_timeout_seconds
    )


def create_attestation_context(
    config: AttestationConfig,
    signer: SignerProtocol | None = None,
    timestamp_authority: TimestampAuthorityProtocol | None = None,
) -> AttestationContext:
    """Wire an AttestationContext from config.

    Args:
        config: Runtime settings.
        signer: Overrides the signer built from config.
        timestamp_authority: Overrides the authority built from config.
    """
    return AttestationContext.create(
        signer or create_signer(config),
        timestamp_authority or create_timestamp_authority(config),
        lock_timeout=config.lock_timeout_seconds,
    )


def load_cid_mapping(path: Path | str | None) -> dict[str, str]:
    """Load the encrypted-archive CID to content CID mapping.

    Returns an empty mapping when no path is configured.

    Raises:
        ConfigurationError: If the file is unreadable or not a JSON object
            of strings.
    """
    if path is None:
        return {}
    try:
        mapping = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot load CID mapping {path}: {e}") from e
    if not isinstance(mapping, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in mapping.items()
    ):
        raise ConfigurationError(f"CID mapping {path} must map strings to strings")
    return mapping
