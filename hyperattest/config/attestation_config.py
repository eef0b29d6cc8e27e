"""Attestation configuration.

Read once at startup from environment variables, optionally seeded from a
.env file. Command line options override individual fields.

Environment Variables:
- ATTEST_SIGNING_KEY_PATH: PEM Ed25519 private key (required for writes)
- ATTEST_TIMESTAMP_MODE: "calendar" or "local" (default: calendar)
- ATTEST_TIMESTAMP_CALENDAR_URL: OpenTimestamps calendar
  (default: https://alice.btc.calendar.opentimestamps.org)
- ATTEST_TIMESTAMP_TIMEOUT_SECONDS: Calendar request timeout (default: 10.0)
- ATTEST_LOCK_TIMEOUT_SECONDS: Max wait for a batch lock (default: unbounded)
- ATTEST_CID_MAPPING_PATH: JSON mapping encrypted-archive CID to content CID
- ATTEST_ENVIRONMENT: "production" or "development" (default: production)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from hyperattest.domain.errors.configuration import InvalidSettingError

DEFAULT_CALENDAR_URL = "https://alice.btc.calendar.opentimestamps.org"


class TimestampMode(str, Enum):
    """Which timestamp authority to use."""

    CALENDAR = "calendar"
    LOCAL = "local"


def _get_float_env(key: str, default: float | None) -> float | None:
    """Get a positive float environment variable.

    Raises:
        InvalidSettingError: If the value is set but not a positive number.
    """
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise InvalidSettingError(key, value, "a number") from None
    if parsed <= 0:
        raise InvalidSettingError(key, value, "a positive number")
    return parsed


def _get_path_env(key: str) -> Path | None:
    value = os.environ.get(key)
    return Path(value).expanduser() if value else None


@dataclass(frozen=True)
class AttestationConfig:
    """Runtime settings for the attestation services.

    Attributes:
        signing_key_path: PEM file holding the Ed25519 signing key.
        timestamp_mode: Calendar (network) or local stub authority.
        calendar_url: OpenTimestamps calendar base URL.
        timestamp_timeout_seconds: Per-request calendar timeout.
        lock_timeout_seconds: Batch lock wait limit, None waits forever.
        cid_mapping_path: JSON file used to resolve relatedAssetCid.
        environment: Logging environment ("production" renders JSON).
    """

    signing_key_path: Path | None = None
    timestamp_mode: TimestampMode = TimestampMode.CALENDAR
    calendar_url: str = DEFAULT_CALENDAR_URL
    timestamp_timeout_seconds: float = 10.0
    lock_timeout_seconds: float | None = None
    cid_mapping_path: Path | None = None
    environment: str = "production"

    @classmethod
    def from_environment(cls, env_file: Path | str | None = None) -> AttestationConfig:
        """Create config from environment variables with defaults.

        Args:
            env_file: Optional .env file loaded first. Variables already set
                in the process environment win.

        Raises:
            InvalidSettingError: If a variable holds an invalid value.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)

        mode = os.environ.get("ATTEST_TIMESTAMP_MODE", TimestampMode.CALENDAR.value)
        try:
            timestamp_mode = TimestampMode(mode.lower())
        except ValueError:
            raise InvalidSettingError(
                "ATTEST_TIMESTAMP_MODE", mode, "'calendar' or 'local'"
            ) from None

        return cls(
            signing_key_path=_get_path_env("ATTEST_SIGNING_KEY_PATH"),
            timestamp_mode=timestamp_mode,
            calendar_url=os.environ.get(
                "ATTEST_TIMESTAMP_CALENDAR_URL", DEFAULT_CALENDAR_URL
            ),
            timestamp_timeout_seconds=_get_float_env(
                "ATTEST_TIMESTAMP_TIMEOUT_SECONDS", 10.0
            ),
            lock_timeout_seconds=_get_float_env("ATTEST_LOCK_TIMEOUT_SECONDS", None),
            cid_mapping_path=_get_path_env("ATTEST_CID_MAPPING_PATH"),
            environment=os.environ.get("ATTEST_ENVIRONMENT", "production"),
        )
