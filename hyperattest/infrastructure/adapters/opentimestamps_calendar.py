"""OpenTimestamps calendar client.

Submits the SHA-256 digest of the signed attestation to an OpenTimestamps
calendar server (POST <calendar>/digest, raw 32-byte body). The calendar
answers with a serialized pending timestamp that commits the digest into
its next Bitcoin anchoring round; that response is stored, untouched, as
the opaque proof token. Upgrading and verifying the proof is done with the
OpenTimestamps tooling, outside this system.
"""

from __future__ import annotations

import hashlib

import httpx

from hyperattest.application.ports.timestamp_authority import (
    TimestampAuthorityProtocol,
)
from hyperattest.domain.errors.dependency import TimestampAuthorityError
from hyperattest.domain.models.timestamp_proof import TimestampProof
from hyperattest.infrastructure.observability.logging import get_logger_for_service

DEFAULT_CALENDAR_URL = "https://alice.btc.calendar.opentimestamps.org"
OTS_ACCEPT = "application/vnd.opentimestamps.v1"


class OpenTimestampsCalendarClient(TimestampAuthorityProtocol):
    """Timestamp authority backed by an OpenTimestamps calendar.

    Usage:
        authority = OpenTimestampsCalendarClient(DEFAULT_CALENDAR_URL)
        proof = await authority.timestamp(content)
    """

    def __init__(
        self,
        calendar_url: str = DEFAULT_CALENDAR_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the calendar client.

        Args:
            calendar_url: Base URL of the calendar server.
            timeout_seconds: Request timeout.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._calendar_url = calendar_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport
        self._log = get_logger_for_service(
            self.__class__.__name__,
            component="timestamp",
            calendar=self._calendar_url,
        )

    @property
    def authority_id(self) -> str:
        return self._calendar_url

    async def timestamp(self, content: bytes) -> TimestampProof:
        """Submit the digest of content and return the calendar's proof.

        Raises:
            TimestampAuthorityError: On transport errors, non-2xx responses or
                an empty proof.
        """
        digest = hashlib.sha256(content).digest()

        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._timeout
        ) as client:
            try:
                response = await client.post(
                    f"{self._calendar_url}/digest",
                    content=digest,
                    headers={"Accept": OTS_ACCEPT},
                )
            except httpx.HTTPError as e:
                self._log.error("timestamp_request_failed", error=str(e))
                raise TimestampAuthorityError(self._calendar_url, str(e)) from e

        if response.status_code >= 300:
            self._log.error(
                "timestamp_request_rejected", status_code=response.status_code
            )
            raise TimestampAuthorityError(
                self._calendar_url, f"HTTP {response.status_code}"
            )
        if not response.content:
            raise TimestampAuthorityError(self._calendar_url, "empty proof")

        self._log.debug("timestamp_obtained", proof_size=len(response.content))
        return TimestampProof(
            authority=self._calendar_url,
            digest=digest.hex(),
            token=response.content,
        )
