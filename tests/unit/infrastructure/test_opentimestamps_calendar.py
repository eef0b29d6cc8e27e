"""Unit tests for OpenTimestampsCalendarClient using httpx.MockTransport."""

import hashlib

import httpx
import pytest
from structlog.testing import capture_logs

from hyperattest.domain.errors import DependencyError, TimestampAuthorityError
from hyperattest.infrastructure.adapters.opentimestamps_calendar import (
    OTS_ACCEPT,
    OpenTimestampsCalendarClient,
)

CALENDAR = "https://calendar.example.org"


def make_client(handler) -> OpenTimestampsCalendarClient:
    return OpenTimestampsCalendarClient(
        CALENDAR + "/", transport=httpx.MockTransport(handler)
    )


class TestTimestamp:
    @pytest.mark.asyncio
    async def test_posts_raw_digest(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"\x00ots-pending")

        proof = await make_client(handler).timestamp(b"signed attestation")

        digest = hashlib.sha256(b"signed attestation").digest()
        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == f"{CALENDAR}/digest"
        assert seen[0].content == digest
        assert seen[0].headers["accept"] == OTS_ACCEPT
        assert proof.digest == digest.hex()
        assert proof.token == b"\x00ots-pending"
        assert proof.authority == CALENDAR
        assert proof.issued_at is None

    def test_authority_id_strips_trailing_slash(self) -> None:
        client = make_client(lambda request: httpx.Response(200))

        assert client.authority_id == CALENDAR


class TestFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 500, 503])
    async def test_error_status(self, status: int) -> None:
        client = make_client(lambda request: httpx.Response(status, content=b"x"))

        with pytest.raises(TimestampAuthorityError, match=f"HTTP {status}"):
            await client.timestamp(b"content")

    @pytest.mark.asyncio
    async def test_empty_proof(self) -> None:
        client = make_client(lambda request: httpx.Response(200, content=b""))

        with pytest.raises(TimestampAuthorityError, match="empty proof"):
            await client.timestamp(b"content")

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DependencyError):
            await make_client(handler).timestamp(b"content")

    @pytest.mark.asyncio
    async def test_rejection_logged_with_calendar(self) -> None:
        client = make_client(lambda request: httpx.Response(503))

        with capture_logs() as logs:
            with pytest.raises(TimestampAuthorityError):
                await client.timestamp(b"content")

        rejected = [e for e in logs if e["event"] == "timestamp_request_rejected"]
        assert rejected == [
            {
                "event": "timestamp_request_rejected",
                "log_level": "error",
                "service": "OpenTimestampsCalendarClient",
                "component": "timestamp",
                "calendar": CALENDAR,
                "status_code": 503,
            }
        ]
