"""Content hasher backed by the ipfs command line tool.

Runs "ipfs add --only-hash" so the CID matches what the network would
assign when the same bytes are added: CIDv1, sha2-256, raw leaves and
262144-byte chunks. Nothing is uploaded.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from hyperattest.application.ports.content_hasher import ContentHasherProtocol
from hyperattest.domain.errors.dependency import ContentHasherError
from hyperattest.domain.errors.format import InvalidContentIdentifierError
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.infrastructure.observability.logging import get_logger_for_service

IPFS_ADD_ARGS: tuple[str, ...] = (
    "add",
    "--only-hash=true",
    "--wrap-with-directory=false",
    "--cid-version=1",
    "--hash=sha2-256",
    "--pin=true",
    "--raw-leaves=true",
    "--chunker=size-262144",
    "--nocopy=false",
    "--fscache=false",
    "--inline=false",
    "--inline-limit=32",
    "--quieter",
)


class IpfsCliContentHasher(ContentHasherProtocol):
    """Computes CIDs by shelling out to ipfs."""

    def __init__(self, ipfs_binary: str = "ipfs") -> None:
        self._ipfs_binary = ipfs_binary
        self._log = get_logger_for_service(
            self.__class__.__name__, component="hasher", ipfs_binary=ipfs_binary
        )

    def command(self, source: str) -> list[str]:
        """Build the ipfs argv for a file path, or "-" for stdin."""
        return [self._ipfs_binary, *IPFS_ADD_ARGS, source]

    async def _run(self, argv: list[str], data: bytes | None) -> ContentIdentifier:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE if data is not None else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ContentHasherError(f"Cannot run {argv[0]}: {e}") from e

        stdout, stderr = await process.communicate(data)
        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            self._log.error(
                "ipfs_hash_failed", returncode=process.returncode, error=message
            )
            raise ContentHasherError(
                f"{argv[0]} exited with {process.returncode}: {message}"
            )

        output = stdout.decode("utf-8", errors="replace").strip()
        try:
            return ContentIdentifier.parse(output)
        except InvalidContentIdentifierError as e:
            raise ContentHasherError(f"Unexpected ipfs output: {output!r}") from e

    async def hash_bytes(self, data: bytes) -> ContentIdentifier:
        return await self._run(self.command("-"), data)

    async def hash_file(self, path: Path) -> ContentIdentifier:
        return await self._run(self.command(str(path)), None)
