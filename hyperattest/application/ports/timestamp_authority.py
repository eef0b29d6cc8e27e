"""Timestamp authority protocol - interface for external timestamp proofs.

A timestamp authority receives the signed attestation and returns an
opaque, later-verifiable proof that the content existed at or before the
time of the request. Obtaining a proof is always a suspension point: it is
an external service call.

Failures MUST surface as TimestampAuthorityError and propagate as write
failures; no proof means no record.
"""

from abc import ABC, abstractmethod

from hyperattest.domain.models.timestamp_proof import TimestampProof


class TimestampAuthorityProtocol(ABC):
    """Abstract interface for timestamp authorities.

    For production:
        Use OpenTimestampsCalendarClient from infrastructure/adapters/

    For development and testing:
        Use LocalTimestampAuthorityStub from infrastructure/stubs/
    """

    @abstractmethod
    async def timestamp(self, content: bytes) -> TimestampProof:
        """Obtain a proof over content.

        Implementations timestamp the SHA-256 digest of content and record
        that digest in the returned proof.

        Raises:
            TimestampAuthorityError: If the authority could not issue a proof.
        """
        ...

    @property
    @abstractmethod
    def authority_id(self) -> str:
        """Identifier recorded in every proof issued by this authority."""
        ...
