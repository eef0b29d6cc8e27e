"""
Pytest configuration and shared fixtures for hyperattest tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async port mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from hyperattest.application.services.attestation_context import AttestationContext
from hyperattest.application.services.value_crypter import new_key
from hyperattest.domain.models.content_identifier import ContentIdentifier
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer
from hyperattest.infrastructure.stubs.in_memory_store import InMemoryKeyValueStore
from tests.helpers import FakeTimestampAuthority, make_cid


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from hyperattest import __version__

    return __version__


@pytest.fixture
def subject() -> ContentIdentifier:
    """A CIDv1 subject for single-subject tests."""
    return make_cid(b"site.wacz contents")


@pytest.fixture
def other_subject() -> ContentIdentifier:
    return make_cid(b"another asset")


@pytest.fixture
def signer() -> Ed25519Signer:
    """A configured Ed25519 signer with a fresh key."""
    return Ed25519Signer.generate()


@pytest.fixture
def timestamp_authority() -> FakeTimestampAuthority:
    return FakeTimestampAuthority()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    """Fresh in-memory store for each test."""
    return InMemoryKeyValueStore()


@pytest.fixture
def encryption_key() -> bytes:
    return new_key()


@pytest.fixture
def context(
    signer: Ed25519Signer, timestamp_authority: FakeTimestampAuthority
) -> AttestationContext:
    """Attestation services wired to the fake authority."""
    return AttestationContext.create(signer, timestamp_authority)
