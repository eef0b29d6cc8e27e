"""Unit tests for attestation bootstrap wiring."""

import json
from pathlib import Path

import pytest

from hyperattest.bootstrap import (
    create_attestation_context,
    create_signer,
    create_timestamp_authority,
    load_cid_mapping,
)
from hyperattest.config.attestation_config import AttestationConfig, TimestampMode
from hyperattest.domain.errors.configuration import (
    ConfigurationError,
    SigningKeyNotConfiguredError,
)
from hyperattest.infrastructure.adapters.ed25519_signer import Ed25519Signer
from hyperattest.infrastructure.adapters.opentimestamps_calendar import (
    OpenTimestampsCalendarClient,
)
from hyperattest.infrastructure.stubs.local_timestamp_authority import (
    LocalTimestampAuthorityStub,
)
from hyperattest.infrastructure.stubs.in_memory_store import InMemoryKeyValueStore


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    path = tmp_path / "signing.pem"
    path.write_bytes(Ed25519Signer.generate().private_key_pem())
    return path


class TestCreateSigner:
    def test_loads_pem(self, key_file: Path) -> None:
        signer = create_signer(AttestationConfig(signing_key_path=key_file))

        assert signer.is_configured()

    def test_unconfigured_without_path(self) -> None:
        signer = create_signer(AttestationConfig())

        assert not signer.is_configured()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            create_signer(AttestationConfig(signing_key_path=tmp_path / "nope.pem"))


class TestCreateTimestampAuthority:
    def test_local(self) -> None:
        config = AttestationConfig(timestamp_mode=TimestampMode.LOCAL)

        assert isinstance(create_timestamp_authority(config), LocalTimestampAuthorityStub)

    def test_calendar(self) -> None:
        config = AttestationConfig(calendar_url="https://calendar.example/")

        authority = create_timestamp_authority(config)

        assert isinstance(authority, OpenTimestampsCalendarClient)
        assert authority.authority_id == "https://calendar.example"


class TestCreateAttestationContext:
    @pytest.mark.asyncio
    async def test_round_trip(self, key_file: Path, subject) -> None:
        config = AttestationConfig(
            signing_key_path=key_file, timestamp_mode=TimestampMode.LOCAL
        )
        context = create_attestation_context(config)
        store = InMemoryKeyValueStore()

        await context.db_put(store, subject, "filename", "site.wacz")
        record = await context.db_get(store, subject, "filename")

        assert record is not None
        assert record.value == "site.wacz"

    @pytest.mark.asyncio
    async def test_writes_need_a_key(self, subject) -> None:
        context = create_attestation_context(
            AttestationConfig(timestamp_mode=TimestampMode.LOCAL)
        )

        with pytest.raises(SigningKeyNotConfiguredError):
            await context.db_put(InMemoryKeyValueStore(), subject, "a", 1)

    def test_overrides(self, signer, timestamp_authority) -> None:
        context = create_attestation_context(
            AttestationConfig(lock_timeout_seconds=5.0),
            signer=signer,
            timestamp_authority=timestamp_authority,
        )

        assert context.signer.public_key_bytes() == signer.public_key_bytes()


class TestLoadCidMapping:
    def test_none(self) -> None:
        assert load_cid_mapping(None) == {}

    def test_valid(self, tmp_path: Path) -> None:
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps({"bafyencrypted": "bafkreicontent"}))

        assert load_cid_mapping(path) == {"bafyencrypted": "bafkreicontent"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            load_cid_mapping(tmp_path / "missing.json")

    def test_not_json(self, tmp_path: Path) -> None:
        path = tmp_path / "mapping.json"
        path.write_text("{")

        with pytest.raises(ConfigurationError):
            load_cid_mapping(path)

    @pytest.mark.parametrize("content", ['["a"]', '{"a": 1}'])
    def test_wrong_shape(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "mapping.json"
        path.write_text(content)

        with pytest.raises(ConfigurationError, match="strings to strings"):
            load_cid_mapping(path)
