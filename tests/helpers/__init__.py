"""Test helpers for hyperattest tests.

Reusable fakes for dependency injection in unit tests.

Helpers:
    FakeTimestampAuthority: Controllable timestamp authority
    FakeContentHasher: Deterministic CIDv1 (raw, sha2-256) hasher
    make_cid: Build a CIDv1 for arbitrary bytes

Usage:
    from tests.helpers import FakeTimestampAuthority, make_cid
"""

from tests.helpers.fake_content_hasher import FakeContentHasher, make_cid
from tests.helpers.fake_timestamp_authority import FakeTimestampAuthority

__all__ = ["FakeContentHasher", "FakeTimestampAuthority", "make_cid"]
