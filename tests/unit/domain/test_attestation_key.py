"""Unit tests for store key construction."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hyperattest.domain.attestation_key import (
    decode_key,
    encode_key,
    subject_prefix,
)
from hyperattest.domain.errors import (
    InvalidAttributeError,
    InvalidContentIdentifierError,
    RecordDecodeError,
)
from tests.helpers import make_cid

subjects = st.binary(min_size=1, max_size=16).map(make_cid)
attributes = st.text(min_size=1, max_size=24)


class TestEncodeKey:
    def test_layout_is_cid_slash_attribute(self) -> None:
        cid = make_cid(b"asset")

        assert encode_key(cid, "filename") == f"{cid}/filename".encode("utf-8")

    def test_string_subject_is_canonicalized(self) -> None:
        cid = make_cid(b"asset")
        upper = "B" + str(cid)[1:].upper()

        assert encode_key(upper, "filename") == encode_key(cid, "filename")

    def test_keys_of_one_subject_share_prefix(self) -> None:
        cid = make_cid(b"asset")

        for attribute in ("asset", "filename", "childOf"):
            assert encode_key(cid, attribute).startswith(subject_prefix(cid))

    def test_malformed_subject_rejected(self) -> None:
        with pytest.raises(InvalidContentIdentifierError):
            encode_key("bafy...X", "filename")

    @pytest.mark.parametrize("attribute", ["", None, 3])
    def test_invalid_attribute_rejected(self, attribute: object) -> None:
        with pytest.raises(InvalidAttributeError):
            encode_key(make_cid(b"asset"), attribute)  # type: ignore[arg-type]


class TestDecodeKey:
    def test_attribute_may_contain_separator(self) -> None:
        cid = make_cid(b"asset")

        assert decode_key(encode_key(cid, "a/b")) == (cid, "a/b")

    @pytest.mark.parametrize("key", [b"no-separator", b"\xff\xfe/x", b"bafy/"])
    def test_foreign_keys_rejected(self, key: bytes) -> None:
        with pytest.raises(RecordDecodeError):
            decode_key(key)


class TestKeyProperties:
    @given(subjects, attributes)
    def test_decode_inverts_encode(self, subject, attribute: str) -> None:
        assert decode_key(encode_key(subject, attribute)) == (subject, attribute)

    @given(subjects, attributes, subjects, attributes)
    def test_encoding_is_injective(self, s1, a1: str, s2, a2: str) -> None:
        if (s1, a1) != (s2, a2):
            assert encode_key(s1, a1) != encode_key(s2, a2)
