"""Tests for nonce combination and digesting."""

import hashlib

import numpy as np
import pytest

from lavarand import conditioning
from lavarand.conditioning import combine_with_nonce, digest_frame, encode_nonce, sha256_hex
from lavarand.errors import DigestUnsupported

FRAME = bytes(range(256)) * 16


class TestNonce:
    def test_decimal_ascii(self):
        assert encode_nonce(1718000000123) == b"1718000000123"

    def test_frame_first_nonce_appended(self):
        combined = combine_with_nonce(b"\x01\x02", 42)
        assert combined == b"\x01\x0242"

    def test_accepts_numpy(self):
        arr = np.array([1, 2, 3], dtype=np.uint8)
        assert combine_with_nonce(arr, 7) == b"\x01\x02\x037"


class TestDigest:
    def test_length_and_alphabet(self):
        h = digest_frame(FRAME, 1)
        assert len(h) == 64
        assert set(h) <= set("0123456789abcdef")

    def test_matches_hashlib(self):
        expected = hashlib.sha256(FRAME + b"1700000000000").hexdigest()
        assert digest_frame(FRAME, 1700000000000) == expected

    def test_deterministic(self):
        assert digest_frame(FRAME, 123) == digest_frame(FRAME, 123)

    def test_nonce_sensitivity(self):
        a = bytes.fromhex(digest_frame(FRAME, 1700000000000))
        b = bytes.fromhex(digest_frame(FRAME, 1700000000001))
        assert any(x != y for x, y in zip(a, b))

    def test_frame_sensitivity(self):
        other = b"\xff" + FRAME[1:]
        assert digest_frame(FRAME, 5) != digest_frame(other, 5)

    def test_default_timestamp_is_now(self, monkeypatch):
        monkeypatch.setattr(conditioning, "now_ms", lambda: 99)
        assert digest_frame(FRAME) == digest_frame(FRAME, 99)

    def test_empty_frame(self):
        assert digest_frame(b"", 0) == hashlib.sha256(b"0").hexdigest()


class TestUnsupported:
    def test_missing_algorithm_raises(self, monkeypatch):
        monkeypatch.setattr(conditioning, "DIGEST_ALGORITHM", "not-a-real-hash")
        with pytest.raises(DigestUnsupported):
            sha256_hex(b"abc")
