"""Nonce combination and SHA-256 digest of captured frames.

A frame is hashed together with the wall-clock time so that a static
image still yields a fresh digest every millisecond. Two byte-identical
frames captured within the same millisecond produce the same digest;
that limitation is accepted rather than papered over.
"""

from __future__ import annotations

import hashlib
import time

import numpy as np

from lavarand.errors import DigestUnsupported

DIGEST_ALGORITHM = "sha256"
DIGEST_HEX_CHARS = 64


def now_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def encode_nonce(timestamp_ms: int) -> bytes:
    """Decimal ASCII rendering of the timestamp, e.g. ``b"1718000000000"``."""
    return str(int(timestamp_ms)).encode("ascii")


def combine_with_nonce(data: bytes | np.ndarray, timestamp_ms: int) -> bytes:
    """Frame bytes first, nonce appended."""
    raw = data if isinstance(data, bytes) else np.asarray(data, dtype=np.uint8).tobytes()
    return raw + encode_nonce(timestamp_ms)


def _new_hash():
    if DIGEST_ALGORITHM not in hashlib.algorithms_available:
        raise DigestUnsupported(f"{DIGEST_ALGORITHM} is not available in this interpreter")
    try:
        return hashlib.new(DIGEST_ALGORITHM)
    except ValueError as e:
        raise DigestUnsupported(str(e)) from e


def sha256_hex(data: bytes) -> str:
    """64-character lowercase hex SHA-256 of *data*. No fallback algorithm."""
    h = _new_hash()
    h.update(data)
    return h.hexdigest()


def digest_frame(data: bytes | np.ndarray, timestamp_ms: int | None = None) -> str:
    """Hash a frame together with a millisecond nonce (``now_ms()`` by default)."""
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    return sha256_hex(combine_with_nonce(data, timestamp_ms))
