"""Turn a hex digest into a key, a UUID v4 or a bounded integer."""

from __future__ import annotations

import math
import string
from enum import Enum

from lavarand import config

_HEX = frozenset(string.hexdigits)


class OutputKind(str, Enum):
    HEX = "hex"
    UUID = "uuid"
    INT = "int"


def _check_digest(digest: str, min_chars: int) -> str:
    if len(digest) < min_chars or not _HEX.issuperset(digest):
        raise ValueError(f"expected at least {min_chars} hex characters, got {digest!r}")
    return digest.lower()


def format_hex(digest: str) -> str:
    """The full digest, used directly as a 256-bit key."""
    return _check_digest(digest, 1)


def format_uuid(digest: str) -> str:
    """RFC 4122 version-4 layout filled from the first 32 digest characters.

    The version nibble is forced to ``4`` (``digest[12]`` is dropped) and
    the variant nibble's top two bits are forced to ``10``, so it is always
    one of ``8, 9, a, b``.
    """
    h = _check_digest(digest, 32)
    variant = (int(h[16], 16) & 0x3) | 0x8
    return "-".join((
        h[0:8],
        h[8:12],
        "4" + h[13:16],
        f"{variant:x}" + h[17:20],
        h[20:32],
    ))


def format_int(digest: str, lo: int = config.DEFAULT_INT_MIN, hi: int = config.DEFAULT_INT_MAX) -> int:
    """Scale the first 32 bits of the digest into ``[lo, hi]`` inclusive.

    Multiply-and-floor scaling, not rejection sampling: slightly biased
    when the range does not divide 2**32. The single input that would map
    to ``hi + 1`` (all 32 bits set) is clamped to ``hi``.
    """
    if not (0 <= lo <= hi <= config.UINT32_MAX):
        raise ValueError(f"need 0 <= min <= max <= {config.UINT32_MAX}, got min={lo} max={hi}")
    seed = int(_check_digest(digest, 8)[:8], 16)
    fraction = seed / config.UINT32_MAX
    return min(math.floor(fraction * (hi - lo + 1)) + lo, hi)


def format_output(
    digest: str,
    kind: OutputKind | str,
    int_range: tuple[int, int] | None = None,
) -> str:
    """Dispatch on *kind*; integers are returned in decimal."""
    kind = OutputKind(kind)
    if kind is OutputKind.HEX:
        return format_hex(digest)
    if kind is OutputKind.UUID:
        return format_uuid(digest)
    lo, hi = int_range or (config.DEFAULT_INT_MIN, config.DEFAULT_INT_MAX)
    return str(format_int(digest, lo, hi))
