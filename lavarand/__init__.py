"""
lavarand: keys from chaos.

Captures a chaotic visual surface (a simulated lava lamp or a live
camera frame), hashes it with a time nonce and formats the digest as a
256-bit hex key, a UUID v4 or a bounded integer.

Not a certified RNG: there is no entropy estimation or health testing.
"""

__version__ = "0.1.0"
__author__ = "Amenti Labs"

from lavarand.capture_log import CaptureLog, DerivationRecord
from lavarand.errors import (
    DeviceError,
    DeviceErrorKind,
    DigestUnsupported,
    LavarandError,
    SourceUnavailable,
)
from lavarand.formatting import OutputKind
from lavarand.pipeline import Derivation, KeyGenerator, derive_key
from lavarand.sources.base import EntropySource, FrameSnapshot

__all__ = [
    "CaptureLog",
    "Derivation",
    "DerivationRecord",
    "DeviceError",
    "DeviceErrorKind",
    "DigestUnsupported",
    "EntropySource",
    "FrameSnapshot",
    "KeyGenerator",
    "LavarandError",
    "OutputKind",
    "SourceUnavailable",
    "__version__",
    "derive_key",
]
