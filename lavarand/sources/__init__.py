"""Entropy source implementations."""

from lavarand.sources.base import EntropySource, FrameSnapshot
from lavarand.sources.camera import CameraSource, CameraState
from lavarand.sources.lava import LavaSource

ALL_SOURCES: list[type[EntropySource]] = [
    LavaSource,
    CameraSource,
]

__all__ = [
    "ALL_SOURCES",
    "CameraSource",
    "CameraState",
    "EntropySource",
    "FrameSnapshot",
    "LavaSource",
]
