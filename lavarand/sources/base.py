"""Abstract base class for all entropy sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

BYTES_PER_PIXEL = 4  # R, G, B, A


@dataclass(frozen=True)
class FrameSnapshot:
    """Immutable RGBA pixel buffer captured from an entropy surface."""

    data: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.data) != expected:
            raise ValueError(
                f"snapshot of {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}"
            )

    @classmethod
    def from_array(cls, pixels: np.ndarray) -> FrameSnapshot:
        """Build a snapshot from a ``(height, width, 4)`` uint8 array."""
        if pixels.ndim != 3 or pixels.shape[2] != BYTES_PER_PIXEL:
            raise ValueError(f"expected (h, w, 4) RGBA array, got shape {pixels.shape}")
        height, width = pixels.shape[:2]
        return cls(np.ascontiguousarray(pixels, dtype=np.uint8).tobytes(), width, height)

    def as_array(self) -> np.ndarray:
        """Read-only ``(height, width, 4)`` view of the pixel data."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, BYTES_PER_PIXEL)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"<FrameSnapshot {self.width}x{self.height} {len(self.data):,} bytes>"


class EntropySource(ABC):
    """Base class for a visual entropy source.

    Every source declares metadata and implements ``is_available`` and
    ``get_snapshot``. A source never retries internally: when it cannot
    produce a frame it returns ``None`` and the caller decides what to do.
    """

    name: str = "unnamed"
    description: str = ""
    category: str = ""
    platform_requirements: list[str] = []

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the source can produce a snapshot right now."""
        ...

    @abstractmethod
    def get_snapshot(self) -> FrameSnapshot | None:
        """Capture the current surface as RGBA bytes.

        Returns
        -------
        FrameSnapshot or None
            ``None`` when the source is unavailable (surface not sized,
            camera not streaming, camera errored).
        """
        ...

    def close(self) -> None:
        """Release any held device. Sources without devices do nothing."""

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
