"""Lava-lamp blob simulation.

A fixed arena of blobs drifts across a surface. Horizontally the surface
is a torus; vertically a blob that leaves one edge reappears at the other
with its vertical velocity pointed away from the edge it just crossed.
Velocities are per-tick deltas, so ``step`` may be called at any rate.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

import numpy as np

from lavarand import config

logger = logging.getLogger(__name__)


class Blob:
    """One chaotic particle. ``radius`` and ``color`` are fixed at creation."""

    __slots__ = ("x", "y", "vx", "vy", "_radius", "_color")

    def __init__(self, x: float, y: float, vx: float, vy: float, radius: float, color: str) -> None:
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self._radius = radius
        self._color = color

    @property
    def radius(self) -> float:
        return self._radius

    @property
    def color(self) -> str:
        return self._color

    def __repr__(self) -> str:
        return (
            f"<Blob x={self.x:.1f} y={self.y:.1f} vx={self.vx:+.2f} "
            f"vy={self.vy:+.2f} r={self._radius:.1f} {self._color}>"
        )


def spawn_blob(rng: np.random.Generator, width: float, height: float) -> Blob:
    """Create one blob with a random position, velocity, size and colour."""
    vy = 0.0
    while vy == 0.0:
        # ±1 from a fair coin, plus a draw in [-1, 1); zero is re-rolled.
        direction = -1.0 if rng.random() > 0.5 else 1.0
        vy = (rng.random() - 0.5) * 2 * config.VERTICAL_JITTER + direction
    lo, hi = config.RADIUS_RANGE
    return Blob(
        x=float(rng.random() * width),
        y=float(rng.random() * height),
        vx=float((rng.random() - 0.5) * 2 * config.MAX_HORIZONTAL_SPEED),
        vy=float(vy),
        radius=float(lo + rng.random() * (hi - lo)),
        color=config.PALETTE[int(rng.integers(len(config.PALETTE)))],
    )


class LavaSimulation:
    """Owns the blob arena and advances it one tick at a time.

    Thread-safe: ``step``, ``resize`` and ``snapshot_state`` serialise on
    an internal lock so a reader never observes a half-applied tick.

    Usage::

        sim = LavaSimulation(seed=1)
        sim.resize(640, 480)
        sim.step()
    """

    def __init__(self, blob_count: int = config.BLOB_COUNT, seed: int | None = None) -> None:
        self.blob_count = blob_count
        self._rng = np.random.default_rng(seed)
        self._blobs: list[Blob] = []
        self._width = 0
        self._height = 0
        self._ticks = 0
        self._lock = threading.Lock()

    # ── surface ──

    @property
    def sized(self) -> bool:
        return self._width > 0 and self._height > 0

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def ticks(self) -> int:
        return self._ticks

    @property
    def blobs(self) -> tuple[Blob, ...]:
        return tuple(self._blobs)

    def resize(self, width: int, height: int) -> None:
        """Set the surface size. Blobs are created on the first sizing only."""
        if width <= 0 or height <= 0:
            raise ValueError(f"surface must be non-empty, got {width}x{height}")
        with self._lock:
            self._width = int(width)
            self._height = int(height)
            if not self._blobs:
                self._blobs = [
                    spawn_blob(self._rng, self._width, self._height)
                    for _ in range(self.blob_count)
                ]
                logger.debug("spawned %d blobs on %dx%d surface", len(self._blobs), width, height)

    # ── physics ──

    def step(self) -> None:
        """Advance every blob by one tick."""
        with self._lock:
            w, h = self._width, self._height
            for blob in self._blobs:
                blob.x += blob.vx
                blob.y += blob.vy

                r = blob.radius
                if blob.x < -r:
                    blob.x = w + r
                if blob.x > w + r:
                    blob.x = -r

                if blob.y < -r:
                    blob.y = h + r
                    blob.vy = -abs(blob.vy)
                if blob.y > h + r:
                    blob.y = -r
                    blob.vy = abs(blob.vy)
            self._ticks += 1

    def snapshot_state(self) -> np.ndarray:
        """Return an ``(n, 4)`` float array of ``x, y, radius, palette_index``."""
        with self._lock:
            state = np.empty((len(self._blobs), 4), dtype=np.float64)
            for i, blob in enumerate(self._blobs):
                state[i] = (blob.x, blob.y, blob.radius, config.PALETTE.index(blob.color))
        return state


class SimulationLoop:
    """Cooperative frame loop driving a :class:`LavaSimulation`.

    Each frame runs one ``step`` and then calls *on_frame* (typically the
    renderer). ``cancel`` stops scheduling further frames; a frame that is
    already running completes, so no tick is ever left half-applied.
    """

    def __init__(
        self,
        simulation: LavaSimulation,
        on_frame: Callable[[LavaSimulation], None] | None = None,
        fps: float = 60.0,
    ) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.simulation = simulation
        self.on_frame = on_frame
        self.interval = 1.0 / fps
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> None:
        """Run exactly one frame in the calling thread."""
        self.simulation.step()
        if self.on_frame is not None:
            self.on_frame(self.simulation)

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="lava-loop", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop.is_set():
            t0 = time.monotonic()
            self.tick()
            self._stop.wait(max(0.0, self.interval - (time.monotonic() - t0)))

    def cancel(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("lava loop still running %.1fs after cancel", timeout)
                return
            self._thread = None
