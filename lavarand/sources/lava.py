"""Simulated lava-lamp entropy source."""

from __future__ import annotations

import threading

from lavarand import config
from lavarand.render import render_frame
from lavarand.simulation import LavaSimulation, SimulationLoop
from lavarand.sources.base import EntropySource, FrameSnapshot


class LavaSource(EntropySource):
    """Entropy from a chaotic blob simulation rendered to an RGBA surface.

    The surface is re-rendered once per animation frame; ``get_snapshot``
    reads back whatever frame was rendered last. Available as soon as the
    surface has been sized.

    Usage::

        src = LavaSource(640, 480)
        with src.animate():
            ...
            snap = src.get_snapshot()
    """

    name = "lava"
    description = "Rendered lava-lamp blob simulation"
    category = "simulated"
    platform_requirements: list[str] = []

    def __init__(
        self,
        width: int | None = config.DEFAULT_WIDTH,
        height: int | None = config.DEFAULT_HEIGHT,
        simulation: LavaSimulation | None = None,
        seed: int | None = None,
    ) -> None:
        self.simulation = simulation or LavaSimulation(seed=seed)
        self._frame: FrameSnapshot | None = None
        self._frame_lock = threading.Lock()
        if width and height:
            self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        self.simulation.resize(width, height)
        self.render()

    def render(self, simulation: LavaSimulation | None = None) -> FrameSnapshot | None:
        """Rasterise the current blob state and publish it as the latest frame."""
        sim = simulation or self.simulation
        if not sim.sized:
            return None
        width, height = sim.size
        frame = FrameSnapshot.from_array(render_frame(sim.snapshot_state(), width, height))
        with self._frame_lock:
            self._frame = frame
        return frame

    def frame_loop(self, fps: float = 60.0) -> SimulationLoop:
        """A loop that steps the simulation and re-renders every frame."""
        return SimulationLoop(self.simulation, on_frame=self.render, fps=fps)

    def animate(self, fps: float = 60.0) -> _Animation:
        return _Animation(self.frame_loop(fps))

    def is_available(self) -> bool:
        return self.simulation.sized

    def get_snapshot(self) -> FrameSnapshot | None:
        if not self.simulation.sized:
            return None
        with self._frame_lock:
            frame = self._frame
        if frame is None:
            frame = self.render()
        return frame


class _Animation:
    """Context manager that runs a frame loop for the duration of a block."""

    def __init__(self, loop: SimulationLoop) -> None:
        self.loop = loop

    def __enter__(self) -> SimulationLoop:
        self.loop.start()
        return self.loop

    def __exit__(self, *exc) -> None:
        self.loop.cancel()
