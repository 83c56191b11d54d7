"""Tests for the blob simulation."""

import threading
import time

import numpy as np
import pytest

from lavarand import config
from lavarand.simulation import Blob, LavaSimulation, SimulationLoop, spawn_blob


def _sim(w=320, h=240, seed=7):
    sim = LavaSimulation(seed=seed)
    sim.resize(w, h)
    return sim


class TestSpawn:
    def test_ranges(self):
        rng = np.random.default_rng(0)
        for _ in range(500):
            b = spawn_blob(rng, 320, 240)
            assert 0 <= b.x < 320
            assert 0 <= b.y < 240
            assert -0.75 <= b.vx <= 0.75
            assert -2.0 <= b.vy < 2.0
            assert b.vy != 0.0
            assert 40 <= b.radius < 100
            assert b.color in config.PALETTE

    def test_radius_immutable(self):
        b = Blob(0, 0, 1, 1, 50, "#ef4444")
        with pytest.raises(AttributeError):
            b.radius = 10

    def test_both_vertical_directions(self):
        rng = np.random.default_rng(1)
        signs = {np.sign(spawn_blob(rng, 10, 10).vy) for _ in range(200)}
        assert signs == {-1.0, 1.0}


class TestResize:
    def test_creates_twenty_blobs(self):
        assert len(_sim().blobs) == 20

    def test_unsized(self):
        sim = LavaSimulation()
        assert not sim.sized
        assert sim.blobs == ()

    def test_resize_keeps_blobs(self):
        sim = _sim()
        before = sim.blobs
        sim.resize(640, 480)
        assert sim.size == (640, 480)
        assert all(a is b for a, b in zip(before, sim.blobs))

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            LavaSimulation().resize(0, 10)

    def test_seed_reproducible(self):
        a = [(b.x, b.y, b.vx, b.vy) for b in _sim(seed=3).blobs]
        b = [(b.x, b.y, b.vx, b.vy) for b in _sim(seed=3).blobs]
        assert a == b


class TestStep:
    def test_moves_by_velocity(self):
        sim = _sim()
        blob = sim.blobs[0]
        blob.x, blob.y, blob.vx, blob.vy = 100.0, 100.0, 0.5, -1.0
        sim.step()
        assert blob.x == pytest.approx(100.5)
        assert blob.y == pytest.approx(99.0)
        assert sim.ticks == 1

    def test_horizontal_wrap_left(self):
        sim = _sim()
        blob = sim.blobs[0]
        blob.x, blob.vx = -blob.radius, -1.0
        sim.step()
        assert blob.x == 320 + blob.radius
        assert blob.vx == -1.0

    def test_horizontal_wrap_right(self):
        sim = _sim()
        blob = sim.blobs[0]
        blob.x, blob.vx = 320 + blob.radius, 1.0
        sim.step()
        assert blob.x == -blob.radius

    def test_top_exit_reappears_bottom_moving_up(self):
        sim = _sim()
        blob = sim.blobs[0]
        blob.y, blob.vy = -blob.radius, -1.2
        sim.step()
        assert blob.y == 240 + blob.radius
        assert blob.vy == pytest.approx(-1.2)

    def test_bottom_exit_reappears_top_moving_down(self):
        sim = _sim()
        blob = sim.blobs[0]
        blob.y, blob.vy = 240 + blob.radius, 0.8
        sim.step()
        assert blob.y == -blob.radius
        assert blob.vy == pytest.approx(0.8)

    def test_vertical_sign_normalised(self):
        sim = _sim()
        blob = sim.blobs[0]
        # Pushed past the top while moving down (e.g. after a resize).
        blob.y, blob.vy = -blob.radius - 5, 1.0
        sim.step()
        assert blob.y == 240 + blob.radius
        assert blob.vy == -1.0

    def test_bounded_forever(self):
        sim = _sim(seed=11)
        for _ in range(3000):
            sim.step()
            for b in sim.blobs:
                assert -b.radius <= b.x <= 320 + b.radius
                assert -b.radius <= b.y <= 240 + b.radius

    def test_bounded_after_shrink(self):
        sim = _sim(640, 480)
        sim.resize(50, 50)
        sim.step()
        for b in sim.blobs:
            assert -b.radius <= b.x <= 50 + b.radius
            assert -b.radius <= b.y <= 50 + b.radius

    def test_snapshot_state(self):
        sim = _sim()
        state = sim.snapshot_state()
        assert state.shape == (20, 4)
        assert state[0, 2] == sim.blobs[0].radius
        assert config.PALETTE[int(state[0, 3])] == sim.blobs[0].color


class TestLoop:
    def test_tick_calls_frame_hook(self):
        frames = []
        loop = SimulationLoop(_sim(), on_frame=frames.append)
        loop.tick()
        loop.tick()
        assert len(frames) == 2
        assert loop.simulation.ticks == 2

    def test_start_and_cancel(self):
        sim = _sim()
        loop = SimulationLoop(sim, fps=500)
        loop.start()
        deadline = time.monotonic() + 5
        while sim.ticks < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
        loop.cancel()
        assert not loop.running
        stopped_at = sim.ticks
        time.sleep(0.05)
        assert sim.ticks == stopped_at
        assert stopped_at >= 3

    def test_cancel_timeout_keeps_thread(self):
        entered, release = threading.Event(), threading.Event()

        def slow_frame(sim):
            entered.set()
            release.wait(5)

        loop = SimulationLoop(_sim(), on_frame=slow_frame, fps=500)
        loop.start()
        assert entered.wait(5)
        first = loop._thread
        loop.cancel(timeout=0.05)
        assert loop.running
        loop.start()
        assert loop._thread is first
        release.set()
        loop.cancel()
        assert not loop.running
        assert loop._thread is None

    def test_rejects_bad_fps(self):
        with pytest.raises(ValueError):
            SimulationLoop(_sim(), fps=0)

    def test_step_is_atomic_under_concurrency(self):
        sim = _sim()
        loop = SimulationLoop(sim, fps=1000)
        loop.start()
        try:
            for _ in range(50):
                state = sim.snapshot_state()
                radii = state[:, 2]
                assert np.all((state[:, 0] >= -radii) & (state[:, 0] <= 320 + radii))
        finally:
            loop.cancel()
