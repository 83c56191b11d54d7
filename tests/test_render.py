"""Tests for the blob rasteriser."""

import numpy as np
import pytest

from lavarand import config
from lavarand.render import hex_to_rgb, render_frame

BG = (0x18, 0x18, 0x1B)


class TestHexToRgb:
    def test_parse(self):
        assert np.allclose(hex_to_rgb("#ff0000"), [1.0, 0.0, 0.0])

    def test_bad(self):
        with pytest.raises(ValueError):
            hex_to_rgb("#fff")


class TestRender:
    def test_shape_and_alpha(self):
        img = render_frame(np.empty((0, 4)), 32, 16)
        assert img.shape == (16, 32, 4)
        assert img.dtype == np.uint8
        assert np.all(img[..., 3] == 255)

    def test_background_only(self):
        img = render_frame(np.empty((0, 4)), 8, 8)
        assert tuple(img[0, 0, :3]) == BG

    def test_blob_brightens_centre(self):
        red = config.PALETTE.index("#ef4444")
        state = np.array([[50.0, 50.0, 40.0, red]])
        img = render_frame(state, 100, 100)
        centre = img[50, 50, :3].astype(int)
        corner = img[0, 0, :3].astype(int)
        assert centre[0] > corner[0] + 150
        assert tuple(corner) == BG

    def test_screen_blend_never_darkens(self):
        state = np.array([[20.0, 20.0, 50.0, 0], [30.0, 25.0, 60.0, 5]])
        one = render_frame(state[:1], 64, 64).astype(int)
        both = render_frame(state, 64, 64).astype(int)
        assert np.all(both[..., :3] >= one[..., :3] - 1)

    def test_offscreen_blob_ignored(self):
        state = np.array([[-500.0, -500.0, 60.0, 0]])
        img = render_frame(state, 16, 16)
        assert np.all(img[..., :3] == np.array(BG, dtype=np.uint8))

    def test_deterministic(self):
        state = np.array([[10.5, 7.25, 44.0, 3]])
        assert np.array_equal(render_frame(state, 40, 30), render_frame(state, 40, 30))
