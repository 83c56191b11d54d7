"""Rasterise the blob arena into an RGBA byte surface.

Each blob is a radial gradient from its palette colour at the centre to
fully transparent at its radius, composited over a dark background with
"screen" blending so overlapping blobs glow.
"""

from __future__ import annotations

import numpy as np

from lavarand import config


def hex_to_rgb(color: str) -> np.ndarray:
    """``"#ef4444"`` -> ``array([0.937, 0.267, 0.267])``."""
    color = color.lstrip("#")
    if len(color) != 6:
        raise ValueError(f"expected #rrggbb colour, got {color!r}")
    return np.array([int(color[i:i + 2], 16) for i in (0, 2, 4)], dtype=np.float32) / 255.0


_PALETTE_RGB = np.stack([hex_to_rgb(c) for c in config.PALETTE])


def render_frame(state: np.ndarray, width: int, height: int, background: str = config.BACKGROUND) -> np.ndarray:
    """Composite blobs described by *state* into a ``(height, width, 4)`` uint8 image.

    Parameters
    ----------
    state:
        ``(n, 4)`` array of ``x, y, radius, palette_index`` as returned by
        :meth:`LavaSimulation.snapshot_state`.
    """
    canvas = np.empty((height, width, 3), dtype=np.float32)
    canvas[:] = hex_to_rgb(background)

    for x, y, radius, idx in state:
        x0, x1 = max(int(np.floor(x - radius)), 0), min(int(np.ceil(x + radius)) + 1, width)
        y0, y1 = max(int(np.floor(y - radius)), 0), min(int(np.ceil(y + radius)) + 1, height)
        if x0 >= x1 or y0 >= y1:
            continue

        ys, xs = np.mgrid[y0:y1, x0:x1].astype(np.float32)
        # Sample at pixel centres.
        dist = np.hypot(xs + 0.5 - x, ys + 0.5 - y)
        alpha = np.clip(1.0 - dist / radius, 0.0, 1.0)[..., None]

        src = _PALETTE_RGB[int(idx)] * alpha
        region = canvas[y0:y1, x0:x1]
        canvas[y0:y1, x0:x1] = 1.0 - (1.0 - region) * (1.0 - src)

    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = np.round(canvas * 255.0).astype(np.uint8)
    rgba[..., 3] = 255
    return rgba
