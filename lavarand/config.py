"""
Configuration & Constants
=========================
Central registry for the tunables shared by the simulation, the
renderer, the capture sources and the derivation pipeline.
"""

# ── simulation ──
BLOB_COUNT: int = 20
RADIUS_RANGE: tuple[float, float] = (40.0, 100.0)
MAX_HORIZONTAL_SPEED: float = 0.75
VERTICAL_JITTER: float = 1.0  # half-width of the [-1, 1) draw added to the ±1 coin flip

PALETTE: tuple[str, ...] = (
    "#ef4444",  # red
    "#f97316",  # orange
    "#eab308",  # yellow
    "#22c55e",  # green
    "#06b6d4",  # cyan
    "#3b82f6",  # blue
    "#a855f7",  # purple
    "#ec4899",  # pink
)
BACKGROUND: str = "#18181b"

# Default surface when no host window exists (CLI / monitor).
DEFAULT_WIDTH: int = 320
DEFAULT_HEIGHT: int = 240

# ── camera ──
CAMERA_INDEX: int = 0
CAMERA_IDEAL_WIDTH: int = 640
CAMERA_IDEAL_HEIGHT: int = 480
CAMERA_IDEAL_FPS: int = 30

# ── derivation ──
LOG_CAPACITY: int = 10
SEED_PREVIEW_CHARS: int = 10
DEFAULT_INT_MIN: int = 0
DEFAULT_INT_MAX: int = 1_000_000
UINT32_MAX: int = 0xFFFFFFFF
