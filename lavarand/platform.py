"""Platform detection: discover and build entropy sources."""

from __future__ import annotations

import logging
import platform as _platform

from lavarand import config
from lavarand.errors import DeviceError
from lavarand.sources import ALL_SOURCES
from lavarand.sources.base import EntropySource
from lavarand.sources.camera import CameraSource
from lavarand.sources.lava import LavaSource

logger = logging.getLogger(__name__)

SOURCE_NAMES = [cls.name for cls in ALL_SOURCES]


def camera_present(index: int = config.CAMERA_INDEX) -> bool:
    """Briefly acquire and release the camera to see whether it works."""
    cam = CameraSource(index)
    try:
        cam.start()
    except DeviceError as e:
        logger.debug("camera %d not usable: %s", index, e)
        return False
    finally:
        cam.close()
    return True


def detect_available_sources(camera_index: int = config.CAMERA_INDEX) -> list[EntropySource]:
    """Return one instance of every source usable on this machine.

    Camera sources are returned idle; call ``start()`` before capturing.
    """
    available: list[EntropySource] = [LavaSource()]
    if camera_present(camera_index):
        available.append(CameraSource(camera_index))
    return available


def make_source(
    name: str,
    width: int = config.DEFAULT_WIDTH,
    height: int = config.DEFAULT_HEIGHT,
    camera_index: int = config.CAMERA_INDEX,
    seed: int | None = None,
) -> EntropySource:
    """Build a ready-to-use source by name. Cameras are started.

    Raises
    ------
    DeviceError
        The camera could not be acquired.
    """
    if name == LavaSource.name:
        return LavaSource(width, height, seed=seed)
    if name == CameraSource.name:
        cam = CameraSource(camera_index)
        cam.start()
        return cam
    raise ValueError(f"unknown source {name!r}; expected one of {SOURCE_NAMES}")


def platform_info() -> dict:
    """Return basic platform metadata."""
    return {
        "system": _platform.system(),
        "machine": _platform.machine(),
        "platform": _platform.platform(),
        "python": _platform.python_version(),
    }
