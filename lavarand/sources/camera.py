"""Live camera entropy source (requires opencv-python)."""

from __future__ import annotations

import errno
import logging
import threading
from enum import Enum
from typing import Any, Callable

import numpy as np

from lavarand import config
from lavarand.errors import DeviceError, DeviceErrorKind
from lavarand.sources.base import EntropySource, FrameSnapshot

logger = logging.getLogger(__name__)

# (device index, constraints or None) -> capture object with the
# ``isOpened`` / ``read`` / ``release`` interface of ``cv2.VideoCapture``.
CaptureFactory = Callable[[int, "dict | None"], Any]


class CameraState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    ACTIVE = "active"
    ERRORED = "errored"


def opencv_capture(index: int, constraints: dict | None = None) -> Any:
    """Open a ``cv2.VideoCapture``, applying resolution/fps hints if given."""
    import cv2

    cap = cv2.VideoCapture(index)
    if constraints and cap.isOpened():
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, constraints["width"])
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, constraints["height"])
        cap.set(cv2.CAP_PROP_FPS, constraints["fps"])
    return cap


def classify_device_error(exc: BaseException) -> DeviceErrorKind:
    """Map an acquisition failure onto a :class:`DeviceErrorKind`."""
    msg = str(exc).lower()
    if isinstance(exc, PermissionError) or any(
        s in msg for s in ("permission denied", "not authorized", "not allowed")
    ):
        return DeviceErrorKind.PERMISSION_DENIED
    if getattr(exc, "errno", None) == errno.EBUSY or any(s in msg for s in ("busy", "in use")):
        return DeviceErrorKind.DEVICE_BUSY
    if isinstance(exc, FileNotFoundError) or any(
        s in msg for s in ("not found", "no device", "no camera")
    ):
        return DeviceErrorKind.DEVICE_NOT_FOUND
    return DeviceErrorKind.UNKNOWN


def bgr_to_rgba(frame: np.ndarray) -> np.ndarray:
    """Convert an OpenCV BGR (or grayscale) frame to an opaque RGBA array."""
    if frame.ndim == 2:
        frame = np.repeat(frame[..., None], 3, axis=2)
    height, width = frame.shape[:2]
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = frame[..., 2::-1]
    rgba[..., 3] = 255
    return rgba


class CameraSource(EntropySource):
    """Entropy from live camera frames.

    The device is driven through an explicit state machine::

        IDLE --start()--> REQUESTING --> ACTIVE
                                     \\-> ERRORED --retry()--> REQUESTING

    Once ACTIVE the device stays open until ``close()`` (or until a frame
    read fails, which moves the source to ERRORED and releases it).
    Snapshots are taken at the stream's native resolution.
    """

    name = "camera"
    description = "Live camera frames"
    category = "hardware"
    platform_requirements = ["opencv-python", "camera"]

    def __init__(
        self,
        index: int = config.CAMERA_INDEX,
        capture_factory: CaptureFactory | None = None,
    ) -> None:
        self.index = index
        self._factory = capture_factory or opencv_capture
        self._cap: Any = None
        self._state = CameraState.IDLE
        self.error: DeviceError | None = None
        self._lock = threading.RLock()

    @property
    def state(self) -> CameraState:
        return self._state

    # ── lifecycle ──

    def start(self) -> CameraState:
        """Acquire the camera. Only valid from IDLE; a no-op while REQUESTING or ACTIVE.

        Raises
        ------
        DeviceError
            Acquisition failed; the source is now ERRORED.
        """
        with self._lock:
            if self._state is CameraState.ERRORED:
                raise RuntimeError("camera is errored; call retry() to request it again")
            if self._state is not CameraState.IDLE:
                return self._state
            return self._request()

    def retry(self) -> CameraState:
        """Explicit recovery from ERRORED."""
        with self._lock:
            if self._state is not CameraState.ERRORED:
                return self._state
            return self._request()

    def close(self) -> None:
        with self._lock:
            self._release()
            self._state = CameraState.IDLE
            self.error = None

    def __del__(self) -> None:
        cap = getattr(self, "_cap", None)
        if cap is not None:
            cap.release()

    def _request(self) -> CameraState:
        self._state = CameraState.REQUESTING
        self.error = None
        try:
            self._cap = self._open()
            self._probe()
        except DeviceError as e:
            self._fail(e)
            raise
        except Exception as e:
            err = DeviceError(classify_device_error(e), str(e))
            self._fail(err)
            raise err from e
        self._state = CameraState.ACTIVE
        return self._state

    def _open(self) -> Any:
        constraints = {
            "width": config.CAMERA_IDEAL_WIDTH,
            "height": config.CAMERA_IDEAL_HEIGHT,
            "fps": config.CAMERA_IDEAL_FPS,
        }
        last_exc: BaseException | None = None
        # Preferred constraints first, then whatever the device defaults to.
        for attempt in (constraints, None):
            try:
                cap = self._factory(self.index, attempt)
            except ImportError as e:
                raise DeviceError(DeviceErrorKind.UNKNOWN, f"opencv-python is not installed ({e})") from e
            except Exception as e:
                logger.debug("camera %d open with %s failed: %s", self.index, attempt, e)
                last_exc = e
                continue
            if cap.isOpened():
                return cap
            cap.release()
        if last_exc is None:
            raise DeviceError(DeviceErrorKind.DEVICE_NOT_FOUND)
        kind = classify_device_error(last_exc)
        raise DeviceError(kind, str(last_exc)) from last_exc

    def _probe(self) -> None:
        """Read one frame to confirm the stream is live and log its geometry."""
        ok, frame = self._cap.read()
        if not ok or frame is None or frame.size == 0:
            raise DeviceError(DeviceErrorKind.UNKNOWN, "Video failed to load")
        height, width = frame.shape[:2]
        backend = getattr(self._cap, "getBackendName", lambda: "?")()
        logger.debug("camera %d streaming %dx%d via %s", self.index, width, height, backend)
        brightness = float(np.mean(frame))
        if brightness < 1:
            logger.warning("camera %d frame is completely black; device may not be sending data", self.index)

    def _fail(self, error: DeviceError) -> None:
        logger.debug("camera %d errored: %s (%s)", self.index, error, error.kind.value)
        self._release()
        self._state = CameraState.ERRORED
        self.error = error

    def _release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    # ── EntropySource ──

    def is_available(self) -> bool:
        return self._state is CameraState.ACTIVE

    def get_snapshot(self) -> FrameSnapshot | None:
        with self._lock:
            if self._state is not CameraState.ACTIVE:
                return None
            ok, frame = self._cap.read()
            if not ok or frame is None or frame.size == 0:
                self._fail(DeviceError(DeviceErrorKind.UNKNOWN, "camera stopped delivering frames"))
                return None
            return FrameSnapshot.from_array(bgr_to_rgba(frame))
