"""Exceptions raised by the capture and derivation pipeline."""

from __future__ import annotations

from enum import Enum


class LavarandError(Exception):
    """Base class for all lavarand errors."""


class SourceUnavailable(LavarandError):
    """The entropy source could not produce a snapshot right now.

    Non-fatal: nothing was hashed and nothing was logged. Retrying is up
    to the caller.
    """

    def __init__(self, source_name: str, reason: str = "no snapshot available") -> None:
        super().__init__(f"{source_name}: {reason}")
        self.source_name = source_name
        self.reason = reason


class DeviceErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    DEVICE_NOT_FOUND = "device_not_found"
    DEVICE_BUSY = "device_busy"
    UNKNOWN = "unknown"


_DEVICE_MESSAGES = {
    DeviceErrorKind.PERMISSION_DENIED: (
        "Permission Denied. Allow camera access for this application in "
        "your system privacy settings."
    ),
    DeviceErrorKind.DEVICE_NOT_FOUND: "No camera device found.",
    DeviceErrorKind.DEVICE_BUSY: "Camera is in use by another app.",
}


class DeviceError(LavarandError):
    """Camera acquisition failed.

    Recoverable only through an explicit retry on the camera source.
    """

    def __init__(self, kind: DeviceErrorKind, detail: str = "") -> None:
        message = _DEVICE_MESSAGES.get(kind) or detail or "Unknown camera error."
        super().__init__(message)
        self.kind = kind
        self.detail = detail


class DigestUnsupported(LavarandError):
    """The SHA-256 primitive is missing from this interpreter's hashlib."""
