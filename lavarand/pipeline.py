"""Capture → nonce → digest → format → log.

Architecture:
1. Ask the active entropy source for a frame snapshot
2. Append the millisecond wall-clock nonce to the frame bytes
3. SHA-256 the combination
4. Format the digest as a hex key, a UUID v4 or a bounded integer
5. Record the result in the bounded capture log

The stages of one derivation never reorder. Concurrent derivations share
nothing except the log, whose insert is atomic.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from lavarand import config
from lavarand.capture_log import CaptureLog, DerivationRecord, seed_preview
from lavarand.conditioning import digest_frame, now_ms
from lavarand.errors import SourceUnavailable
from lavarand.formatting import OutputKind, format_output
from lavarand.sources.base import EntropySource, FrameSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Derivation:
    digest_hex: str
    output: str


def _check_range(kind: OutputKind, int_range: tuple[int, int] | None) -> tuple[int, int] | None:
    if kind is not OutputKind.INT:
        return None
    lo, hi = int_range or (config.DEFAULT_INT_MIN, config.DEFAULT_INT_MAX)
    if not (0 <= lo <= hi <= config.UINT32_MAX):
        raise ValueError(f"need 0 <= min <= max <= {config.UINT32_MAX}, got min={lo} max={hi}")
    return lo, hi


def derive_key(
    snapshot: bytes | FrameSnapshot,
    kind: OutputKind | str,
    int_range: tuple[int, int] | None = None,
    timestamp_ms: int | None = None,
) -> Derivation:
    """Hash *snapshot* with a time nonce and format the digest as *kind*.

    Pure for a fixed ``timestamp_ms``; uses the current time otherwise.
    """
    kind = OutputKind(kind)
    int_range = _check_range(kind, int_range)
    data = snapshot.data if isinstance(snapshot, FrameSnapshot) else bytes(snapshot)
    digest = digest_frame(data, timestamp_ms)
    return Derivation(digest_hex=digest, output=format_output(digest, kind, int_range))


class KeyGenerator:
    """Derives keys from whichever entropy source is currently attached.

    Usage::

        gen = KeyGenerator(LavaSource(640, 480))
        record = gen.generate("uuid")
        gen.log.entries()   # newest first, at most 10
    """

    def __init__(
        self,
        source: EntropySource,
        log: CaptureLog | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._source = source
        self.log = log if log is not None else CaptureLog()
        self._clock = clock
        self._seq = itertools.count(1)
        self._seq_lock = threading.Lock()
        self._last_digest: str | None = None
        self._total = 0

    # ── source management ──

    @property
    def source(self) -> EntropySource:
        return self._source

    @source.setter
    def source(self, source: EntropySource) -> None:
        """Switch sources; the capture log is kept."""
        logger.debug("switching source %s -> %s", self._source.name, source.name)
        self._source = source

    @property
    def last_digest(self) -> str | None:
        return self._last_digest

    # ── derivation ──

    def generate(
        self,
        kind: OutputKind | str = OutputKind.HEX,
        int_range: tuple[int, int] | None = None,
    ) -> DerivationRecord:
        """Run one full derivation and log it.

        Raises
        ------
        SourceUnavailable
            The source had no frame; nothing was hashed or logged.
        DigestUnsupported
            SHA-256 is missing; nothing was logged.
        """
        kind = OutputKind(kind)
        _check_range(kind, int_range)

        source = self._source
        snapshot = source.get_snapshot()
        if snapshot is None:
            raise SourceUnavailable(source.name)

        ts = self._clock()
        result = derive_key(snapshot, kind, int_range, timestamp_ms=ts)

        # Log insert and status fields update as one step.
        with self._seq_lock:
            record = DerivationRecord(
                id=f"{ts}-{next(self._seq)}",
                timestamp=datetime.fromtimestamp(ts / 1000),
                seed_preview=seed_preview(result.digest_hex),
                key=result.output,
                kind=kind,
            )
            self.log.record(record)
            self._last_digest = result.digest_hex
            self._total += 1
        logger.debug("derived %s from %s (%r)", kind.value, source.name, snapshot)
        return record

    def status(self) -> dict:
        with self._seq_lock:
            total, log_size, last = self._total, len(self.log), self._last_digest
        return {
            "source": self._source.name,
            "available": self._source.is_available(),
            "derivations": total,
            "log_size": log_size,
            "last_digest": last,
        }
