"""Bounded newest-first history of derivations."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator

from lavarand import config
from lavarand.formatting import OutputKind


@dataclass(frozen=True)
class DerivationRecord:
    """One completed derivation. Immutable once created."""

    id: str
    timestamp: datetime
    seed_preview: str
    key: str
    kind: OutputKind

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(timespec="milliseconds"),
            "seed_preview": self.seed_preview,
            "key": self.key,
            "kind": self.kind.value,
        }


def seed_preview(digest: str, chars: int = config.SEED_PREVIEW_CHARS) -> str:
    return digest[:chars] + "..."


class CaptureLog:
    """Thread-safe log holding the most recent *capacity* records, newest first.

    Older entries fall off silently. Each ``record`` is a single atomic
    front-insert-and-truncate.
    """

    def __init__(self, capacity: int = config.LOG_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[DerivationRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def record(self, entry: DerivationRecord) -> None:
        with self._lock:
            self._entries.appendleft(entry)

    def entries(self) -> tuple[DerivationRecord, ...]:
        with self._lock:
            return tuple(self._entries)

    @property
    def latest(self) -> DerivationRecord | None:
        with self._lock:
            return self._entries[0] if self._entries else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DerivationRecord]:
        return iter(self.entries())

    def __getitem__(self, index: int) -> DerivationRecord:
        return self.entries()[index]
