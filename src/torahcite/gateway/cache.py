"""Time-boxed in-memory result cache with an injectable clock."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

Clock = Callable[[], float]


@dataclass(frozen=True)
class _Entry:
    value: Any
    stored_at: float


class TTLCache:
    """Key → value map whose entries expire ``ttl_seconds`` after writing.

    Expiry is lazy: a read that finds a stale entry deletes it and
    reports a miss. Nothing runs in the background, so the map only
    shrinks when stale keys are read again or ``purge_expired`` is
    called.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at < self._ttl:
            return entry.value
        del self._entries[key]
        return None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def purge_expired(self) -> int:
        """Drop every stale entry. Returns how many were removed."""
        now = self._clock()
        stale = [
            k
            for k, e in self._entries.items()
            if now - e.stored_at >= self._ttl
        ]
        for k in stale:
            del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None
