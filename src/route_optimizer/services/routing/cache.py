"""In-memory cache with per-entry expiry."""

from __future__ import annotations

import time
from typing import Callable, Generic, Hashable, Optional, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Expiry is checked lazily on read; stale entries are only replaced by the next ``set``.

    ``clock`` returns seconds and defaults to ``time.monotonic`` so tests can
    drive expiry deterministically.
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._entries: dict[Hashable, tuple[T, float]] = {}

    def get(self, key: Hashable) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self._clock():
            return None
        return value

    def set(self, key: Hashable, value: T, ttl_seconds: float) -> None:
        self._entries[key] = (value, self._clock() + ttl_seconds)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
