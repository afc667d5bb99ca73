"""
In-memory result cache that sits in front of resolution.

TTL is checked on read; when full, the oldest entry is evicted. A periodic
sweep (see scheduler.py) drops expired entries that nobody reads again.
There is no locking: resolution is deterministic, so two writers racing on
the same key store the same value.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class SearchCache:
    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 900,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # key -> (stored_at, value); dict order is insertion order
        self._entries: dict[str, tuple[float, Any]] = {}
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(*parts: Any) -> str:
        return "|".join("" if p is None else str(p) for p in parts).strip().lower()

    def __len__(self) -> int:
        return len(self._entries)

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        key = key.strip().lower()
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        stored_at, value = entry
        if self._expired(stored_at, self._clock()):
            self._entries.pop(key, None)
            self.misses += 1
            return None
        self.hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        key = key.strip().lower()
        if self._entries.pop(key, None) is None and len(self._entries) >= self.max_size > 0:
            oldest = next(iter(self._entries))
            self._entries.pop(oldest, None)
        self._entries[key] = (self._clock(), value)

    def sweep(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        expired = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for k in expired:
            self._entries.pop(k, None)
        if expired:
            logger.info("Cache sweep removed %d expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def stats(self) -> dict:
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "ttl_seconds": self.ttl_seconds,
            "hits": self.hits,
            "misses": self.misses,
        }
