from __future__ import annotations
"""In-memory search result cache with TTL and write-on-success policy.

Only non-empty results are stored so a transient block or a zero-result page
never pins a bad answer for the TTL window. Expiry is lazy (on lookup) plus an
opportunistic sweep after each successful write; there is no background timer.
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from .models import SearchResult

DEFAULT_TTL_SECONDS = 5 * 60


def cache_key(query: str, location: Optional[str] = None) -> str:
    return f"{query}:{location or ''}"


@dataclass(frozen=True)
class CacheEntry:
    data: SearchResult
    timestamp: float


class ResultCache:
    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[SearchResult]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.timestamp < self.ttl:
                return entry.data
            # expired: evict on the spot
            del self._entries[key]
            return None

    def put(self, key: str, result: SearchResult) -> bool:
        if len(result.jobs) == 0:
            return False
        with self._lock:
            self._entries[key] = CacheEntry(data=result, timestamp=self._clock())
        return True

    def sweep(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now - e.timestamp > self.ttl]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
