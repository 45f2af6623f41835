"""In-process TTL cache for upstream responses and parse results."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from .constants import CACHE_DURATIONS


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    timestamp: float
    ttl: float


class TTLCache:
    """Key/value store where each entry expires after its category's TTL.

    Expired entries are dropped lazily on lookup; there is no capacity bound
    and no background sweep. One instance is owned by the Flask app and
    handed to the services that need it.
    """

    def __init__(
        self,
        durations: Optional[Dict[str, float]] = None,
        *,
        now_fn: Callable[[], float] = time.monotonic,
    ) -> None:
        self._durations = dict(durations or CACHE_DURATIONS)
        self._now = now_fn
        self._d: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def ttl_for(self, category: str) -> float:
        try:
            return self._durations[category]
        except KeyError:
            allowed = ", ".join(sorted(self._durations))
            raise ValueError(f"Unknown cache category: {category}. Allowed: {allowed}") from None

    def get(self, key: Hashable) -> Optional[Any]:
        now = self._now()
        with self._lock:
            entry = self._d.get(key)
            if entry is None:
                return None
            if now - entry.timestamp >= entry.ttl:
                self._d.pop(key, None)
                return None
            return entry.data

    def set(self, key: Hashable, value: Any, category: str) -> None:
        ttl = self.ttl_for(category)
        entry = CacheEntry(data=value, timestamp=self._now(), ttl=ttl)
        with self._lock:
            self._d[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._d.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._d)
