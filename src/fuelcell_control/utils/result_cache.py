"""
Bounded TTL Result Cache

Caller-owned cache for simulation results keyed by their inputs. Entries
expire after ``ttl_seconds`` and the least recently used entry is evicted
once ``max_entries`` is reached. There is no module-level instance; pass one
to whatever needs it.
"""

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

V = TypeVar("V")


def make_cache_key(*parts: Any) -> str:
    """
    Stable digest of model/dict inputs.

    Pydantic models are dumped in JSON mode so equal inputs hash equally
    regardless of how they were constructed.
    """
    normalized = [
        part.model_dump(mode="json") if isinstance(part, BaseModel) else part for part in parts
    ]
    payload = json.dumps(normalized, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ResultCache(Generic[V]):
    """
    Thread-safe LRU cache with per-entry time-to-live.

    Args:
        max_entries: Maximum number of entries kept
        ttl_seconds: Lifetime of an entry in seconds (None = no expiry)
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        max_entries: int = 256,
        ttl_seconds: Optional[float] = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[Hashable, Tuple[float, V]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _expired(self, stored_at: float, now: float) -> bool:
        return self.ttl_seconds is not None and now - stored_at > self.ttl_seconds

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            stored_at, value = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[key]
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: Hashable, value: V) -> None:
        with self._lock:
            now = self._clock()
            self._purge(now)
            self._entries[key] = (now, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Result cache full, evicted {evicted}")

    def get_or_compute(self, key: Hashable, compute: Callable[[], V]) -> V:
        value = self.get(key)
        if value is None:
            value = compute()
            self.put(key, value)
        return value

    def _purge(self, now: float) -> None:
        expired = [k for k, (stored_at, _) in self._entries.items() if self._expired(stored_at, now)]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._entries)

    def stats(self) -> Dict[str, int]:
        return {"entries": len(self), "hits": self.hits, "misses": self.misses}
