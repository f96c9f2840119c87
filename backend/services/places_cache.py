"""
In-process TTL cache for place search results.

Entries older than the TTL are treated as misses but are not purged until
they are overwritten, cleared, or pushed out by the optional size bound.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Callable, List, Optional

from domain.models import CacheEntry, Place

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
RADIUS_BUCKET_M = 500


def make_cache_key(query: str, lat: float, lng: float, radius: int) -> str:
    """Normalize search parameters into a cache key.

    Query is trimmed and lower-cased, coordinates rounded to 3 decimals
    (~100m) and the radius bucketed to the nearest 500m.
    """
    q = (query or "").strip().lower()
    r_bucket = int(round(float(radius) / RADIUS_BUCKET_M)) * RADIUS_BUCKET_M
    return f"{q}|{float(lat):.3f}|{float(lng):.3f}|{r_bucket}"


class PlacesCache:
    """Interface shared by the cache backends."""

    def get(self, key: str) -> Optional[List[Place]]:
        raise NotImplementedError

    def set(self, key: str, places: List[Place]) -> None:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError

    def size(self) -> int:
        raise NotImplementedError


class InMemoryPlacesCache(PlacesCache):
    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = 0,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[List[Place]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("places cache miss %s", key)
                return None
            if self._clock() - entry.inserted_at >= self.ttl_seconds:
                logger.debug("places cache expired %s", key)
                return None
            if self.max_entries:
                self._entries.move_to_end(key)
            logger.debug("places cache hit %s", key)
            return list(entry.places)

    def set(self, key: str, places: List[Place]) -> None:
        with self._lock:
            self._entries[key] = CacheEntry(key=key, places=list(places), inserted_at=self._clock())
            self._entries.move_to_end(key)
            if self.max_entries:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.debug("places cache evicted %s", evicted)

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    def size(self) -> int:
        with self._lock:
            return len(self._entries)
