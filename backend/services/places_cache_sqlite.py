"""
SQLite-backed cache for place searches, shared by worker processes on one host.
"""
from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
import time
from typing import Callable, List, Optional

from domain.models import Place
from services.places_cache import DEFAULT_TTL_SECONDS, PlacesCache

logger = logging.getLogger(__name__)


class SqlitePlacesCache(PlacesCache):
    def __init__(
        self,
        db_path: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.db_path = db_path
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._init_schema()

    def _init_schema(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS place_cache (
                    cache_key TEXT PRIMARY KEY,
                    response_json TEXT NOT NULL,
                    created_at REAL NOT NULL
                )
                """
            )
            self._conn.commit()

    def get(self, key: str) -> Optional[List[Place]]:
        """Return the cached places for key if a non-expired entry exists."""
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT response_json, created_at FROM place_cache WHERE cache_key=?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("places cache read failed for %s: %s", key, exc)
            return None
        if not row:
            return None
        response_json, created_at = row
        if self._clock() - created_at >= self.ttl_seconds:
            return None
        try:
            payload = json.loads(response_json)
        except ValueError:
            return None
        return [Place.from_dict(item) for item in payload or []]

    def set(self, key: str, places: List[Place]) -> None:
        payload = json.dumps([p.to_dict() for p in places])
        try:
            with self._lock:
                self._conn.execute(
                    "INSERT OR REPLACE INTO place_cache (cache_key, response_json, created_at) VALUES (?, ?, ?)",
                    (key, payload, self._clock()),
                )
                self._conn.commit()
        except sqlite3.Error as exc:
            logger.warning("places cache write failed for %s: %s", key, exc)

    def clear(self) -> int:
        with self._lock:
            cur = self._conn.execute("DELETE FROM place_cache")
            self._conn.commit()
            return cur.rowcount

    def size(self) -> int:
        with self._lock:
            (count,) = self._conn.execute("SELECT COUNT(*) FROM place_cache").fetchone()
        return int(count)
