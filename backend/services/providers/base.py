"""
Shared plumbing for the external places providers.
"""
from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

import requests

from domain.models import Place

logger = logging.getLogger(__name__)

_session = requests.Session()

EARTH_RADIUS_M = 6371000.0


class ProviderError(Exception):
    """A provider could not produce results (network, status, payload or config)."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in metres."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class PlacesProvider:
    """Base class for a provider that turns a text query near a point into Places."""

    name: str = ""

    def __init__(self, api_key: Optional[str], timeout: float = 8.0):
        self.api_key = api_key
        self.timeout = timeout

    def search(self, query: str, lat: float, lng: float, radius: int) -> List[Place]:
        raise NotImplementedError

    def _require_key(self) -> str:
        if not self.api_key:
            raise ProviderError(self.name, "API key not configured")
        return self.api_key

    def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """GET url and decode JSON, mapping every failure to ProviderError."""
        try:
            resp = _session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            raise ProviderError(self.name, f"timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise ProviderError(self.name, f"request failed: {exc}") from exc
        if resp.status_code != 200:
            raise ProviderError(self.name, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(self.name, "malformed JSON payload") from exc

    @staticmethod
    def _with_distance(places: List[Place], lat: float, lng: float) -> List[Place]:
        for p in places:
            p.distance_m = int(round(haversine_m(lat, lng, p.lat, p.lng)))
        return places
