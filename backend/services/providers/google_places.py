"""
Google Places text search provider (the primary, more expensive one).
"""
from __future__ import annotations

import logging
from typing import List, Optional

from domain.models import Place
from services.providers.base import PlacesProvider, ProviderError

logger = logging.getLogger(__name__)

GOOGLE_TEXTSEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"


def to_place(result: dict) -> Place:
    location = (result.get("geometry") or {}).get("location") or {}
    return Place(
        place_id=str(result.get("place_id", "")),
        name=result.get("name") or "",
        lat=float(location.get("lat") or 0.0),
        lng=float(location.get("lng") or 0.0),
        formatted_address=result.get("formatted_address") or result.get("vicinity") or "",
        rating=result.get("rating"),
        types=list(result.get("types") or ["establishment"]),
        source=GooglePlacesProvider.name,
        user_ratings_total=result.get("user_ratings_total"),
        business_status=result.get("business_status") or "OPERATIONAL",
        vicinity=result.get("vicinity"),
    )


class GooglePlacesProvider(PlacesProvider):
    name = "google"

    def __init__(self, api_key: Optional[str], timeout: float = 8.0, url: str = GOOGLE_TEXTSEARCH_URL):
        super().__init__(api_key, timeout)
        self.url = url

    def search(self, query: str, lat: float, lng: float, radius: int) -> List[Place]:
        params = {
            "query": query,
            "location": f"{lat},{lng}",
            "radius": int(radius),
            "key": self._require_key(),
        }
        data = self._get_json(self.url, params)
        if not isinstance(data, dict):
            raise ProviderError(self.name, "malformed payload")

        status = data.get("status")
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            raise ProviderError(self.name, f"status {status}")

        try:
            places = [to_place(r) for r in data.get("results") or [] if isinstance(r, dict)]
        except (TypeError, ValueError) as exc:
            raise ProviderError(self.name, f"malformed result: {exc}") from exc
        logger.debug("google text search %r near %.4f,%.4f: %d results", query, lat, lng, len(places))
        return self._with_distance(places, lat, lng)
