"""
Azure Maps search provider (the cheap one).

Fuzzy search first; when that comes back short and the query names a known
POI category, a category POI search tops the list up with places whose names
are not already present.
"""
from __future__ import annotations

import hashlib
import logging
from typing import List, Optional, Tuple

from domain.models import Place
from services.providers.base import PlacesProvider, ProviderError

logger = logging.getLogger(__name__)

AZURE_MAPS_BASE_URL = "https://atlas.microsoft.com"
AZURE_API_VERSION = "1.0"
MAX_RADIUS_M = 50000

# Substring of the query -> Azure Maps POI category id.
CATEGORY_IDS = {
    "restaurant": "7315",
    "food": "7315",
    "dining": "7315",
    "hotel": "7314",
    "accommodation": "7314",
    "lodging": "7314",
    "attraction": "7376",
    "tourist": "7376",
    "sightseeing": "7376",
    "museum": "7317",
    "park": "9362",
    "garden": "9362",
    "shopping": "7373",
    "mall": "7373",
    "shop": "7373",
    "cafe": "9376001",
    "coffee": "9376001",
    "bar": "9376003",
    "pub": "9376003",
    "nightlife": "9376003",
    "beach": "9992",
    "hospital": "7321",
    "pharmacy": "7326",
    "bank": "7328",
    "atm": "7397",
    "gas": "7311",
    "petrol": "7311",
    "airport": "7383",
    "train": "7380",
    "bus": "7380",
}


def category_for_query(query: str) -> Optional[Tuple[str, str]]:
    """Return (matched keyword, category id) for the first keyword in the query."""
    q = (query or "").lower()
    for keyword, category in CATEGORY_IDS.items():
        if keyword in q:
            return keyword, category
    return None


def _fallback_id(result: dict) -> str:
    position = result.get("position") or {}
    seed = f"{(result.get('poi') or {}).get('name', '')}|{position.get('lat')}|{position.get('lon')}"
    return "azure_" + hashlib.sha1(seed.encode("utf-8")).hexdigest()[:12]


def to_place(result: dict) -> Place:
    """Map one Azure Maps search result onto the common Place shape."""
    poi = result.get("poi") or {}
    address = result.get("address") or {}
    position = result.get("position") or {}
    lat = float(position.get("lat") or 0.0)
    lng = float(position.get("lon") or 0.0)
    freeform = address.get("freeformAddress") or ""
    types = poi.get("categories") or [
        c.get("code") for c in poi.get("classifications") or [] if c.get("code")
    ]
    return Place(
        place_id=str(result.get("id") or _fallback_id(result)),
        name=poi.get("name") or freeform or "Unknown Place",
        lat=lat,
        lng=lng,
        formatted_address=freeform or f"{lat}, {lng}",
        rating=None,
        types=list(types) or ["establishment"],
        source=AzureMapsProvider.name,
        vicinity=freeform or None,
        phone=poi.get("phone") or None,
        website=poi.get("url") or None,
    )


class AzureMapsProvider(PlacesProvider):
    name = "azure"

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 8.0,
        base_url: str = AZURE_MAPS_BASE_URL,
        limit: int = 20,
    ):
        super().__init__(api_key, timeout)
        self.base_url = base_url.rstrip("/")
        self.limit = limit

    def _fetch(self, path: str, params: dict) -> List[Place]:
        data = self._get_json(f"{self.base_url}{path}", params)
        if not isinstance(data, dict):
            raise ProviderError(self.name, "malformed payload")
        results = data.get("results") or []
        if not isinstance(results, list):
            raise ProviderError(self.name, "malformed results list")
        try:
            return [to_place(r) for r in results if isinstance(r, dict)]
        except (TypeError, ValueError) as exc:
            raise ProviderError(self.name, f"malformed result: {exc}") from exc

    def search(self, query: str, lat: float, lng: float, radius: int) -> List[Place]:
        key = self._require_key()
        common = {
            "api-version": AZURE_API_VERSION,
            "subscription-key": key,
            "lat": lat,
            "lon": lng,
            "radius": min(int(radius), MAX_RADIUS_M),
            "limit": self.limit,
        }
        places = self._fetch("/search/fuzzy/json", {**common, "query": query})
        logger.debug("azure fuzzy search %r near %.4f,%.4f: %d results", query, lat, lng, len(places))

        match = category_for_query(query)
        if len(places) < self.limit and match:
            keyword, category = match
            try:
                extra = self._fetch(
                    "/search/poi/category/json",
                    {**common, "query": keyword, "categorySet": category},
                )
            except ProviderError as exc:
                # The fuzzy results stand on their own; the top-up is best effort.
                logger.warning("azure category search failed: %s", exc)
                extra = []
            seen = {p.name.lower() for p in places}
            for place in extra:
                if place.name.lower() in seen:
                    continue
                seen.add(place.name.lower())
                places.append(place)
                if len(places) >= self.limit:
                    break

        return self._with_distance(places, lat, lng)
