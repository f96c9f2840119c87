"""
Core domain models for the places search gateway.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Place:
    """A place normalized to one shape regardless of which provider served it."""
    place_id: str
    name: str
    lat: float
    lng: float
    formatted_address: str = ""
    rating: Optional[float] = None
    types: List[str] = field(default_factory=list)
    source: str = ""  # provider name, e.g. "azure" or "google"
    user_ratings_total: Optional[int] = None
    business_status: str = "OPERATIONAL"
    vicinity: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    distance_m: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "place_id": self.place_id,
            "name": self.name,
            "formatted_address": self.formatted_address,
            "geometry": {"location": {"lat": self.lat, "lng": self.lng}},
            "rating": self.rating,
            "user_ratings_total": self.user_ratings_total,
            "types": list(self.types),
            "business_status": self.business_status,
            "vicinity": self.vicinity,
            "phone": self.phone,
            "website": self.website,
            "distance_m": self.distance_m,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        location = (data.get("geometry") or {}).get("location") or {}
        return cls(
            place_id=str(data.get("place_id", "")),
            name=data.get("name") or "",
            lat=float(location.get("lat", 0.0)),
            lng=float(location.get("lng", 0.0)),
            formatted_address=data.get("formatted_address") or "",
            rating=data.get("rating"),
            types=list(data.get("types") or []),
            source=data.get("source") or "",
            user_ratings_total=data.get("user_ratings_total"),
            business_status=data.get("business_status") or "OPERATIONAL",
            vicinity=data.get("vicinity"),
            phone=data.get("phone"),
            website=data.get("website"),
            distance_m=data.get("distance_m"),
        )


@dataclass
class CacheEntry:
    key: str
    places: List[Place]
    inserted_at: float  # epoch seconds


@dataclass
class ProviderUsage:
    """Daily counters for a single provider."""
    provider: str
    call_count: int = 0
    cost_estimate: float = 0.0


@dataclass
class SearchOutcome:
    """Result of one gateway search: the places and who served them."""
    places: List[Place]
    source: str  # provider name, "cache" or "none"
