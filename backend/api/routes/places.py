"""
Places search API routes.

Cost-aware search plus the cache and usage endpoints used by admin tooling.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from services.place_ranking import rank_places
from services.places_search import PlacesSearchService, SearchFailedError, get_default_search_service
from settings import settings

router = APIRouter()
logger = logging.getLogger(__name__)


class SearchResponse(BaseModel):
    places: List[Dict[str, Any]]
    source: str
    usage: Dict[str, Any]
    budget: Dict[str, int]


class ClearCacheResponse(BaseModel):
    success: bool
    message: str
    entriesRemoved: int


class UsageResponse(BaseModel):
    daily: Dict[str, Any]
    budget: Dict[str, int]
    usage_percent: Dict[str, float]
    cache_size: int
    estimated_monthly_cost: Dict[str, float]


def get_search_service() -> PlacesSearchService:
    return get_default_search_service()


def _parse_coord(raw: Optional[str], low: float, high: float) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value) or not low <= value <= high:
        return None
    return value


def _validate_search_params(q: Optional[str], lat: Optional[str], lng: Optional[str]) -> Tuple[str, float, float]:
    if not q or not q.strip() or not lat or not lng:
        raise HTTPException(status_code=400, detail="q, lat, and lng are required")
    lat_f = _parse_coord(lat, -90.0, 90.0)
    lng_f = _parse_coord(lng, -180.0, 180.0)
    if lat_f is None or lng_f is None:
        raise HTTPException(status_code=400, detail="lat and lng must be valid coordinates")
    return q.strip(), lat_f, lng_f


@router.get("/search", response_model=SearchResponse)
def search_places(
    q: Optional[str] = Query(None),
    lat: Optional[str] = Query(None),
    lng: Optional[str] = Query(None),
    radius: Optional[int] = Query(None, ge=1),
    rank: bool = Query(False),
):
    """
    Search places near a point, cheapest source first.

    The response carries today's usage and the configured budgets so clients
    can watch spend.
    """
    query, lat_f, lng_f = _validate_search_params(q, lat, lng)
    radius_m = radius or settings.DEFAULT_PLACES_RADIUS_M
    service = get_search_service()

    try:
        outcome = service.search(query, lat_f, lng_f, radius_m)
    except SearchFailedError as exc:
        logger.error("all providers failed for %r: %s", query, exc)
        raise HTTPException(status_code=502, detail="Search failed")
    except Exception:
        logger.exception("places search failed")
        raise HTTPException(status_code=500, detail="Search failed")

    places = rank_places(outcome.places, query) if rank else outcome.places
    return SearchResponse(
        places=[p.to_dict() for p in places],
        source=outcome.source,
        usage=service.tracker.daily_usage(),
        budget=service.tracker.budget,
    )


@router.post("/clear-cache", response_model=ClearCacheResponse)
def clear_cache():
    service = get_search_service()
    removed = service.cache.clear()
    logger.info("places cache cleared: %d entries removed", removed)
    return ClearCacheResponse(
        success=True,
        message="Cache cleared successfully",
        entriesRemoved=removed,
    )


@router.get("/usage", response_model=UsageResponse)
def usage():
    """Today's provider usage, budget consumption and projected monthly cost."""
    service = get_search_service()
    tracker = service.tracker
    return UsageResponse(
        daily=tracker.daily_usage(),
        budget=tracker.budget,
        usage_percent=tracker.usage_percent(),
        cache_size=service.cache.size(),
        estimated_monthly_cost=tracker.estimated_monthly_cost(),
    )
