"""
Cost-aware places search: cache first, then providers cheapest first.

Selection is fixed and deterministic. Each provider is tried in order while
it is under its daily budget; the first non-empty result is counted against
that provider, cached, and returned. Provider failures fall through to the
next provider. When no provider produces anything the outcome is an empty
list with source "none", unless every provider that was tried raised, which
is a SearchFailedError.

Concurrent searches for the same key share one provider call. Only the
caller that made the call reports the provider as its source; the callers
that waited on it report "cache", so one provider source means one
recorded call.
"""
from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence

from domain.models import SearchOutcome
from services.places_cache import InMemoryPlacesCache, PlacesCache, make_cache_key
from services.providers import AzureMapsProvider, GooglePlacesProvider, PlacesProvider, ProviderError
from services.usage_tracker import UsageTracker
from settings import settings

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_NONE = "none"


class SearchFailedError(Exception):
    """Every provider that was attempted failed."""

    def __init__(self, failures: List[ProviderError]):
        self.failures = failures
        super().__init__("; ".join(str(f) for f in failures) or "search failed")


class _InFlight:
    def __init__(self) -> None:
        self.done = threading.Event()
        self.outcome: Optional[SearchOutcome] = None
        self.error: Optional[Exception] = None


class PlacesSearchService:
    def __init__(
        self,
        cache: PlacesCache,
        tracker: UsageTracker,
        providers: Sequence[PlacesProvider],
    ):
        self.cache = cache
        self.tracker = tracker
        self.providers = list(providers)
        self._inflight: Dict[str, _InFlight] = {}
        self._inflight_lock = threading.Lock()

    @property
    def provider_names(self) -> List[str]:
        return [p.name for p in self.providers]

    def search(self, query: str, lat: float, lng: float, radius: int) -> SearchOutcome:
        key = make_cache_key(query, lat, lng, radius)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("places search cache hit for %r", query)
            return SearchOutcome(places=cached, source=SOURCE_CACHE)

        with self._inflight_lock:
            pending = self._inflight.get(key)
            leader = pending is None
            if leader:
                pending = _InFlight()
                self._inflight[key] = pending

        if not leader:
            logger.debug("waiting on in-flight search for %s", key)
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            return SearchOutcome(places=list(pending.outcome.places), source=SOURCE_CACHE)

        try:
            # A previous leader may have filled the cache since our miss.
            cached = self.cache.get(key)
            if cached is not None:
                outcome = SearchOutcome(places=cached, source=SOURCE_CACHE)
            else:
                outcome = self._search_providers(key, query, lat, lng, radius)
            pending.outcome = outcome
            return outcome
        except Exception as exc:
            pending.error = exc
            raise
        finally:
            with self._inflight_lock:
                self._inflight.pop(key, None)
            pending.done.set()

    def _search_providers(self, key: str, query: str, lat: float, lng: float, radius: int) -> SearchOutcome:
        attempted = 0
        failures: List[ProviderError] = []
        for provider in self.providers:
            if not self.tracker.is_under_budget(provider.name):
                logger.info("%s is over its daily budget, skipping", provider.name)
                continue
            attempted += 1
            try:
                places = provider.search(query, lat, lng, radius)
            except ProviderError as exc:
                logger.warning("%s search failed: %s", provider.name, exc)
                failures.append(exc)
                continue
            if not places:
                logger.info("%s returned no results for %r", provider.name, query)
                continue

            self.tracker.record_call(provider.name)
            self.cache.set(key, places)
            logger.info("%s: %d places found for %r", provider.name, len(places), query)
            return SearchOutcome(places=places, source=provider.name)

        if attempted and len(failures) == attempted:
            raise SearchFailedError(failures)
        return SearchOutcome(places=[], source=SOURCE_NONE)


def build_cache() -> PlacesCache:
    if settings.PLACES_CACHE_BACKEND == "sqlite":
        from services.places_cache_sqlite import SqlitePlacesCache

        return SqlitePlacesCache(settings.PLACES_CACHE_PATH, ttl_seconds=settings.PLACES_CACHE_TTL_SECONDS)
    return InMemoryPlacesCache(
        ttl_seconds=settings.PLACES_CACHE_TTL_SECONDS,
        max_entries=settings.PLACES_CACHE_MAX_ENTRIES,
    )


def build_usage_tracker() -> UsageTracker:
    store = None
    if settings.USAGE_STORE == "sql":
        from db import SessionLocal, init_db
        from repositories.usage import SqlUsageStore

        init_db()
        store = SqlUsageStore(SessionLocal)
    return UsageTracker(
        budget=settings.DAILY_BUDGET,
        cost_rates=settings.COST_RATES_USD,
        soft_limit_usd=settings.COST_SOFT_LIMIT_USD,
        store=store,
    )


def build_providers() -> List[PlacesProvider]:
    timeout = settings.PROVIDER_TIMEOUT_SECONDS
    return [
        AzureMapsProvider(settings.AZURE_MAPS_API_KEY, timeout=timeout),
        GooglePlacesProvider(settings.GOOGLE_PLACES_API_KEY, timeout=timeout),
    ]


_default_search_service: Optional[PlacesSearchService] = None


def get_default_search_service() -> PlacesSearchService:
    global _default_search_service
    if _default_search_service is None:
        _default_search_service = PlacesSearchService(
            cache=build_cache(),
            tracker=build_usage_tracker(),
            providers=build_providers(),
        )
    return _default_search_service
