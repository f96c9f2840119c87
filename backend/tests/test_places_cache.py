from domain.models import Place
from services.places_cache import InMemoryPlacesCache, make_cache_key


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _place(pid: str) -> Place:
    return Place(place_id=pid, name=f"Place {pid}", lat=6.9271, lng=79.8612, source="azure")


def test_cache_key_normalizes_query_coords_and_radius():
    a = make_cache_key("  Coffee ", 6.92714, 79.86119, 5100)
    b = make_cache_key("coffee", 6.9271, 79.8612, 4900)
    assert a == b == "coffee|6.927|79.861|5000"


def test_get_returns_stored_places_within_ttl():
    clock = FakeClock()
    cache = InMemoryPlacesCache(ttl_seconds=3600, clock=clock)
    cache.set("k", [_place("1"), _place("2")])

    clock.now += 3599
    hit = cache.get("k")
    assert [p.place_id for p in hit] == ["1", "2"]


def test_entry_is_a_miss_once_ttl_elapses_but_stays_counted():
    clock = FakeClock()
    cache = InMemoryPlacesCache(ttl_seconds=3600, clock=clock)
    cache.set("k", [_place("1")])

    clock.now += 3600
    assert cache.get("k") is None
    # lazy expiry: the stale entry is still physically present
    assert cache.size() == 1


def test_set_overwrites_and_refreshes_timestamp():
    clock = FakeClock()
    cache = InMemoryPlacesCache(ttl_seconds=10, clock=clock)
    cache.set("k", [_place("old")])
    clock.now += 8
    cache.set("k", [_place("new")])
    clock.now += 8

    assert [p.place_id for p in cache.get("k")] == ["new"]
    assert cache.size() == 1


def test_clear_reports_removed_count_and_empties_cache():
    cache = InMemoryPlacesCache()
    cache.set("a", [_place("1")])
    cache.set("b", [_place("2")])

    assert cache.clear() == 2
    assert cache.get("a") is None
    assert cache.size() == 0
    assert cache.clear() == 0


def test_unbounded_by_default():
    cache = InMemoryPlacesCache()
    for i in range(1000):
        cache.set(f"k{i}", [_place(str(i))])
    assert cache.size() == 1000


def test_max_entries_evicts_least_recently_used():
    cache = InMemoryPlacesCache(max_entries=2)
    cache.set("a", [_place("1")])
    cache.set("b", [_place("2")])
    assert cache.get("a") is not None  # touch a, b becomes the oldest
    cache.set("c", [_place("3")])

    assert cache.size() == 2
    assert cache.get("b") is None
    assert cache.get("a") is not None
    assert cache.get("c") is not None
