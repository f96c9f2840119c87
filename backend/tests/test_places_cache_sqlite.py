from domain.models import Place
from services.places_cache_sqlite import SqlitePlacesCache


def _place(pid: str, **kwargs) -> Place:
    return Place(place_id=pid, name=f"Cafe {pid}", lat=6.93, lng=79.86, source="google", **kwargs)


def test_sqlite_cache_round_trip_and_expiry(tmp_path):
    now = {"t": 500.0}
    cache = SqlitePlacesCache(str(tmp_path / "places.sqlite"), ttl_seconds=60, clock=lambda: now["t"])
    cache.set("coffee|6.930|79.860|5000", [_place("1", rating=4.5, types=["cafe"])])

    hit = cache.get("coffee|6.930|79.860|5000")
    assert hit is not None
    assert hit[0].place_id == "1"
    assert hit[0].rating == 4.5
    assert hit[0].types == ["cafe"]
    assert hit[0].source == "google"

    now["t"] += 60
    assert cache.get("coffee|6.930|79.860|5000") is None


def test_sqlite_cache_is_shared_between_instances(tmp_path):
    path = str(tmp_path / "shared.sqlite")
    writer = SqlitePlacesCache(path)
    reader = SqlitePlacesCache(path)

    writer.set("k", [_place("1"), _place("2")])

    assert [p.place_id for p in reader.get("k")] == ["1", "2"]
    assert reader.size() == 1


def test_sqlite_cache_clear_returns_removed_count(tmp_path):
    cache = SqlitePlacesCache(str(tmp_path / "places.sqlite"))
    cache.set("a", [_place("1")])
    cache.set("b", [_place("2")])
    cache.set("b", [_place("3")])

    assert cache.size() == 2
    assert cache.clear() == 2
    assert cache.get("a") is None
