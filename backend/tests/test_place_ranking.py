from domain.models import Place
from services.place_ranking import filter_quality, rank_places, text_relevance


def _p(pid, name="Cafe", **kwargs):
    return Place(place_id=pid, name=name, lat=0.0, lng=0.0, **kwargs)


def test_text_relevance():
    assert text_relevance("Coffee", "coffee") == 1.0
    assert text_relevance("Java Coffee House", "coffee") == 0.8
    assert text_relevance("Coffee Bean", "bean coffee") == 0.6
    assert text_relevance("", "coffee") == 0.0


def test_filter_quality_drops_low_quality_places():
    places = [
        _p("keep"),
        _p("blank", name="  "),
        _p("closed", business_status="CLOSED_PERMANENTLY"),
        _p("bad", rating=1.5),
        _p("thin", rating=3.0, user_ratings_total=2),
        _p("thin-but-good", rating=4.0, user_ratings_total=2),
    ]
    assert [p.place_id for p in filter_quality(places)] == ["keep", "thin-but-good"]


def test_rank_prefers_close_well_rated_relevant_places():
    far = _p("far", name="Tea Room", distance_m=9000, rating=3.5)
    near = _p("near", name="Coffee Corner", distance_m=200, rating=4.6, user_ratings_total=120)
    mid = _p("mid", name="Coffee", distance_m=2000)

    ranked = rank_places([far, mid, near], "coffee")

    assert [p.place_id for p in ranked] == ["near", "mid", "far"]


def test_filter_quality_keeps_zero_rating_and_zero_count():
    places = [
        _p("unrated", rating=0.0),
        _p("no-reviews", rating=3.0, user_ratings_total=0),
    ]
    assert [p.place_id for p in filter_quality(places)] == ["unrated", "no-reviews"]
