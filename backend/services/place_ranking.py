from __future__ import annotations

from typing import List, Sequence

from domain.models import Place


def text_relevance(text: str, query: str) -> float:
    """Score 0..1 for how well a place name matches the query."""
    if not text or not query:
        return 0.0
    text_l = text.lower()
    query_l = query.lower()
    if text_l == query_l:
        return 1.0
    if query_l in text_l:
        return 0.8
    text_words = text_l.split()
    query_words = query_l.split()
    if not query_words:
        return 0.0
    overlap = sum(
        1 for word in query_words if any(word in tw or tw in word for tw in text_words)
    )
    return overlap / len(query_words) * 0.6


def filter_quality(places: Sequence[Place]) -> List[Place]:
    """Drop unnamed, permanently closed and poorly rated places."""
    kept: List[Place] = []
    for p in places:
        if not p.name or not p.name.strip():
            continue
        if p.business_status == "CLOSED_PERMANENTLY":
            continue
        if p.rating and p.rating < 2.0:
            continue
        if (
            p.user_ratings_total
            and p.user_ratings_total < 3
            and p.rating
            and p.rating < 3.5
        ):
            continue
        kept.append(p)
    return kept


def relevance_score(place: Place, query: str) -> float:
    score = max(0.0, 1000 - (place.distance_m or 0) / 10)
    if place.rating:
        score += place.rating * 200
    if place.user_ratings_total:
        score += min(500, place.user_ratings_total * 2)
    score += text_relevance(place.name, query) * 300
    if place.business_status == "OPERATIONAL":
        score += 100
    return score


def rank_places(places: Sequence[Place], query: str) -> List[Place]:
    """Quality-filter then order by relevance, best first (stable on ties)."""
    return sorted(filter_quality(places), key=lambda p: relevance_score(p, query), reverse=True)
