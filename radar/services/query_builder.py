"""
Provider query construction.

Turns user filters into a Skiddle search query: radius clamping and
genre keyword expansion. Keyword expansion favours recall: a user's
free-text term is always OR-ed with the genre (or default) clause so a
narrow term never produces an empty result on its own.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from radar.models import DateBounds, GeoLocation, ProviderQuery
from radar.services.taxonomy import GENRE_TAXONOMY, GenreTaxonomy

DEFAULT_RADIUS = 25
MIN_RADIUS = 1
MAX_RADIUS = 250


def clamp_radius(raw: str | float | int | None) -> int:
    """
    Parse and clamp a radius in miles.

    Unparsable or non-finite input gives the default of 25. Otherwise the
    value is rounded (halves round up) and clamped to 1..250.
    """
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return DEFAULT_RADIUS
    if not math.isfinite(value):
        return DEFAULT_RADIUS

    rounded = math.floor(value + 0.5)
    return max(MIN_RADIUS, min(MAX_RADIUS, rounded))


def build_keyword(
    genres: Iterable[str] | None,
    keyword: str | None,
    taxonomy: GenreTaxonomy = GENRE_TAXONOMY,
) -> str:
    """
    Build the provider keyword expression.

    Args:
        genres: Selected genre names, any case
        keyword: Optional user free text
        taxonomy: Genre table to expand through

    Returns:
        OR-expression, e.g. "acid OR techno OR hard techno OR industrial"
    """
    clauses: list[str] = []
    for name in genres or ():
        genre = taxonomy.by_name(name)
        if genre and genre.keywords not in clauses:
            clauses.append(genre.keywords)

    built = " OR ".join(clauses) if clauses else taxonomy.default_keywords

    user = (keyword or "").strip()
    if user:
        built = f"{user} OR {built}"

    return built


class QueryBuilder:
    """Build ``ProviderQuery`` objects from filter values."""

    def __init__(self, taxonomy: GenreTaxonomy = GENRE_TAXONOMY) -> None:
        self.taxonomy = taxonomy

    def keyword_expression(self, genres: Iterable[str] | None, keyword: str | None) -> str:
        return build_keyword(genres, keyword, self.taxonomy)

    def build(
        self,
        location: GeoLocation,
        genres: Iterable[str] | None,
        keyword: str | None,
        radius: str | float | int | None,
        bounds: DateBounds | None = None,
    ) -> ProviderQuery:
        """Build a provider query for a location and optional date bounds."""
        return ProviderQuery(
            lat=location.lat,
            lng=location.lng,
            radius_miles=clamp_radius(radius),
            keyword_expression=self.keyword_expression(genres, keyword),
            min_date=bounds.min_date if bounds else None,
            max_date=bounds.max_date if bounds else None,
        )
