"""
Share-link encoding for search filters.

Tokens look like ``RADAR/LONDON/DNB+TNO/25MI/WKD``. The location field is
a display label only: it round-trips to coordinates just for the cities
in the preset table. Any other location decodes with no preset.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from radar.models import (
    DateRangeSelector,
    GeoLocation,
    SearchFilters,
    SharedFilters,
)
from radar.services.query_builder import clamp_radius
from radar.services.taxonomy import (
    CITY_PRESETS,
    GENRE_TAXONOMY,
    CityPreset,
    GenreTaxonomy,
)

logger = logging.getLogger(__name__)

TAG = "RADAR"
ALL_GENRES = "ALL"
DEFAULT_LOCATION = "UK"
RADIUS_UNIT = "MI"
FIELD_COUNT = 5

_DATE_CODES: dict[DateRangeSelector, str] = {
    DateRangeSelector.TONIGHT: "TNT",
    DateRangeSelector.WEEKEND: "WKD",
    DateRangeSelector.NEXT_7: "7D",
    DateRangeSelector.NEXT_14: "14D",
    DateRangeSelector.CUSTOM: "CST",
}
_CODE_DATES = {code: selector for selector, code in _DATE_CODES.items()}

_WHITESPACE = re.compile(r"\s+")


class ShareCodec:
    """Encode filters to share tokens and decode them back."""

    def __init__(
        self,
        taxonomy: GenreTaxonomy = GENRE_TAXONOMY,
        presets: Mapping[str, CityPreset] = CITY_PRESETS,
    ) -> None:
        self.taxonomy = taxonomy
        self.presets = presets

    def encode(self, filters: SearchFilters) -> str:
        """Encode filters as a share token (without the leading '#')."""
        label = filters.location.display_name if filters.location else ""
        return self.encode_parts(
            location_label=label,
            genres=filters.genres,
            radius=filters.radius,
            date_range=filters.date_range,
        )

    def encode_parts(
        self,
        location_label: str,
        genres: list[str],
        radius: int | str | None,
        date_range: DateRangeSelector | str | None,
    ) -> str:
        """Encode individual filter values as a share token."""
        location = _WHITESPACE.sub("_", location_label.strip()).replace("/", "_").upper()
        codes = [g.code for g in self.taxonomy.in_canonical_order(genres)]
        selector = DateRangeSelector.parse(date_range) or DateRangeSelector.NEXT_7

        return "/".join(
            (
                TAG,
                location or DEFAULT_LOCATION,
                "+".join(codes) if codes else ALL_GENRES,
                f"{clamp_radius(radius)}{RADIUS_UNIT}",
                _DATE_CODES[selector],
            )
        )

    def encode_url(self, filters: SearchFilters) -> str:
        """Encode filters as a URL fragment, e.g. '#RADAR/...'."""
        return f"#{self.encode(filters)}"

    def decode(self, token: str | None) -> SharedFilters | None:
        """
        Decode a share token.

        Args:
            token: Token, with or without a leading '#'

        Returns:
            SharedFilters, or None when the token is malformed
        """
        parts = (token or "").strip().removeprefix("#").split("/")
        if len(parts) != FIELD_COUNT or parts[0].upper() != TAG:
            logger.debug("Ignoring malformed share token: %r", token)
            return None

        location_key = parts[1].replace("_", " ").strip().upper()
        genre_code = parts[2].strip().upper()
        radius_raw = parts[3].strip().upper().removesuffix(RADIUS_UNIT)
        date_code = parts[4].strip().upper()

        genres: list[str] = []
        if genre_code and genre_code != ALL_GENRES:
            for code in genre_code.split("+"):
                genre = self.taxonomy.by_code(code)
                if genre and genre.name not in genres:
                    genres.append(genre.name)

        preset = self.presets.get(location_key)
        return SharedFilters(
            location_key=location_key,
            location_preset=(
                GeoLocation(lat=preset.lat, lng=preset.lng, display_name=preset.name)
                if preset
                else None
            ),
            radius=clamp_radius(radius_raw),
            genres=genres,
            date_range=_CODE_DATES.get(date_code, DateRangeSelector.NEXT_7),
        )

    def to_filters(self, shared: SharedFilters | None) -> SearchFilters | None:
        """Filters to search with for a decoded token, or None if it has no preset."""
        if shared is None or shared.location_preset is None:
            return None
        return SearchFilters(
            location=shared.location_preset,
            radius=shared.radius,
            date_range=shared.date_range,
            genres=shared.genres,
            keyword="",
        )
