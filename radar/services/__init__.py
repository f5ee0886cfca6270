"""
Services for the Radar backend.

This module provides the search pipeline (date ranges, query building,
normalization, share links), the provider clients, and the session
objects that manage the asynchronous search lifecycle.

Running a search from filters::

    from radar.services import EventSearchService, SearchSession

    session = SearchSession(provider=EventSearchService())
    await session.start_search(filters)
    first_page = session.page(1)

Sharing filters::

    from radar.services import ShareCodec

    codec = ShareCodec()
    token = codec.encode(filters)            # "RADAR/LONDON/TNO/25MI/WKD"
    shared = codec.decode(token)             # SharedFilters or None

Available Services
------------------
- DateRangeResolver: Symbolic date ranges to calendar-date bounds
- QueryBuilder: Filters to Skiddle provider queries
- EventNormalizer: Raw Skiddle records to NormalizedEvent
- ShareCodec: Filters to/from permalink tokens
- SkiddleClient: Skiddle events search API
- NominatimGeocoder: OpenStreetMap place lookup
- EventSearchService: Provider search plus normalization
- SearchSession: Debounced, single-flight search state
- LocationLookup: Debounced, single-flight location input
"""

from .debounce import Debouncer
from .event_search import (
    CancellationToken,
    EventSearchService,
    SearchCancelledError,
    SearchProvider,
)
from .geocoder import GeocoderError, NominatimGeocoder, get_geocoder
from .location import LocationLookup
from .normalizer import EventNormalizer
from .query_builder import QueryBuilder, build_keyword, clamp_radius
from .search_session import SearchSession, SearchValidationError
from .share_codec import ShareCodec
from .skiddle import SkiddleAPIError, SkiddleClient, get_skiddle_client
from .taxonomy import CITY_PRESETS, GENRE_TAXONOMY, CityPreset, Genre, GenreTaxonomy
from .temporal import DateRangeResolver

__all__ = [
    "CITY_PRESETS",
    "CancellationToken",
    "CityPreset",
    "DateRangeResolver",
    "Debouncer",
    "EventNormalizer",
    "EventSearchService",
    "GENRE_TAXONOMY",
    "Genre",
    "GenreTaxonomy",
    "GeocoderError",
    "LocationLookup",
    "NominatimGeocoder",
    "QueryBuilder",
    "SearchCancelledError",
    "SearchProvider",
    "SearchSession",
    "SearchValidationError",
    "ShareCodec",
    "SkiddleAPIError",
    "SkiddleClient",
    "build_keyword",
    "clamp_radius",
    "get_geocoder",
    "get_skiddle_client",
]
