"""API data models for Radar."""

from .events import EventPage, EventVenue, NormalizedEvent, SearchResponse
from .search import (
    DateBounds,
    DateRangeSelector,
    GeoLocation,
    ProviderQuery,
    SearchFilters,
    SharedFilters,
)
from .session import LocationLookupState, SearchSessionState

__all__ = [
    "DateBounds",
    "DateRangeSelector",
    "EventPage",
    "EventVenue",
    "GeoLocation",
    "LocationLookupState",
    "NormalizedEvent",
    "ProviderQuery",
    "SearchFilters",
    "SearchResponse",
    "SearchSessionState",
    "SharedFilters",
]
