"""
Location lookup for free-text location input.

Debounced and single-flight: only the most recent lookup may update the
state, so a slow answer for an old query never replaces a newer one.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from radar.config import get_settings
from radar.models import GeoLocation, LocationLookupState
from radar.services.debounce import Debouncer

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
CURRENT_LOCATION = "CURRENT LOCATION"
NOT_FOUND = "Location not found"
LOOKUP_FAILED = "Search failed"

Geocode = Callable[[str], Awaitable[GeoLocation | None]]


class LocationLookup:
    """Resolve typed locations to coordinates for a search session."""

    def __init__(self, geocoder: Geocode, debounce_seconds: float | None = None) -> None:
        settings = get_settings()
        self._geocoder = geocoder
        self.state = LocationLookupState()
        self._sequence = 0
        self._debouncer = Debouncer(
            settings.geocode_debounce_seconds if debounce_seconds is None else debounce_seconds
        )

    async def lookup(self, query: str) -> GeoLocation | None:
        """
        Geocode ``query`` now.

        Returns:
            The resolved location (labelled with the upper-cased query), or
            None if nothing matched, the lookup failed, or it went stale
        """
        text = query.strip()
        if not text:
            return None

        self._sequence += 1
        sequence = self._sequence
        self.state.searching = True
        self.state.error = None

        try:
            match = await self._geocoder(text)
        except Exception as e:
            if sequence != self._sequence:
                return None
            logger.warning("Location lookup failed for %r: %s", text, e)
            self.state.searching = False
            self.state.error = LOOKUP_FAILED
            return None

        if sequence != self._sequence:
            logger.debug("[Location] Discarding stale lookup | q=%s", text)
            return None

        self.state.searching = False
        if match is None:
            self.state.error = NOT_FOUND
            return None

        location = GeoLocation(lat=match.lat, lng=match.lng, display_name=text.upper())
        self.state.location = location
        return location

    def request_lookup(self, query: str) -> None:
        """Schedule a lookup once typing pauses; short queries are ignored."""
        self.state.error = None
        if len(query.strip()) < MIN_QUERY_LENGTH:
            self._debouncer.cancel()
            return
        self._debouncer.call(lambda: self.lookup(query))

    async def submit(self, query: str) -> GeoLocation | None:
        """Look up immediately, dropping any scheduled lookup."""
        self._debouncer.cancel()
        return await self.lookup(query)

    def use_coordinates(self, lat: float, lng: float) -> GeoLocation:
        """Use device coordinates directly, superseding any lookup."""
        self._debouncer.cancel()
        self._sequence += 1
        location = GeoLocation(lat=lat, lng=lng, display_name=CURRENT_LOCATION)
        self.state = LocationLookupState(location=location)
        return location

    async def flush(self) -> None:
        """Wait for any scheduled and running lookups."""
        await self._debouncer.wait()
