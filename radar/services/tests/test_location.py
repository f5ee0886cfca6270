"""Tests for LocationLookup."""

import asyncio

import pytest

from radar.models import GeoLocation
from radar.services.location import (
    CURRENT_LOCATION,
    LOOKUP_FAILED,
    NOT_FOUND,
    LocationLookup,
)

LEEDS = GeoLocation(lat=53.8008, lng=-1.5491, display_name="Leeds, West Yorkshire, England")
YORK = GeoLocation(lat=53.9600, lng=-1.0873, display_name="York, England")


class FakeGeocoder:
    """Geocoder answering from a fixed table."""

    def __init__(self, places=None, error: Exception | None = None):
        self.places = places or {}
        self.error = error
        self.queries: list[str] = []

    async def __call__(self, query: str) -> GeoLocation | None:
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.places.get(query.lower())


class TestLookup:
    """Tests for immediate lookups."""

    @pytest.mark.asyncio
    async def test_match_is_labelled_with_query(self):
        lookup = LocationLookup(FakeGeocoder({"leeds": LEEDS}), debounce_seconds=0)

        location = await lookup.lookup(" Leeds ")

        assert location == GeoLocation(lat=LEEDS.lat, lng=LEEDS.lng, display_name="LEEDS")
        assert lookup.state.location == location
        assert lookup.state.searching is False
        assert lookup.state.error is None

    @pytest.mark.asyncio
    async def test_not_found(self):
        lookup = LocationLookup(FakeGeocoder(), debounce_seconds=0)
        assert await lookup.lookup("Atlantis") is None
        assert lookup.state.error == NOT_FOUND
        assert lookup.state.searching is False

    @pytest.mark.asyncio
    async def test_failure(self):
        lookup = LocationLookup(FakeGeocoder(error=RuntimeError("offline")), debounce_seconds=0)
        assert await lookup.lookup("Leeds") is None
        assert lookup.state.error == LOOKUP_FAILED
        assert lookup.state.searching is False

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_location(self):
        geocoder = FakeGeocoder({"leeds": LEEDS})
        lookup = LocationLookup(geocoder, debounce_seconds=0)
        await lookup.lookup("Leeds")

        geocoder.error = RuntimeError("offline")
        await lookup.lookup("York")

        assert lookup.state.location.display_name == "LEEDS"

    @pytest.mark.asyncio
    async def test_blank_query_is_ignored(self):
        geocoder = FakeGeocoder()
        lookup = LocationLookup(geocoder, debounce_seconds=0)
        assert await lookup.lookup("   ") is None
        assert geocoder.queries == []

    @pytest.mark.asyncio
    async def test_stale_lookup_is_discarded(self):
        """A slow answer for an old query never replaces a newer one."""
        release = asyncio.Event()

        async def geocode(query: str):
            if query == "Leeds":
                await release.wait()
                return LEEDS
            return YORK

        lookup = LocationLookup(geocode, debounce_seconds=0)
        slow = asyncio.create_task(lookup.lookup("Leeds"))
        await asyncio.sleep(0)

        assert (await lookup.lookup("York")).display_name == "YORK"
        release.set()
        assert await slow is None
        assert lookup.state.location.display_name == "YORK"


class TestDebouncedLookup:
    """Tests for lookups driven by typing."""

    @pytest.mark.asyncio
    async def test_typing_burst_looks_up_once(self):
        geocoder = FakeGeocoder({"leeds": LEEDS})
        lookup = LocationLookup(geocoder, debounce_seconds=0.01)

        for text in ("Le", "Lee", "Leed", "Leeds"):
            lookup.request_lookup(text)
        await lookup.flush()

        assert geocoder.queries == ["Leeds"]
        assert lookup.state.location.display_name == "LEEDS"

    @pytest.mark.asyncio
    async def test_short_query_is_ignored(self):
        geocoder = FakeGeocoder()
        lookup = LocationLookup(geocoder, debounce_seconds=0.01)

        lookup.request_lookup("L")
        await lookup.flush()

        assert geocoder.queries == []

    @pytest.mark.asyncio
    async def test_short_query_drops_pending_lookup(self):
        geocoder = FakeGeocoder()
        lookup = LocationLookup(geocoder, debounce_seconds=0.01)

        lookup.request_lookup("Leeds")
        lookup.request_lookup("L")
        await lookup.flush()

        assert geocoder.queries == []

    @pytest.mark.asyncio
    async def test_submit_runs_immediately(self):
        geocoder = FakeGeocoder({"york": YORK})
        lookup = LocationLookup(geocoder, debounce_seconds=10)

        lookup.request_lookup("Yor")
        location = await lookup.submit("York")
        await lookup.flush()

        assert location.display_name == "YORK"
        assert geocoder.queries == ["York"]


class TestUseCoordinates:
    """Tests for device coordinates."""

    @pytest.mark.asyncio
    async def test_supersedes_pending_lookup(self):
        release = asyncio.Event()

        async def geocode(query: str):
            await release.wait()
            return LEEDS

        lookup = LocationLookup(geocode, debounce_seconds=0)
        slow = asyncio.create_task(lookup.lookup("Leeds"))
        await asyncio.sleep(0)

        location = lookup.use_coordinates(51.45, -2.58)
        release.set()
        await slow

        assert location.display_name == CURRENT_LOCATION
        assert lookup.state.location == location
        assert lookup.state.searching is False
