"""
Live integration tests for the Skiddle and Nominatim clients.

These tests hit real API endpoints and are excluded from normal test runs
via pytest markers.

## Running Integration Tests

```bash
export SKIDDLE_API_KEY="your-key"
pytest -m integration radar/services/tests/test_live_sources.py -v
```

Tests pass if no exception occurs and return types match. Empty results
are acceptable (there may be nothing on, or the API may be rate-limited).
"""

import os

import pytest

from radar.models import GeoLocation, NormalizedEvent
from radar.services import (
    DateRangeResolver,
    EventSearchService,
    NominatimGeocoder,
    QueryBuilder,
    SkiddleClient,
)


def skip_if_no_skiddle_key():
    """Skip test if SKIDDLE_API_KEY not set."""
    if not os.getenv("SKIDDLE_API_KEY"):
        pytest.skip("SKIDDLE_API_KEY required for this test")


@pytest.fixture
async def skiddle_client():
    """Create SkiddleClient with cleanup."""
    skip_if_no_skiddle_key()
    client = SkiddleClient()
    yield client
    await client.close()


@pytest.fixture
async def geocoder():
    """Create NominatimGeocoder with cleanup."""
    geocoder = NominatimGeocoder()
    yield geocoder
    await geocoder.close()


@pytest.mark.integration
class TestSkiddleLive:
    """Live tests for the Skiddle search API."""

    @pytest.mark.asyncio
    async def test_search_london_weekend(self, skiddle_client: SkiddleClient):
        bounds = DateRangeResolver().resolve("weekend")
        query = QueryBuilder().build(
            location=GeoLocation(lat=51.5074, lng=-0.1278, display_name="LONDON"),
            genres=["techno"],
            keyword="",
            radius=10,
            bounds=bounds,
        )

        result = await EventSearchService(client=skiddle_client).search(query)

        assert result.configured is True
        assert result.mock is False
        assert isinstance(result.events, list)
        for event in result.events:
            assert isinstance(event, NormalizedEvent)


@pytest.mark.integration
class TestNominatimLive:
    """Live tests for Nominatim geocoding."""

    @pytest.mark.asyncio
    async def test_geocode_manchester(self, geocoder: NominatimGeocoder):
        location = await geocoder.geocode("Manchester")
        assert location is not None
        assert 53 < location.lat < 54
        assert -3 < location.lng < -2
