"""
Nominatim geocoding client.

Resolves free-text UK locations to a single best-match coordinate.
"""

import logging
import time

import httpx

from radar.config import get_settings
from radar.models import GeoLocation

logger = logging.getLogger(__name__)


class GeocoderError(Exception):
    """The geocoding service answered with a non-success status."""

    def __init__(self, status_code: int):
        super().__init__(f"Geocoding failed with status {status_code}")
        self.status_code = status_code


class NominatimGeocoder:
    """Async client for the OpenStreetMap Nominatim search API."""

    def __init__(
        self,
        url: str | None = None,
        user_agent: str | None = None,
        country_code: str | None = None,
    ):
        settings = get_settings()
        self.url = url or settings.nominatim_url
        self.user_agent = user_agent or settings.geocode_user_agent
        self.country_code = country_code or settings.geocode_country_code
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": self.user_agent},
                timeout=30.0,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def geocode(self, query: str) -> GeoLocation | None:
        """
        Look up the best match for a free-text location.

        Args:
            query: Free-text place name or address

        Returns:
            GeoLocation, or None if nothing matched

        Raises:
            GeocoderError: On a non-success response status
            httpx.HTTPError: On transport failures
        """
        client = await self._get_client()
        params = {
            "q": f"{query}, UK",
            "format": "json",
            "limit": "1",
            "countrycodes": self.country_code,
        }

        start_time = time.perf_counter()
        response = await client.get(self.url, params=params)
        elapsed = time.perf_counter() - start_time

        if not response.is_success:
            logger.warning("Nominatim returned %d for %r", response.status_code, query)
            raise GeocoderError(response.status_code)

        data = response.json()
        if not data:
            logger.debug("📭 [Geocode] No match | q=%s duration=%.2fs", query, elapsed)
            return None

        best = data[0]
        location = GeoLocation(
            lat=float(best["lat"]),
            lng=float(best["lon"]),
            display_name=best.get("display_name", ""),
        )
        logger.debug(
            "✅ [Geocode] Match | q=%s lat=%s lng=%s duration=%.2fs",
            query,
            location.lat,
            location.lng,
            elapsed,
        )
        return location

    async def __call__(self, query: str) -> GeoLocation | None:
        return await self.geocode(query)


# Singleton instance
_geocoder: NominatimGeocoder | None = None


def get_geocoder() -> NominatimGeocoder:
    """Get the singleton geocoder."""
    global _geocoder
    if _geocoder is None:
        _geocoder = NominatimGeocoder()
    return _geocoder
