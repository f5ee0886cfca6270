"""
Skiddle API client for event discovery.

Provides an async method to search events near a point. Results are
returned raw; normalization happens in ``radar.services.normalizer``.

API documentation: https://github.com/Skiddle/web-api/wiki
"""

import logging
import time
from typing import Any

import httpx

from radar.config import get_settings
from radar.models import ProviderQuery

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


class SkiddleAPIError(Exception):
    """Skiddle answered with a non-success status."""

    def __init__(self, status_code: int, detail: str = ""):
        super().__init__(f"Skiddle API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class SkiddleClient:
    """Async client for the Skiddle events search API."""

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.skiddle_api_key
        self.base_url = base_url or settings.skiddle_base_url
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Accept": "application/json"},
                timeout=30.0,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def search_events(self, query: ProviderQuery) -> dict[str, Any]:
        """
        Search for events around a point.

        Args:
            query: Provider query (coordinates, radius, keyword expression, dates)

        Returns:
            Raw response payload with ``results`` (list) and ``totalcount``

        Raises:
            SkiddleAPIError: On a non-success response status
            httpx.HTTPError: On transport failures
        """
        client = await self._get_client()

        params: dict[str, Any] = {
            "api_key": self.api_key,
            "latitude": str(query.lat),
            "longitude": str(query.lng),
            "radius": str(query.radius_miles),
            "keyword": query.keyword_expression,
            "order": "distance",
            "description": "1",
            "limit": str(SEARCH_LIMIT),
        }
        if query.min_date:
            params["minDate"] = query.min_date
        if query.max_date:
            params["maxDate"] = query.max_date

        logger.debug(
            "📤 [Skiddle] Outbound query | lat=%s lng=%s radius=%s keyword='%s' min=%s max=%s",
            query.lat,
            query.lng,
            query.radius_miles,
            query.keyword_expression,
            query.min_date,
            query.max_date,
        )
        start_time = time.perf_counter()

        response = await client.get("/events/search/", params=params)
        elapsed = time.perf_counter() - start_time

        if not response.is_success:
            detail = response.text[:200]
            logger.debug(
                "❌ [Skiddle] Error response | status=%d duration=%.2fs",
                response.status_code,
                elapsed,
            )
            logger.warning("Skiddle API returned %d: %s", response.status_code, detail)
            raise SkiddleAPIError(response.status_code, detail)

        data = response.json()
        if not isinstance(data, dict):
            data = {}
        results = data.get("results")
        if not isinstance(results, list):
            results = []

        logger.debug(
            "✅ [Skiddle] Complete | results=%d total=%s duration=%.2fs",
            len(results),
            data.get("totalcount"),
            elapsed,
        )
        return {"results": results, "totalcount": data.get("totalcount")}


# Singleton instance
_client: SkiddleClient | None = None


def get_skiddle_client() -> SkiddleClient:
    """Get the singleton Skiddle client."""
    global _client
    if _client is None:
        _client = SkiddleClient()
    return _client
