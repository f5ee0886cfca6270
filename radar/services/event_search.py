"""
Event search against the configured provider.

Executes a ``ProviderQuery`` with the Skiddle client and normalizes the
raw records. This is the provider collaborator used by both the HTTP
endpoint and ``SearchSession``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol
from zoneinfo import ZoneInfo

from radar.config import get_settings
from radar.models import ProviderQuery, SearchResponse
from radar.services.mock_events import get_mock_events
from radar.services.normalizer import EventNormalizer
from radar.services.skiddle import SkiddleClient, get_skiddle_client

logger = logging.getLogger(__name__)


class SearchCancelledError(Exception):
    """A search was superseded before it completed."""


@dataclass
class CancellationToken:
    """Identifies one issued search; cancelled when a newer one starts."""

    sequence: int
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise SearchCancelledError(f"search #{self.sequence} was superseded")


class SearchProvider(Protocol):
    """Anything that can execute a provider query."""

    async def __call__(
        self, query: ProviderQuery, token: CancellationToken | None = None
    ) -> SearchResponse: ...


def _parse_total(value: Any, fallback: int) -> int:
    try:
        total = int(value)
    except (TypeError, ValueError):
        return fallback
    return total or fallback


class EventSearchService:
    """Search the provider and return normalized events."""

    def __init__(
        self,
        client: SkiddleClient | None = None,
        demo_mode: bool | None = None,
        today: Callable[[], date] | None = None,
    ):
        settings = get_settings()
        self.client = client or get_skiddle_client()
        self.demo_mode = settings.demo_mode if demo_mode is None else demo_mode
        tz = ZoneInfo(settings.user_timezone)
        self._today = today or (lambda: datetime.now(tz).date())

    @property
    def is_configured(self) -> bool:
        return self.client.is_configured

    async def search(
        self, query: ProviderQuery, token: CancellationToken | None = None
    ) -> SearchResponse:
        """
        Run one provider search.

        Args:
            query: Query to execute
            token: Optional cancellation token, checked before and after the call

        Returns:
            SearchResponse with normalized events

        Raises:
            SearchCancelledError: If the token was cancelled
            SkiddleAPIError: On an upstream non-success status
        """
        if token:
            token.raise_if_cancelled()

        if not self.is_configured:
            if self.demo_mode:
                events = get_mock_events(self._today())
                return SearchResponse(
                    events=events, total=len(events), mock=True, configured=False
                )
            logger.info("Skiddle API key not configured, returning empty results")
            return SearchResponse(events=[], total=0, mock=False, configured=False)

        data = await self.client.search_events(query)
        if token:
            token.raise_if_cancelled()

        normalizer = EventNormalizer()
        events = normalizer.normalize_many(data.get("results") or [])
        if normalizer.dropped:
            logger.info(
                "Dropped %d of %d Skiddle records during normalization",
                normalizer.dropped,
                normalizer.dropped + len(events),
            )

        return SearchResponse(
            events=events,
            total=_parse_total(data.get("totalcount"), len(events)),
            mock=False,
            configured=True,
        )

    async def __call__(
        self, query: ProviderQuery, token: CancellationToken | None = None
    ) -> SearchResponse:
        return await self.search(query, token)
