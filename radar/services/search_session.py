"""
Search session: the lifecycle of one user's event searches.

A session owns the observable result state and guarantees that only the
most recently issued search can change it. Each search gets a
``CancellationToken`` with an increasing sequence number; starting a new
search cancels the previous token and its in-flight provider call. A
response is applied only if its token is still the current one, whatever
order the network calls complete in.
"""

from __future__ import annotations

import asyncio
import logging
import math

from radar.config import get_settings
from radar.models import EventPage, ProviderQuery, SearchFilters, SearchSessionState
from radar.services.debounce import Debouncer
from radar.services.event_search import (
    CancellationToken,
    SearchCancelledError,
    SearchProvider,
)
from radar.services.query_builder import QueryBuilder
from radar.services.temporal import DateRangeResolver

logger = logging.getLogger(__name__)

LOCATION_REQUIRED = "Set a location to search"
SEARCH_FAILED = "Failed to load events. Try again."
EVENTS_PER_PAGE = 4


class SearchValidationError(ValueError):
    """Filters are not complete enough to search."""


class SearchSession:
    """
    Owns search state for one user.

    Usage:
        session = SearchSession(provider=EventSearchService())
        await session.start_search(filters)      # immediate
        session.request_search(filters)          # debounced
        page = session.page(2)
    """

    def __init__(
        self,
        provider: SearchProvider,
        resolver: DateRangeResolver | None = None,
        query_builder: QueryBuilder | None = None,
        debounce_seconds: float | None = None,
        per_page: int = EVENTS_PER_PAGE,
    ) -> None:
        settings = get_settings()
        self._provider = provider
        self.resolver = resolver or DateRangeResolver(user_timezone=settings.user_timezone)
        self.query_builder = query_builder or QueryBuilder()
        self.per_page = per_page
        self.state = SearchSessionState()

        self._sequence = 0
        self._current: CancellationToken | None = None
        self._inflight: asyncio.Future | None = None
        self._debouncer = Debouncer(
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )

    @property
    def is_searching(self) -> bool:
        """True while a search is in flight."""
        return self._current is not None

    @property
    def sequence(self) -> int:
        """Sequence number of the most recently issued search."""
        return self._sequence

    def build_query(self, filters: SearchFilters) -> ProviderQuery:
        """
        Build the provider query for ``filters``.

        Raises:
            SearchValidationError: If no location is set
        """
        if filters.location is None:
            raise SearchValidationError(LOCATION_REQUIRED)

        bounds = self.resolver.resolve(
            filters.date_range, filters.custom_start, filters.custom_end
        )
        return self.query_builder.build(
            location=filters.location,
            genres=filters.genres,
            keyword=filters.keyword,
            radius=filters.radius,
            bounds=bounds,
        )

    async def start_search(self, filters: SearchFilters) -> bool:
        """
        Issue a search now, superseding any search in flight.

        Args:
            filters: Current filters

        Returns:
            True if this search set the final state, False if it was superseded

        Raises:
            SearchValidationError: If no location is set (state is left unchanged)
        """
        query = self.build_query(filters)
        token = self._issue_token()

        self.state.loading = True
        self.state.error = None
        logger.debug(
            "🔍 [Session] Search started | seq=%d keyword='%s' radius=%d dates=%s..%s",
            token.sequence,
            query.keyword_expression,
            query.radius_miles,
            query.min_date,
            query.max_date,
        )

        inflight = asyncio.ensure_future(self._provider(query, token))
        self._inflight = inflight
        try:
            response = await inflight
        except (asyncio.CancelledError, SearchCancelledError):
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                # This caller was cancelled from outside, not superseded
                if self._is_current(token):
                    self._settle()
                raise
            if self._is_current(token):
                self._settle()
            logger.debug("[Session] Search superseded | seq=%d", token.sequence)
            return False
        except Exception as e:
            if not self._is_current(token):
                return False
            logger.warning("Search #%d failed: %s", token.sequence, e)
            self._settle()
            # Previous results stay visible; only the error is shown
            self.state.error = SEARCH_FAILED
            return True

        if not self._is_current(token):
            logger.debug("[Session] Discarding stale response | seq=%d", token.sequence)
            return False

        self._settle()
        self.state.events = response.events
        self.state.total = response.total
        self.state.mock = response.mock
        self.state.page = 1
        logger.debug(
            "✅ [Session] Search complete | seq=%d events=%d total=%d",
            token.sequence,
            len(response.events),
            response.total,
        )
        return True

    def request_search(self, filters: SearchFilters) -> None:
        """Schedule a search once filters have been stable for the debounce window."""
        self._debouncer.call(lambda: self._debounced_search(filters))

    async def flush(self) -> None:
        """Wait for any scheduled and running debounced searches."""
        await self._debouncer.wait()

    def cancel(self) -> None:
        """Drop any scheduled search and invalidate the one in flight."""
        self._debouncer.cancel()
        if self._current is not None:
            self._current.cancel()
            self._current = None
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None
        self.state.loading = False

    def page(self, number: int) -> EventPage:
        """Return one page of the current results, clamping to the valid range."""
        events = self.state.events
        total_pages = math.ceil(len(events) / self.per_page)
        number = max(1, min(number, total_pages or 1))
        self.state.page = number

        start = (number - 1) * self.per_page
        visible = events[start : start + self.per_page]
        return EventPage(
            events=visible,
            page=number,
            total_pages=total_pages,
            start=start + 1 if visible else 0,
            end=start + len(visible),
            total=len(events),
        )

    async def _debounced_search(self, filters: SearchFilters) -> None:
        try:
            await self.start_search(filters)
        except SearchValidationError as e:
            self.state.error = str(e)

    def _issue_token(self) -> CancellationToken:
        if self._current is not None:
            self._current.cancel()
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

        self._sequence += 1
        self._current = CancellationToken(sequence=self._sequence)
        return self._current

    def _is_current(self, token: CancellationToken) -> bool:
        return self._current is token and not token.cancelled

    def _settle(self) -> None:
        self._current = None
        self._inflight = None
        self.state.loading = False
