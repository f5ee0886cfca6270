"""
Date range resolution for symbolic date filters.

Maps selectors like 'tonight' or 'weekend' to inclusive calendar-date
bounds for provider queries. "Now" comes from an injected clock.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from radar.models import DateBounds, DateRangeSelector

# Weekday numbers (Monday=0, Sunday=6)
_FRIDAY = 4
_SUNDAY = 6


def _iso(day: date) -> str:
    return day.strftime("%Y-%m-%d")


class DateRangeResolver:
    """
    Resolve a date range selector into concrete ``DateBounds``.

    Never raises: an unknown selector resolves to today only.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        user_timezone: str = "Europe/London",
    ) -> None:
        self.tz = ZoneInfo(user_timezone)
        self._clock = clock or (lambda: datetime.now(self.tz))

        self._handlers: dict[DateRangeSelector, Callable[[date], tuple[date, date]]] = {
            DateRangeSelector.TONIGHT: self._tonight,
            DateRangeSelector.WEEKEND: self._weekend,
            DateRangeSelector.NEXT_7: lambda today: (today, today + timedelta(days=7)),
            DateRangeSelector.NEXT_14: lambda today: (today, today + timedelta(days=14)),
        }

    def today(self) -> date:
        """Today's date according to the clock, in the user's timezone."""
        now = self._clock()
        if now.tzinfo is not None:
            now = now.astimezone(self.tz)
        return now.date()

    def resolve(
        self,
        selector: DateRangeSelector | str | None,
        custom_start: str | None = None,
        custom_end: str | None = None,
    ) -> DateBounds:
        """
        Resolve ``selector`` against the clock.

        Args:
            selector: Date range selector (enum or its string value)
            custom_start: Inclusive start for 'custom', YYYY-MM-DD
            custom_end: Inclusive end for 'custom', YYYY-MM-DD

        Returns:
            DateBounds with min_date/max_date as YYYY-MM-DD
        """
        today = self.today()
        parsed = DateRangeSelector.parse(selector)

        if parsed is DateRangeSelector.CUSTOM:
            # Bounds are passed through as given, even when start > end.
            return DateBounds(
                min_date=custom_start or _iso(today),
                max_date=custom_end or _iso(today),
            )

        handler = self._handlers.get(parsed) if parsed else None
        start, end = handler(today) if handler else self._tonight(today)
        return DateBounds(min_date=_iso(start), max_date=_iso(end))

    def _tonight(self, today: date) -> tuple[date, date]:
        return today, today

    def _weekend(self, today: date) -> tuple[date, date]:
        """Upcoming Friday through Sunday; from today if already Fri-Sun."""
        weekday = today.weekday()
        if weekday >= _FRIDAY:
            return today, today + timedelta(days=_SUNDAY - weekday)

        friday = today + timedelta(days=_FRIDAY - weekday)
        return friday, friday + timedelta(days=2)
