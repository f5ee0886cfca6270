"""
Normalization of raw Skiddle event records.

Each raw record either becomes a ``NormalizedEvent`` or is dropped.
Drops never raise; they are counted per reason in ``EventNormalizer.stats``
so result-count gaps can be diagnosed from logs.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from radar.models import EventVenue, NormalizedEvent

logger = logging.getLogger(__name__)

PROVIDER = "skiddle"
PROVIDER_HOME_URL = "https://www.skiddle.com/"
DEFAULT_DOORS_OPEN = "23:00"
DEFAULT_VENUE_NAME = "TBA"
DEFAULT_TITLE = "Untitled Event"
CURRENCY_SYMBOL = "£"

# Drop reasons
MISSING_DATE = "missing_date"
INVALID_COORDINATES = "invalid_coordinates"
INVALID_DATETIME = "invalid_datetime"
NOT_A_RECORD = "not_a_record"
INVALID_FIELDS = "invalid_fields"


def _parse_coordinate(value: Any) -> float | None:
    """Parse a coordinate; None unless it is a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _compose_datetime(date_only: str, time_of_day: str) -> str | None:
    """Join a date and an H:MM[:SS] time as YYYY-MM-DDTHH:MM:SS, or None if invalid."""
    try:
        day = datetime.strptime(date_only, "%Y-%m-%d")
    except ValueError:
        return None

    for time_format in ("%H:%M", "%H:%M:%S"):
        try:
            clock = datetime.strptime(time_of_day, time_format)
        except ValueError:
            continue
        return datetime.combine(day.date(), clock.time()).strftime("%Y-%m-%dT%H:%M:%S")
    return None


class EventNormalizer:
    """Map raw provider records to ``NormalizedEvent``."""

    def __init__(self) -> None:
        self.stats: Counter[str] = Counter()

    @property
    def dropped(self) -> int:
        """Total records dropped since the last reset."""
        return sum(count for reason, count in self.stats.items() if reason != "accepted")

    def reset_stats(self) -> None:
        self.stats.clear()

    def normalize(self, record: Any) -> NormalizedEvent | None:
        """
        Normalize one raw record.

        Args:
            record: Raw event dict as returned by the Skiddle search API

        Returns:
            NormalizedEvent, or None if the record was dropped
        """
        if not isinstance(record, dict):
            return self._drop(NOT_A_RECORD, record)

        raw_date = record.get("date") or record.get("startdate")
        if not raw_date:
            return self._drop(MISSING_DATE, record)
        # startdate may carry a full timestamp; only the calendar date is used
        date_only = str(raw_date).split("T", 1)[0].strip()

        venue = record.get("venue")
        if not isinstance(venue, dict):
            venue = {}
        lat = _parse_coordinate(venue.get("latitude"))
        lng = _parse_coordinate(venue.get("longitude"))
        if lat is None or lng is None:
            return self._drop(INVALID_COORDINATES, record)

        opening = record.get("openingtimes")
        if not isinstance(opening, dict):
            opening = {}
        start = _compose_datetime(
            date_only, str(opening.get("doorsopen") or DEFAULT_DOORS_OPEN).strip()
        )
        if start is None:
            return self._drop(INVALID_DATETIME, record)

        end = None
        if opening.get("doorsclose"):
            end = _compose_datetime(date_only, str(opening["doorsclose"]).strip())

        raw_id = record.get("id")
        event_id = "" if raw_id is None else str(raw_id)
        entry_price = record.get("entryprice")
        genres = [
            g["name"]
            for g in record.get("genres") or []
            if isinstance(g, dict) and g.get("name")
        ]

        try:
            event = NormalizedEvent(
                id=event_id,
                provider=PROVIDER,
                title=record.get("eventname") or DEFAULT_TITLE,
                start_date_time=start,
                end_date_time=end,
                venue=EventVenue(
                    name=venue.get("name") or DEFAULT_VENUE_NAME,
                    address=venue.get("address") or None,
                    city=venue.get("town") or None,
                    lat=lat,
                    lng=lng,
                ),
                price_text=f"From {CURRENCY_SYMBOL}{entry_price}" if entry_price else None,
                link=record.get("link") or PROVIDER_HOME_URL,
                genres=genres,
            )
        except ValueError as e:
            logger.debug("[Normalize] Invalid field values | error=%s", e)
            return self._drop(INVALID_FIELDS, record)

        self.stats["accepted"] += 1
        return event

    def normalize_many(self, records: Iterable[Any]) -> list[NormalizedEvent]:
        """Normalize a batch, keeping order and skipping dropped records."""
        events = []
        for record in records:
            event = self.normalize(record)
            if event is not None:
                events.append(event)

        if self.dropped:
            logger.debug(
                "[Normalize] Dropped records | accepted=%d dropped=%d reasons=%s",
                self.stats["accepted"],
                self.dropped,
                dict((k, v) for k, v in self.stats.items() if k != "accepted"),
            )
        return events

    def _drop(self, reason: str, record: Any) -> None:
        self.stats[reason] += 1
        record_id = record.get("id") if isinstance(record, dict) else None
        logger.debug("[Normalize] Dropping record | id=%s reason=%s", record_id, reason)
        return None
