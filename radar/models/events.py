"""Event models for normalized search results."""

from typing import Literal

from pydantic import Field

from radar.models.base import CamelModel


class EventVenue(CamelModel):
    """Where an event takes place. Coordinates are always finite."""

    name: str
    address: str | None = None
    city: str | None = None
    lat: float
    lng: float


class NormalizedEvent(CamelModel):
    """An event in the canonical shape shared by every consumer."""

    id: str
    provider: Literal["skiddle"] = "skiddle"
    title: str
    start_date_time: str = Field(description="Local datetime, YYYY-MM-DDTHH:MM:SS")
    end_date_time: str | None = Field(default=None, description="Local datetime, if known")
    venue: EventVenue
    price_text: str | None = None
    link: str
    genres: list[str] = Field(default_factory=list)


class SearchResponse(CamelModel):
    """Result of one provider search."""

    events: list[NormalizedEvent] = Field(default_factory=list)
    total: int = 0
    mock: bool = Field(default=False, description="True when the events are demo data")
    configured: bool = Field(
        default=True, description="False when no provider key is configured"
    )


class EventPage(CamelModel):
    """One page of a result list."""

    events: list[NormalizedEvent]
    page: int
    total_pages: int
    start: int = Field(description="1-based index of the first event on this page")
    end: int = Field(description="1-based index of the last event on this page")
    total: int
