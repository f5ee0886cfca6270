"""Observable state for search and location lookup flows."""

from pydantic import Field

from radar.models.base import CamelModel
from radar.models.events import NormalizedEvent
from radar.models.search import GeoLocation


class SearchSessionState(CamelModel):
    """What a results view renders."""

    events: list[NormalizedEvent] = Field(default_factory=list)
    total: int = 0
    loading: bool = False
    error: str | None = None
    mock: bool = False
    page: int = 1


class LocationLookupState(CamelModel):
    """What a location input renders."""

    location: GeoLocation | None = None
    searching: bool = False
    error: str | None = None
