"""Search filter and query models."""

from enum import Enum

from pydantic import Field, field_validator

from radar.models.base import CamelModel


class DateRangeSelector(str, Enum):
    """Symbolic date range a user can pick."""

    TONIGHT = "tonight"
    WEEKEND = "weekend"
    NEXT_7 = "next7"
    NEXT_14 = "next14"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: object) -> "DateRangeSelector | None":
        """Parse a selector, accepting the older '7days'/'14days' spellings."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        text = str(value).strip().lower()
        text = _SELECTOR_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError:
            return None


_SELECTOR_ALIASES = {"7days": "next7", "14days": "next14"}


class GeoLocation(CamelModel):
    """A geocoded point with the label shown to the user."""

    lat: float
    lng: float
    display_name: str = ""


class DateBounds(CamelModel):
    """Inclusive calendar-date bounds, YYYY-MM-DD."""

    min_date: str
    max_date: str


class SearchFilters(CamelModel):
    """User-editable search filters, passed by value into each search."""

    location: GeoLocation | None = None
    radius: int = Field(default=25, ge=1, le=250, description="Radius in miles")
    date_range: DateRangeSelector = DateRangeSelector.NEXT_7
    custom_start: str | None = None
    custom_end: str | None = None
    genres: list[str] = Field(default_factory=list)
    keyword: str = ""

    @field_validator("date_range", mode="before")
    @classmethod
    def _parse_date_range(cls, value: object) -> object:
        return DateRangeSelector.parse(value) or value

    @field_validator("genres")
    @classmethod
    def _canonical_genres(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for genre in value:
            name = genre.strip().lower()
            if name and name not in seen:
                seen.append(name)
        return seen

    @field_validator("keyword")
    @classmethod
    def _strip_keyword(cls, value: str) -> str:
        return value.strip()


class ProviderQuery(CamelModel):
    """Query sent to the events provider."""

    lat: float
    lng: float
    radius_miles: int
    keyword_expression: str
    min_date: str | None = None
    max_date: str | None = None


class SharedFilters(CamelModel):
    """Filters recovered from a permalink token."""

    location_key: str
    location_preset: GeoLocation | None = None
    radius: int
    genres: list[str] = Field(default_factory=list)
    date_range: DateRangeSelector
