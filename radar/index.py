"""API endpoints for Radar event discovery."""

import logging
import math
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from radar.config import Settings, configure_logging, get_settings
from radar.models import GeoLocation, SearchResponse, SharedFilters
from radar.models.base import CamelModel
from radar.services import (
    EventSearchService,
    GeocoderError,
    NominatimGeocoder,
    QueryBuilder,
    ShareCodec,
    SkiddleAPIError,
    get_geocoder,
    get_skiddle_client,
)

load_dotenv()

# Configure logging from settings (uses LOG_LEVEL env var)
configure_logging()
logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _iso_date_only(value: str | None) -> str | None:
    """Return ``value`` if it is YYYY-MM-DD, else None."""
    if value and _ISO_DATE.fullmatch(value):
        return value
    return None


def _parse_coordinate(value: str) -> float | None:
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _split_genres(value: str | None) -> list[str]:
    if not value:
        return []
    return [g.strip().lower() for g in value.split(",") if g.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await get_skiddle_client().close()
    await get_geocoder().close()


app = FastAPI(title="Radar API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_event_search_service() -> EventSearchService:
    """Event search backed by the shared Skiddle client."""
    return EventSearchService()


def get_query_builder() -> QueryBuilder:
    return QueryBuilder()


def get_share_codec() -> ShareCodec:
    return ShareCodec()


class ShareEncodeResponse(CamelModel):
    """Response body for share link encoding."""

    token: str
    fragment: str


class ShareDecodeResponse(CamelModel):
    """Response body for share link decoding. ``shared`` is None for bad tokens."""

    shared: SharedFilters | None = None


@app.get("/")
def root():
    """Root endpoint."""
    return {"status": "ok"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/events", response_model=SearchResponse)
async def search_events(
    response: Response,
    lat: str | None = None,
    lng: str | None = None,
    radius: str | None = None,
    min_date: str | None = Query(default=None, alias="minDate"),
    max_date: str | None = Query(default=None, alias="maxDate"),
    genres: str | None = None,
    keyword: str | None = None,
    settings: Settings = Depends(get_settings),
    service: EventSearchService = Depends(get_event_search_service),
    builder: QueryBuilder = Depends(get_query_builder),
):
    """Search events around a point.

    Always answers with a well-formed result set, even when the provider
    key is not configured.
    """
    if not lat or not lng:
        raise HTTPException(status_code=400, detail="lat and lng are required")

    lat_value = _parse_coordinate(lat)
    lng_value = _parse_coordinate(lng)
    if lat_value is None or lng_value is None:
        raise HTTPException(status_code=400, detail="lat and lng must be numbers")

    query = builder.build(
        location=GeoLocation(lat=lat_value, lng=lng_value),
        genres=_split_genres(genres),
        keyword=keyword,
        radius=radius or "25",
    )
    query.min_date = _iso_date_only(min_date)
    query.max_date = _iso_date_only(max_date)

    try:
        result = await service.search(query)
    except SkiddleAPIError as e:
        raise HTTPException(
            status_code=502, detail=f"Skiddle API error ({e.status_code})"
        ) from e
    except Exception as e:
        logger.error("Error fetching events: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch events") from e

    response.headers["Cache-Control"] = f"public, max-age={settings.events_cache_max_age}"
    return result


@app.get("/api/geocode", response_model=GeoLocation)
async def geocode(
    response: Response,
    q: str | None = None,
    settings: Settings = Depends(get_settings),
    geocoder: NominatimGeocoder = Depends(get_geocoder),
):
    """Resolve a free-text UK location to coordinates."""
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Missing query parameter 'q'")

    try:
        location = await geocoder.geocode(q.strip())
    except GeocoderError as e:
        raise HTTPException(status_code=502, detail="Geocoding failed") from e
    except Exception as e:
        logger.error("Geocoding service error: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Geocoding service error") from e

    if location is None:
        raise HTTPException(status_code=404, detail="Location not found")

    max_age = settings.geocode_cache_max_age
    response.headers["Cache-Control"] = f"public, max-age={max_age}, s-maxage={max_age}"
    return location


@app.get("/api/share/encode", response_model=ShareEncodeResponse)
def share_encode(
    location: str = "",
    radius: str | None = None,
    date_range: str | None = Query(default=None, alias="dateRange"),
    genres: str | None = None,
    codec: ShareCodec = Depends(get_share_codec),
):
    """Encode filters as a share token."""
    token = codec.encode_parts(
        location_label=location,
        genres=_split_genres(genres),
        radius=radius,
        date_range=date_range,
    )
    return ShareEncodeResponse(token=token, fragment=f"#{token}")


@app.get("/api/share/decode", response_model=ShareDecodeResponse)
def share_decode(token: str = "", codec: ShareCodec = Depends(get_share_codec)):
    """Decode a share token. Malformed tokens give ``shared: null``, never an error."""
    return ShareDecodeResponse(shared=codec.decode(token))
