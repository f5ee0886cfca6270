"""Tests for Radar API endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from radar.index import app, get_event_search_service
from radar.models import GeoLocation
from radar.services import EventSearchService, GeocoderError, SkiddleAPIError, SkiddleClient
from radar.services.geocoder import get_geocoder


@pytest.fixture
def client():
    """Create a test client for the API."""
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def skiddle():
    """A configured Skiddle client double, wired into the events endpoint."""
    mock = MagicMock(spec=SkiddleClient)
    mock.is_configured = True
    mock.search_events = AsyncMock(return_value={"results": [], "totalcount": 0})
    app.dependency_overrides[get_event_search_service] = lambda: EventSearchService(
        client=mock, demo_mode=False
    )
    return mock


@pytest.fixture
def geocoder():
    mock = MagicMock()
    mock.geocode = AsyncMock(return_value=None)
    app.dependency_overrides[get_geocoder] = lambda: mock
    return mock


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_health_returns_healthy(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_returns_ok(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestEventsEndpoint:
    """Test /api/events."""

    def test_missing_coordinates(self, client: TestClient) -> None:
        """Test lat and lng are required."""
        response = client.get("/api/events", params={"lat": "51.5"})
        assert response.status_code == 400
        assert response.json()["detail"] == "lat and lng are required"

    def test_non_numeric_coordinates(self, client: TestClient) -> None:
        response = client.get("/api/events", params={"lat": "north", "lng": "-0.12"})
        assert response.status_code == 400
        assert response.json()["detail"] == "lat and lng must be numbers"

    def test_not_configured(self, client: TestClient) -> None:
        """Without a Skiddle key the endpoint still answers with an empty result."""
        mock = MagicMock(spec=SkiddleClient)
        mock.is_configured = False
        app.dependency_overrides[get_event_search_service] = lambda: EventSearchService(
            client=mock, demo_mode=False
        )

        response = client.get("/api/events", params={"lat": "51.5", "lng": "-0.12"})

        assert response.status_code == 200
        assert response.json() == {
            "events": [],
            "total": 0,
            "mock": False,
            "configured": False,
        }

    def test_returns_normalized_events(self, client: TestClient, skiddle) -> None:
        skiddle.search_events.return_value = {
            "results": [
                {
                    "id": "99",
                    "eventname": "SUBSONIC",
                    "date": "2026-10-24",
                    "openingtimes": {"doorsopen": "22:00", "doorsclose": "04:00"},
                    "venue": {"name": "MOTION", "latitude": "51.44", "longitude": "-2.59"},
                    "entryprice": "12.50",
                },
                {"id": "100", "eventname": "NO DATE", "venue": {}},
            ],
            "totalcount": "2",
        }

        response = client.get(
            "/api/events",
            params={
                "lat": "51.45",
                "lng": "-2.58",
                "radius": "999",
                "genres": "Techno, jungle",
                "keyword": "acid",
                "minDate": "2026-10-23",
                "maxDate": "sometime",
            },
        )

        assert response.status_code == 200
        assert response.headers["Cache-Control"] == "public, max-age=30"
        data = response.json()
        assert data["total"] == 2
        assert data["configured"] is True
        assert len(data["events"]) == 1
        event = data["events"][0]
        assert event["startDateTime"] == "2026-10-24T22:00:00"
        assert event["endDateTime"] == "2026-10-24T04:00:00"
        assert event["priceText"] == "From £12.50"
        assert event["venue"]["name"] == "MOTION"

        query = skiddle.search_events.call_args.args[0]
        assert query.lat == 51.45
        assert query.radius_miles == 250
        assert query.keyword_expression == (
            "acid OR techno OR hard techno OR industrial OR jungle"
        )
        assert query.min_date == "2026-10-23"
        assert query.max_date is None

    @pytest.mark.parametrize(
        "value", ["2026-10-19\n", " 2026-10-19", "2026-10-19T00:00", "19/10/2026", ""]
    )
    def test_dates_must_be_exact_iso_dates(self, client: TestClient, skiddle, value) -> None:
        """Anything other than a bare YYYY-MM-DD is not forwarded to Skiddle."""
        client.get(
            "/api/events",
            params={"lat": "51.5", "lng": "-0.12", "minDate": value, "maxDate": "2026-10-25"},
        )
        query = skiddle.search_events.call_args.args[0]
        assert query.min_date is None
        assert query.max_date == "2026-10-25"

    def test_default_radius(self, client: TestClient, skiddle) -> None:
        client.get("/api/events", params={"lat": "51.5", "lng": "-0.12", "radius": "abc"})
        assert skiddle.search_events.call_args.args[0].radius_miles == 25

    def test_upstream_error(self, client: TestClient, skiddle) -> None:
        skiddle.search_events.side_effect = SkiddleAPIError(403, "Forbidden")
        response = client.get("/api/events", params={"lat": "51.5", "lng": "-0.12"})
        assert response.status_code == 502
        assert response.json()["detail"] == "Skiddle API error (403)"

    def test_unexpected_error(self, client: TestClient, skiddle) -> None:
        skiddle.search_events.side_effect = RuntimeError("socket closed")
        response = client.get("/api/events", params={"lat": "51.5", "lng": "-0.12"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch events"


class TestGeocodeEndpoint:
    """Test /api/geocode."""

    def test_missing_query(self, client: TestClient, geocoder) -> None:
        response = client.get("/api/geocode", params={"q": "  "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing query parameter 'q'"
        geocoder.geocode.assert_not_called()

    def test_found(self, client: TestClient, geocoder) -> None:
        geocoder.geocode.return_value = GeoLocation(
            lat=53.48, lng=-2.24, display_name="Manchester, England"
        )

        response = client.get("/api/geocode", params={"q": " Manchester "})

        assert response.status_code == 200
        assert response.json() == {
            "lat": 53.48,
            "lng": -2.24,
            "displayName": "Manchester, England",
        }
        assert response.headers["Cache-Control"] == "public, max-age=86400, s-maxage=86400"
        geocoder.geocode.assert_awaited_once_with("Manchester")

    def test_not_found(self, client: TestClient, geocoder) -> None:
        response = client.get("/api/geocode", params={"q": "Atlantis"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Location not found"

    def test_upstream_error(self, client: TestClient, geocoder) -> None:
        geocoder.geocode.side_effect = GeocoderError(503)
        response = client.get("/api/geocode", params={"q": "Leeds"})
        assert response.status_code == 502

    def test_unexpected_error(self, client: TestClient, geocoder) -> None:
        geocoder.geocode.side_effect = RuntimeError("dns failure")
        response = client.get("/api/geocode", params={"q": "Leeds"})
        assert response.status_code == 500


class TestShareEndpoints:
    """Test /api/share/encode and /api/share/decode."""

    def test_encode(self, client: TestClient) -> None:
        response = client.get(
            "/api/share/encode",
            params={
                "location": "London",
                "genres": "techno,drum & bass",
                "radius": "30",
                "dateRange": "weekend",
            },
        )
        assert response.status_code == 200
        assert response.json() == {
            "token": "RADAR/LONDON/DNB+TNO/30MI/WKD",
            "fragment": "#RADAR/LONDON/DNB+TNO/30MI/WKD",
        }

    def test_encode_defaults(self, client: TestClient) -> None:
        response = client.get("/api/share/encode")
        assert response.json()["token"] == "RADAR/UK/ALL/25MI/7D"

    def test_decode_preset(self, client: TestClient) -> None:
        response = client.get(
            "/api/share/decode", params={"token": "#RADAR/LONDON/TNO/10MI/TNT"}
        )
        assert response.status_code == 200
        shared = response.json()["shared"]
        assert shared["locationKey"] == "LONDON"
        assert shared["locationPreset"]["lat"] == 51.5074
        assert shared["genres"] == ["techno"]
        assert shared["radius"] == 10
        assert shared["dateRange"] == "tonight"

    def test_decode_malformed(self, client: TestClient) -> None:
        response = client.get("/api/share/decode", params={"token": "RADAR/LONDON"})
        assert response.status_code == 200
        assert response.json() == {"shared": None}
