"""Demo events served when no Skiddle key is configured and demo mode is on."""

from datetime import date, timedelta

from radar.models import EventVenue, NormalizedEvent

_VENUES = [
    ("CORSICA STUDIOS", "LONDON", 51.4932, -0.0994),
    ("THE WAREHOUSE PROJECT", "MANCHESTER", 53.4744, -2.2564),
    ("MOTION", "BRISTOL", 51.4452, -2.5966),
    ("SUB CLUB", "GLASGOW", 55.8596, -4.2688),
    ("FABRIC", "LONDON", 51.5198, -0.1034),
    ("WIRE", "LEEDS", 53.7976, -1.5410),
    ("LAKOTA", "BRISTOL", 51.4619, -2.5908),
    ("HIDDEN", "MANCHESTER", 53.4862, -2.2422),
    ("BONGO CLUB", "EDINBURGH", 55.9501, -3.1851),
    ("SWG3", "GLASGOW", 55.8655, -4.2518),
    ("THE CAUSE", "LONDON", 51.5451, -0.0552),
    ("THE WHITE HOTEL", "MANCHESTER", 53.4879, -2.2366),
]

_TITLES = [
    "SYSTEM:OVERRIDE",
    "PRESSURE / ALL NIGHT",
    "JUNGLE MASSIVE",
    "BASS COMMUNION",
    "ARCHIVE SESSION 001",
    "WAREHOUSE PROTOCOL",
    "SUBSONIC",
    "FREQUENCY",
    "ZERO GRAVITY (DNB)",
    "WARP DRIVE",
    "HARD CODED",
    "ANALOG SIGNAL",
]

_GENRES = [
    ["Techno"],
    ["Techno", "Hard Techno"],
    ["Jungle", "Drum & Bass"],
    ["Drum & Bass"],
    ["Techno", "House"],
    ["Techno"],
    ["House", "Garage"],
    ["Trance"],
    ["Drum & Bass"],
    ["Hard Dance"],
    ["Techno"],
    ["Techno", "Dubstep"],
]


def get_mock_events(today: date) -> list[NormalizedEvent]:
    """Twelve demo events, two per night starting today."""
    events = []
    for i, (name, city, lat, lng) in enumerate(_VENUES):
        day = today + timedelta(days=i // 2)
        date_str = day.isoformat()
        events.append(
            NormalizedEvent(
                id=f"mock-{i + 1}",
                title=_TITLES[i],
                start_date_time=f"{date_str}T23:00:00",
                end_date_time=f"{(day + timedelta(days=1)).isoformat()}T06:00:00",
                venue=EventVenue(name=name, city=city, lat=lat, lng=lng),
                price_text=None if i % 3 == 0 else f"From £{10 + i * 2.5:.2f}",
                link="https://www.skiddle.com/",
                genres=_GENRES[i],
            )
        )
    return events
