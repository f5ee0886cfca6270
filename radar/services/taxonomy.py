"""
Genre taxonomy and city presets.

Single source for the lookup tables used by query building and share
links. Genre order here is the canonical order used in share tokens.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final


@dataclass(frozen=True)
class Genre:
    """One supported genre."""

    name: str
    """Canonical lower-case name used in filters (e.g. 'drum & bass')"""

    code: str
    """Short code used in share tokens (e.g. 'DNB')"""

    keywords: str
    """Provider full-text OR-clause for this genre"""


@dataclass(frozen=True)
class GenreTaxonomy:
    """Ordered, immutable genre table with lookups by name and code."""

    genres: tuple[Genre, ...]
    default_keywords: str
    _by_name: Mapping[str, Genre] = field(init=False, repr=False, compare=False)
    _by_code: Mapping[str, Genre] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_by_name", MappingProxyType({g.name: g for g in self.genres})
        )
        object.__setattr__(
            self, "_by_code", MappingProxyType({g.code: g for g in self.genres})
        )

    def by_name(self, name: str) -> Genre | None:
        """Look up a genre by name, ignoring case and surrounding whitespace."""
        return self._by_name.get(name.strip().lower())

    def by_code(self, code: str) -> Genre | None:
        """Look up a genre by share code, ignoring case."""
        return self._by_code.get(code.strip().upper())

    def in_canonical_order(self, names: Iterable[str]) -> list[Genre]:
        """Known genres among ``names``, in taxonomy order. Unknown names are skipped."""
        wanted = {n.strip().lower() for n in names}
        return [g for g in self.genres if g.name in wanted]


@dataclass(frozen=True)
class CityPreset:
    """A known city with fixed coordinates."""

    name: str
    lat: float
    lng: float


DEFAULT_KEYWORDS: Final[str] = (
    "rave OR techno OR drum and bass OR dnb OR jungle OR garage OR hardstyle "
    "OR trance OR house OR dubstep"
)

GENRE_TAXONOMY: Final[GenreTaxonomy] = GenreTaxonomy(
    genres=(
        Genre("drum & bass", "DNB", "drum and bass OR dnb"),
        Genre("jungle", "JNG", "jungle"),
        Genre("techno", "TNO", "techno OR hard techno OR industrial"),
        Genre("garage", "UKG", "garage OR ukg OR bassline"),
        Genre("trance", "TRN", "trance OR psytrance"),
        Genre("hard dance", "HRD", "hardstyle OR hardcore OR gabber"),
        Genre("dubstep", "DUB", "dubstep"),
        Genre("house", "HSE", "house OR deep house OR tech house"),
    ),
    default_keywords=DEFAULT_KEYWORDS,
)

CITY_PRESETS: Final[Mapping[str, CityPreset]] = MappingProxyType(
    {
        preset.name: preset
        for preset in (
            CityPreset("LONDON", 51.5074, -0.1278),
            CityPreset("MANCHESTER", 53.4808, -2.2426),
            CityPreset("GLASGOW", 55.8642, -4.2518),
            CityPreset("BRISTOL", 51.4545, -2.5879),
            CityPreset("LEEDS", 53.8008, -1.5491),
            CityPreset("EDINBURGH", 55.9533, -3.1883),
            CityPreset("BIRMINGHAM", 52.4862, -1.8904),
            CityPreset("LIVERPOOL", 53.4084, -2.9916),
        )
    }
)
