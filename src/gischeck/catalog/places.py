"""
Reference places.

Well-known coordinates used as fixtures by tests and as shorthand point names on the
CLI (`gischeck distance san-francisco new-york`), plus the distance ranges those
fixtures are expected to produce.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from gischeck.core.geo import Bounds, Coordinate

PLACES: dict[str, Coordinate] = {
    "san_francisco": Coordinate(lat=37.7749, lng=-122.4194, name="San Francisco"),
    "new_york": Coordinate(lat=40.7128, lng=-74.006, name="New York"),
    "london": Coordinate(lat=51.5074, lng=-0.1278, name="London"),
    "paris": Coordinate(lat=48.8566, lng=2.3522, name="Paris"),
    "sydney": Coordinate(lat=-33.8688, lng=151.2093, name="Sydney"),
    "origin": Coordinate(lat=0.0, lng=0.0, name="Equator/Prime Meridian"),
    "north_pole": Coordinate(lat=90.0, lng=0.0, name="North Pole"),
    "south_pole": Coordinate(lat=-90.0, lng=0.0, name="South Pole"),
}


@dataclass(frozen=True)
class DistanceExpectation:
    start: str
    end: str
    min_km: float
    max_km: float
    description: str

    def contains(self, distance_km: float) -> bool:
        return self.min_km <= distance_km <= self.max_km


DISTANCE_EXPECTATIONS: dict[str, DistanceExpectation] = {
    "sf_to_ny": DistanceExpectation("san_francisco", "new_york", 4100, 4200, "Transcontinental distance"),
    "london_to_paris": DistanceExpectation("london", "paris", 340, 350, "European city pair"),
}

# One degree of latitude along the prime meridian.
ONE_DEGREE_LATITUDE_KM = (110.0, 112.0)


def _key(name: str) -> str:
    return "_".join(name.strip().lower().replace("-", " ").split())


def get_place(name: str) -> Coordinate:
    """Look up a reference place (case, space and hyphen insensitive).

    Raises:
        KeyError: If the name is unknown; the message lists known names.
    """
    try:
        return PLACES[_key(name)]
    except KeyError:
        known = ", ".join(sorted(PLACES))
        raise KeyError(f"Unknown place {name!r}; known places: {known}") from None


def random_coordinate_in_bounds(bounds: Bounds, rng: random.Random | None = None) -> Coordinate:
    """Uniform random point inside `bounds` (in lat/lng space)."""
    r = rng or random.Random()
    return Coordinate(
        lat=bounds.south + r.random() * (bounds.north - bounds.south),
        lng=bounds.west + r.random() * (bounds.east - bounds.west),
    )
