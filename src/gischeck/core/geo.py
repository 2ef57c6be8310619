"""
Geodesy helpers.

Pure functions on latitude/longitude pairs (decimal degrees in, decimal degrees out)
used to validate and reason about coordinates reported by a live map:

- range predicates (`validate_coordinates`, `validate_bounds`, `is_point_in_bounds`)
- great-circle math on a spherical Earth (distance, bearing, midpoint, destination)
- spherical polygon area
- normalization, DMS conversion and display formatting

Nothing here logs or touches shared state. Finite inputs never raise: out-of-range
coordinates are reported by the predicates, never by exceptions. NaN or infinite
inputs to the great-circle, area and DMS functions raise `ValueError`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

EARTH_RADIUS_KM = 6371.0

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees (range is not enforced)."""

    lat: float
    lng: float
    name: str | None = None


@dataclass(frozen=True)
class Bounds:
    """A lat/lng bounding box in decimal degrees."""

    north: float
    south: float
    east: float
    west: float


@dataclass(frozen=True)
class DMS:
    """Degrees-minutes-seconds form of a single angle."""

    degrees: int
    minutes: int
    seconds: float
    direction: str

    def __str__(self) -> str:
        return f"{self.degrees}°{self.minutes}'{self.seconds:g}\"{self.direction}"

    def to_decimal(self) -> float:
        return from_dms(self.degrees, self.minutes, self.seconds, self.direction)


def degrees_to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def radians_to_degrees(radians: float) -> float:
    return radians * (180 / math.pi)


def _require_finite(*values: float) -> None:
    if not all(math.isfinite(v) for v in values):
        raise ValueError(f"Expected finite angles and distances, got {values!r}")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_coordinates(lat: float, lng: float) -> bool:
    """True iff `lat` is in [-90, 90] and `lng` in [-180, 180] (bounds inclusive)."""
    return MIN_LATITUDE <= lat <= MAX_LATITUDE and MIN_LONGITUDE <= lng <= MAX_LONGITUDE


def is_point_in_bounds(lat: float, lng: float, bounds: Bounds) -> bool:
    """True iff the point lies inside `bounds` (edges included).

    The box itself is not checked; use `validate_bounds` first if it may be degenerate.
    """
    return bounds.south <= lat <= bounds.north and bounds.west <= lng <= bounds.east


def validate_bounds(bounds: Bounds) -> bool:
    """True iff the box has positive extent and both corners are valid coordinates."""
    well_formed = bounds.north > bounds.south and bounds.east > bounds.west
    return (
        well_formed
        and validate_coordinates(bounds.north, bounds.east)
        and validate_coordinates(bounds.south, bounds.west)
    )


# ---------------------------------------------------------------------------
# Great-circle math
# ---------------------------------------------------------------------------


def calculate_distance(
    lat1: float,
    lng1: float,
    lat2: float,
    lng2: float,
    *,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Haversine great-circle distance in kilometers."""
    _require_finite(lat1, lng1, lat2, lng2)
    d_lat = degrees_to_radians(lat2 - lat1)
    d_lng = degrees_to_radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(degrees_to_radians(lat1)) * math.cos(degrees_to_radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    # Rounding can push `a` a hair past 1 for near-antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius_km * c


def calculate_bearing(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, in [0, 360)."""
    _require_finite(lat1, lng1, lat2, lng2)
    d_lng = degrees_to_radians(lng2 - lng1)
    lat1_rad = degrees_to_radians(lat1)
    lat2_rad = degrees_to_radians(lat2)

    y = math.sin(d_lng) * math.cos(lat2_rad)
    x = math.cos(lat1_rad) * math.sin(lat2_rad) - math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(d_lng)

    bearing = (radians_to_degrees(math.atan2(y, x)) + 360) % 360
    if bearing >= 360:
        bearing -= 360
    return bearing


def calculate_midpoint(lat1: float, lng1: float, lat2: float, lng2: float) -> Coordinate:
    """Midpoint along the great circle between two points.

    Antipodal pairs have no unique great circle; the formula still returns a finite
    point (e.g. (0, 0)/(0, 180) gives (0, 90)) rather than NaN.
    """
    _require_finite(lat1, lng1, lat2, lng2)
    lat1_rad = degrees_to_radians(lat1)
    lat2_rad = degrees_to_radians(lat2)
    d_lng = degrees_to_radians(lng2 - lng1)

    bx = math.cos(lat2_rad) * math.cos(d_lng)
    by = math.cos(lat2_rad) * math.sin(d_lng)

    lat3 = math.atan2(
        math.sin(lat1_rad) + math.sin(lat2_rad),
        math.sqrt((math.cos(lat1_rad) + bx) ** 2 + by**2),
    )
    lng3 = degrees_to_radians(lng1) + math.atan2(by, math.cos(lat1_rad) + bx)

    return Coordinate(lat=radians_to_degrees(lat3), lng=normalize_longitude(radians_to_degrees(lng3)))


def calculate_destination(
    lat: float,
    lng: float,
    bearing_deg: float,
    distance_km: float,
    *,
    radius_km: float = EARTH_RADIUS_KM,
) -> Coordinate:
    """Project a point `distance_km` along the great circle leaving at `bearing_deg`."""
    _require_finite(lat, lng, bearing_deg, distance_km)
    lat_rad = degrees_to_radians(lat)
    lng_rad = degrees_to_radians(lng)
    bearing_rad = degrees_to_radians(bearing_deg)
    angular = distance_km / radius_km

    sin_lat2 = math.sin(lat_rad) * math.cos(angular) + math.cos(lat_rad) * math.sin(angular) * math.cos(bearing_rad)
    lat2_rad = math.asin(min(1.0, max(-1.0, sin_lat2)))

    lng2_rad = lng_rad + math.atan2(
        math.sin(bearing_rad) * math.sin(angular) * math.cos(lat_rad),
        math.cos(angular) - math.sin(lat_rad) * math.sin(lat2_rad),
    )

    return Coordinate(lat=radians_to_degrees(lat2_rad), lng=normalize_longitude(radians_to_degrees(lng2_rad)))


def calculate_polygon_area(
    coordinates: Sequence[Coordinate],
    *,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Approximate spherical polygon area in km² (ring is implicitly closed).

    Fewer than 3 vertices yields 0. Rings crossing the antimeridian are not unwrapped.
    """
    n = len(coordinates)
    if n < 3:
        return 0.0

    total = 0.0
    for i in range(n):
        p = coordinates[i]
        q = coordinates[(i + 1) % n]
        _require_finite(p.lat, p.lng)
        lat_i = degrees_to_radians(p.lat)
        lat_j = degrees_to_radians(q.lat)
        d_lng = degrees_to_radians(q.lng) - degrees_to_radians(p.lng)
        total += d_lng * (2 + math.sin(lat_i) + math.sin(lat_j))

    return abs(total) * radius_km * radius_km / 2


# ---------------------------------------------------------------------------
# Normalization + formatting
# ---------------------------------------------------------------------------


def normalize_longitude(lng: float) -> float:
    """Fold `lng` into [-180, 180] by whole turns of 360 (200 -> -160, 540 -> 180)."""
    if not math.isfinite(lng):
        return lng
    if lng > MAX_LONGITUDE:
        return lng - 360 * math.ceil((lng - MAX_LONGITUDE) / 360)
    if lng < MIN_LONGITUDE:
        return lng + 360 * math.ceil((MIN_LONGITUDE - lng) / 360)
    return lng


def normalize_latitude(lat: float) -> float:
    """Clamp `lat` into [-90, 90]."""
    return max(MIN_LATITUDE, min(MAX_LATITUDE, lat))


def dms_components(decimal: float, is_longitude: bool = False) -> DMS:
    """Split a decimal angle into degrees, minutes and seconds (hundredths of a second)."""
    _require_finite(decimal)
    if is_longitude:
        direction = "E" if decimal >= 0 else "W"
    else:
        direction = "N" if decimal >= 0 else "S"

    value = abs(decimal)
    degrees = math.floor(value)
    minutes_f = (value - degrees) * 60
    minutes = math.floor(minutes_f)
    seconds = round((minutes_f - minutes) * 60, 2)

    if seconds >= 60:
        seconds -= 60
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        degrees += 1

    return DMS(degrees=int(degrees), minutes=int(minutes), seconds=float(seconds), direction=direction)


def to_dms(decimal: float, is_longitude: bool = False) -> str:
    """Render a decimal angle as `D°M'S"X` (X is N/S, or E/W when `is_longitude`)."""
    return str(dms_components(decimal, is_longitude))


def from_dms(degrees: float, minutes: float, seconds: float, direction: str) -> float:
    """Convert DMS back to decimal degrees; S and W directions are negative."""
    decimal = degrees + minutes / 60 + seconds / 3600
    if direction.strip().upper() in {"S", "W"}:
        decimal = -decimal
    return decimal


_DMS_RE = re.compile(
    r"""^\s*(?P<deg>\d+)\s*°\s*(?P<min>\d+)\s*['′]\s*(?P<sec>\d+(?:\.\d+)?)\s*["″]\s*(?P<dir>[NSEWnsew])\s*$"""
)


def parse_dms(text: str) -> DMS:
    """Parse the `to_dms` string form back into a `DMS`.

    Raises:
        ValueError: If `text` is not of the form `D°M'S"X`.
    """
    m = _DMS_RE.match(text)
    if not m:
        raise ValueError(f"Invalid DMS string {text!r}, expected e.g. 37°46'29.64\"N")
    return DMS(
        degrees=int(m.group("deg")),
        minutes=int(m.group("min")),
        seconds=float(m.group("sec")),
        direction=m.group("dir").upper(),
    )


def format_coordinates(lat: float, lng: float, precision: int = 4) -> str:
    """Fixed-point `"lat, lng"` string."""
    return f"{lat:.{precision}f}, {lng:.{precision}f}"


def coordinates_from_pairs(pairs: Iterable[tuple[float, float]]) -> list[Coordinate]:
    """Build `Coordinate`s from `(lat, lng)` tuples."""
    return [Coordinate(lat=float(lat), lng=float(lng)) for lat, lng in pairs]
