"""
Map-value validation.

Two flavors:
- predicates (`validate_*`) return booleans and never raise
- assertions (`assert_*`) raise `ValidationError` / `InvalidCoordinatesError` with
  expected/actual context, for use inside test steps

All functions take plain values read from the page; fetching them is the caller's job.
"""

from __future__ import annotations

from typing import Any, Iterable

from gischeck.core.errors import InvalidCoordinatesError, ValidationError
from gischeck.core.geo import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    Bounds,
    Coordinate,
    validate_bounds,
    validate_coordinates,
)

# Half of Earth's circumference: the longest great-circle distance.
MAX_DISTANCE_KM = 20037.0
COORDINATE_CHANGE_MIN = 0.000001


def validate_zoom_level(zoom: float, min_zoom: float = 0, max_zoom: float = 20) -> bool:
    return min_zoom <= zoom <= max_zoom


def validate_coordinate_change(
    old: Coordinate,
    new: Coordinate,
    min_threshold: float = COORDINATE_CHANGE_MIN,
) -> bool:
    """True when either axis moved by more than `min_threshold` degrees."""
    return abs(new.lat - old.lat) > min_threshold or abs(new.lng - old.lng) > min_threshold


def validate_distance(distance_km: float, min_km: float = 0, max_km: float = MAX_DISTANCE_KM) -> bool:
    return min_km <= distance_km <= max_km


def validate_bearing(bearing: float) -> bool:
    return 0 <= bearing < 360


def validate_coordinate_array(coordinates: Iterable[Any]) -> bool:
    """True for a non-empty collection whose items all have numeric, in-range lat/lng."""
    items = list(coordinates)
    if not items:
        return False
    for item in items:
        lat = getattr(item, "lat", None)
        lng = getattr(item, "lng", None)
        if isinstance(lat, bool) or isinstance(lng, bool):
            return False
        if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
            return False
        if not validate_coordinates(lat, lng):
            return False
    return True


def assert_valid_coordinates(lat: float, lng: float) -> None:
    """Raise `InvalidCoordinatesError` naming the offending axis."""
    if not MIN_LATITUDE <= lat <= MAX_LATITUDE:
        raise InvalidCoordinatesError(lat, lng, "Latitude must be between -90 and 90")
    if not MIN_LONGITUDE <= lng <= MAX_LONGITUDE:
        raise InvalidCoordinatesError(lat, lng, "Longitude must be between -180 and 180")


def assert_zoom_level(current: float | None, expected: float, tolerance: float = 0) -> None:
    if current is None:
        raise ValidationError("Zoom level not available", expected, current)
    if tolerance == 0:
        if current != expected:
            raise ValidationError("Zoom level mismatch", expected, current)
        return
    difference = abs(current - expected)
    if difference > tolerance:
        raise ValidationError(
            "Zoom level outside tolerance",
            f"{expected} ± {tolerance}",
            current,
            {"difference": difference, "tolerance": tolerance},
        )


def assert_map_center(
    center: Coordinate | None,
    expected_lat: float,
    expected_lng: float,
    tolerance: float = 0.01,
) -> None:
    if center is None:
        raise ValidationError(
            "Map center not available", {"lat": expected_lat, "lng": expected_lng}, center
        )
    lat_diff = abs(center.lat - expected_lat)
    lng_diff = abs(center.lng - expected_lng)
    if lat_diff > tolerance or lng_diff > tolerance:
        raise ValidationError(
            "Map center outside tolerance",
            {"lat": expected_lat, "lng": expected_lng, "tolerance": tolerance},
            {"lat": center.lat, "lng": center.lng},
            {"lat_diff": lat_diff, "lng_diff": lng_diff},
        )


def assert_valid_bounds(bounds: Bounds | None) -> None:
    if bounds is None:
        raise ValidationError("Map bounds not available", "valid bounds object", bounds)
    if bounds.north <= bounds.south:
        raise ValidationError(
            "Invalid bounds: north <= south",
            "north > south",
            bounds,
            {"north": bounds.north, "south": bounds.south},
        )
    if bounds.east <= bounds.west:
        raise ValidationError(
            "Invalid bounds: east <= west",
            "east > west",
            bounds,
            {"east": bounds.east, "west": bounds.west},
        )
    if not validate_bounds(bounds):
        raise ValidationError("Map bounds contain invalid coordinates", "valid coordinates", bounds)
