import math

import pytest

from gischeck.catalog.places import PLACES
from gischeck.core.geo import (
    Coordinate,
    calculate_bearing,
    calculate_destination,
    calculate_distance,
    calculate_midpoint,
    calculate_polygon_area,
    coordinates_from_pairs,
    normalize_latitude,
    normalize_longitude,
)

ONE_DEGREE_KM = 6371 * math.pi / 180


def test_midpoint_along_meridian_and_equator():
    mid = calculate_midpoint(10, 0, 20, 0)
    assert mid.lat == pytest.approx(15)
    assert mid.lng == pytest.approx(0)

    mid = calculate_midpoint(0, 0, 0, 90)
    assert mid.lat == pytest.approx(0)
    assert mid.lng == pytest.approx(45)


def test_midpoint_is_equidistant():
    sf, ny = PLACES["san_francisco"], PLACES["new_york"]
    mid = calculate_midpoint(sf.lat, sf.lng, ny.lat, ny.lng)

    to_sf = calculate_distance(mid.lat, mid.lng, sf.lat, sf.lng)
    to_ny = calculate_distance(mid.lat, mid.lng, ny.lat, ny.lng)
    assert to_sf == pytest.approx(to_ny, rel=1e-9)


def test_midpoint_of_antipodes_is_finite():
    mid = calculate_midpoint(0, 0, 0, 180)
    assert math.isfinite(mid.lat) and math.isfinite(mid.lng)
    assert mid.lat == pytest.approx(0, abs=1e-9)


def test_midpoint_across_antimeridian_stays_in_range():
    mid = calculate_midpoint(0, 179, 0, -179)
    assert -180 <= mid.lng <= 180
    assert abs(mid.lng) == pytest.approx(180)


def test_destination_one_degree_east_and_north():
    east = calculate_destination(0, 0, 90, ONE_DEGREE_KM)
    assert east.lat == pytest.approx(0, abs=1e-9)
    assert east.lng == pytest.approx(1)

    north = calculate_destination(0, 0, 0, ONE_DEGREE_KM)
    assert north.lat == pytest.approx(1)
    assert north.lng == pytest.approx(0, abs=1e-9)


def test_destination_wraps_across_antimeridian():
    dest = calculate_destination(0, 179.5, 90, ONE_DEGREE_KM)
    assert dest.lng == pytest.approx(-179.5)


def test_destination_zero_distance_returns_start():
    dest = calculate_destination(48.8566, 2.3522, 123.0, 0.0)
    assert dest.lat == pytest.approx(48.8566)
    assert dest.lng == pytest.approx(2.3522)


@pytest.mark.parametrize(
    "start,end",
    [
        ("san_francisco", "new_york"),
        ("london", "paris"),
        ("london", "sydney"),
        ("origin", "paris"),
    ],
)
def test_destination_reproduces_target_from_bearing_and_distance(start, end):
    a, b = PLACES[start], PLACES[end]
    bearing = calculate_bearing(a.lat, a.lng, b.lat, b.lng)
    distance = calculate_distance(a.lat, a.lng, b.lat, b.lng)

    dest = calculate_destination(a.lat, a.lng, bearing, distance)

    assert abs(dest.lat - b.lat) < 0.01
    assert abs(dest.lng - b.lng) < 0.01


def test_polygon_area_degenerate_inputs():
    assert calculate_polygon_area([]) == 0
    assert calculate_polygon_area([Coordinate(0, 0)]) == 0
    assert calculate_polygon_area([Coordinate(0, 0), Coordinate(10, 10)]) == 0


def test_projection_and_area_reject_non_finite_inputs():
    nan = float("nan")

    with pytest.raises(ValueError, match="finite"):
        calculate_midpoint(0, 0, nan, 10)
    with pytest.raises(ValueError, match="finite"):
        calculate_destination(0, 0, 90, float("inf"))
    with pytest.raises(ValueError, match="finite"):
        calculate_polygon_area(coordinates_from_pairs([(0, 0), (0, 1), (nan, 1)]))


def test_polygon_area_one_degree_square_at_equator():
    square = coordinates_from_pairs([(0, 0), (0, 1), (1, 1), (1, 0)])
    area = calculate_polygon_area(square)

    # Roughly 111.2 km x 111.2 km.
    assert 12200 < area < 12500


def test_polygon_area_ignores_winding_order_and_explicit_closure():
    ring = coordinates_from_pairs([(0, 0), (0, 2), (2, 2), (2, 0)])
    closed = ring + [ring[0]]

    assert calculate_polygon_area(ring) == pytest.approx(calculate_polygon_area(list(reversed(ring))))
    assert calculate_polygon_area(ring) == pytest.approx(calculate_polygon_area(closed))


@pytest.mark.parametrize(
    "value,expected",
    [(200, -160), (-200, 160), (180, 180), (-180, -180), (540, 180), (-540, -180), (725, 5), (12.5, 12.5)],
)
def test_normalize_longitude(value, expected):
    assert normalize_longitude(value) == pytest.approx(expected)


def test_normalize_longitude_passes_through_non_finite():
    assert math.isnan(normalize_longitude(float("nan")))
    assert normalize_longitude(float("inf")) == float("inf")


def test_normalize_latitude_clamps():
    assert normalize_latitude(95) == 90
    assert normalize_latitude(-95) == -90
    assert normalize_latitude(45.5) == 45.5
