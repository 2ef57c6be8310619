import json
import random

import pytest

from gischeck.catalog.places import PLACES, get_place, random_coordinate_in_bounds
from gischeck.cli import main
from gischeck.core.geo import Bounds, is_point_in_bounds


def test_get_place_is_forgiving_about_spelling():
    assert get_place("San Francisco") is PLACES["san_francisco"]
    assert get_place("new-york").name == "New York"
    assert get_place("  LONDON ").lat == 51.5074


def test_get_place_unknown_lists_known_names():
    with pytest.raises(KeyError, match="known places: .*london"):
        get_place("atlantis")


def test_random_coordinate_in_bounds_is_inside_and_seedable():
    box = Bounds(north=38.0, south=37.5, east=-122.0, west=-123.0)

    a = [random_coordinate_in_bounds(box, random.Random(7)) for _ in range(3)]
    b = [random_coordinate_in_bounds(box, random.Random(7)) for _ in range(3)]
    assert a == b

    rng = random.Random(42)
    for _ in range(200):
        c = random_coordinate_in_bounds(box, rng)
        assert is_point_in_bounds(c.lat, c.lng, box)


def test_cli_distance_json(capsys):
    assert main(["distance", "san-francisco", "40.7128,-74.006", "--json"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert 4100 < out["distance_km"] < 4200
    assert out["start"]["name"] == "San Francisco"
    assert out["end"] == {"lat": 40.7128, "lng": -74.006}


def test_cli_bearing_and_midpoint_text(capsys):
    assert main(["bearing", "0,0", "0,1"]) == 0
    assert capsys.readouterr().out.strip() == "90.00°"

    assert main(["midpoint", "10,0", "20,0", "--precision", "2"]) == 0
    assert capsys.readouterr().out.strip() == "15.00, 0.00"


def test_cli_destination(capsys):
    assert main(["destination", "0,0", "--bearing", "90", "--distance-km", "111.19492664455873", "--json"]) == 0

    dest = json.loads(capsys.readouterr().out)["destination"]
    assert dest["lat"] == pytest.approx(0, abs=1e-9)
    assert dest["lng"] == pytest.approx(1)


def test_cli_area_from_points_and_file(capsys, tmp_path):
    assert main(["area", "0,0", "0,1", "1,1", "1,0", "--json"]) == 0
    from_points = json.loads(capsys.readouterr().out)
    assert from_points["vertices"] == 4
    assert 12200 < from_points["area_km2"] < 12500

    polygon = tmp_path / "square.json"
    polygon.write_text(json.dumps([[0, 0], {"lat": 0, "lng": 1}, [1, 1], [1, 0]]), encoding="utf-8")
    assert main(["area", "--file", str(polygon), "--json"]) == 0
    from_file = json.loads(capsys.readouterr().out)
    assert from_file["area_km2"] == pytest.approx(from_points["area_km2"])


def test_cli_dms_both_directions(capsys):
    assert main(["dms", "37.7749"]) == 0
    assert capsys.readouterr().out.strip() == "37°46'29.64\"N  (37.774900)"

    assert main(["dms", "--parse", "122°25'9.84\"W", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["direction"] == "W"
    assert out["decimal"] == pytest.approx(-122.4194)


def test_cli_validate_exit_codes(capsys):
    assert main(["validate", "--coordinates", "90", "180"]) == 0
    assert capsys.readouterr().out.strip() == "valid"

    assert main(["validate", "--bounds", "10", "20", "10", "20"]) == 1
    assert capsys.readouterr().out.strip() == "invalid"


def test_cli_rejects_unknown_place():
    with pytest.raises(SystemExit) as exc:
        main(["distance", "atlantis", "paris"])
    assert exc.value.code == 2


@pytest.mark.parametrize(
    "content",
    [
        None,
        "not json",
        json.dumps({"lat": 0, "lng": 0}),
        json.dumps([{"lat": 0}, [1, 1], [2, 2]]),
        json.dumps([[0, 0, 0], [1, 1], [2, 2]]),
        json.dumps([["a", 0], [1, 1], [2, 2]]),
        json.dumps([[0, 0], [1, 1], [2, None]]),
    ],
)
def test_cli_area_bad_polygon_file_is_a_usage_error(tmp_path, capsys, content):
    polygon = tmp_path / "polygon.json"
    if content is not None:
        polygon.write_text(content, encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["area", "--file", str(polygon)])

    assert exc.value.code == 2
    assert "argument --file" in capsys.readouterr().err


@pytest.mark.parametrize(
    "argv",
    [
        ["distance", "nan,0", "paris"],
        ["destination", "0,0", "--bearing", "inf", "--distance-km", "10"],
        ["dms", "inf"],
        ["dms", "--parse", "37 degrees north"],
    ],
)
def test_cli_rejects_non_finite_and_malformed_numbers(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2


def test_cli_dms_honours_precision(capsys):
    assert main(["dms", "37.7749", "--precision", "2"]) == 0
    assert capsys.readouterr().out.strip() == "37°46'29.64\"N  (37.77)"
