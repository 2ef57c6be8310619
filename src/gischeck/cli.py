"""
gischeck CLI entrypoint.

Quick geodesy calculations from the shell, handy when writing map assertions:

    gischeck distance san-francisco 40.7128,-74.006
    gischeck destination 0,0 --bearing 90 --distance-km 111.2
    gischeck dms 37.7749 --longitude

Points are `LAT,LNG` or a reference place name (see `gischeck.catalog.places`).
Put `--` before a point that starts with a minus sign (`gischeck bearing -- -33.9,151.2 london`).
"""

from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path
from typing import Any

from gischeck.catalog.places import get_place
from gischeck.config.settings import get_settings
from gischeck.core import geo
from gischeck.core.logging import configure_logging, log_call

logger = logging.getLogger(__name__)


def _finite_float(text: str) -> float:
    """argparse `type=` for angles and distances; rejects nan and inf."""
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid number '{text}'") from None
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"Invalid number '{text}', expected a finite value")
    return value


def _parse_point(text: str) -> geo.Coordinate:
    """argparse `type=` for points: `LAT,LNG` or a place name."""
    if "," in text:
        lat_s, lng_s = text.split(",", 1)
        try:
            lat, lng = float(lat_s), float(lng_s)
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid point '{text}', expected LAT,LNG") from None
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise argparse.ArgumentTypeError(f"Invalid point '{text}', coordinates must be finite")
        return geo.Coordinate(lat=lat, lng=lng)
    try:
        return get_place(text)
    except KeyError as exc:
        raise argparse.ArgumentTypeError(str(exc.args[0])) from None


def _load_polygon(path: str) -> list[geo.Coordinate]:
    """argparse `type=` for `--file`: a JSON list of `[lat, lng]` pairs or `{"lat", "lng"}` objects."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise argparse.ArgumentTypeError(f"Cannot read polygon file {path}: {exc.strerror or exc}") from None
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"Invalid JSON in polygon file {path}: {exc.msg}") from None
    if not isinstance(data, list):
        raise argparse.ArgumentTypeError(f"Invalid polygon file {path}; expected a JSON list.")

    points: list[geo.Coordinate] = []
    for idx, item in enumerate(data):
        try:
            if isinstance(item, dict):
                lat, lng = item["lat"], item["lng"]
            else:
                lat, lng = item
            point = geo.Coordinate(lat=float(lat), lng=float(lng))
        except (KeyError, TypeError, ValueError):
            raise argparse.ArgumentTypeError(
                f"Invalid vertex #{idx} in {path}: {item!r}; expected [lat, lng] or {{\"lat\", \"lng\"}}"
            ) from None
        if not (math.isfinite(point.lat) and math.isfinite(point.lng)):
            raise argparse.ArgumentTypeError(f"Invalid vertex #{idx} in {path}: coordinates must be finite")
        points.append(point)
    return points


def _parse_dms_arg(text: str) -> geo.DMS:
    """argparse `type=` for `dms --parse`."""
    try:
        return geo.parse_dms(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _emit(args: argparse.Namespace, payload: dict[str, Any], text: str) -> None:
    if args.json:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(text)


def _precision(args: argparse.Namespace, level: str = "default") -> int:
    if args.precision is not None:
        return int(args.precision)
    return int(getattr(get_settings().geo.coordinate_precision, level))


def _point_payload(c: geo.Coordinate) -> dict[str, Any]:
    out: dict[str, Any] = {"lat": c.lat, "lng": c.lng}
    if c.name:
        out["name"] = c.name
    return out


def _cmd_distance(args: argparse.Namespace) -> int:
    a, b = args.start, args.end
    km = geo.calculate_distance(a.lat, a.lng, b.lat, b.lng, radius_km=get_settings().geo.earth_radius_km)
    _emit(args, {"start": _point_payload(a), "end": _point_payload(b), "distance_km": km}, f"{km:.3f} km")
    return 0


def _cmd_bearing(args: argparse.Namespace) -> int:
    a, b = args.start, args.end
    deg = geo.calculate_bearing(a.lat, a.lng, b.lat, b.lng)
    _emit(args, {"start": _point_payload(a), "end": _point_payload(b), "bearing_deg": deg}, f"{deg:.2f}°")
    return 0


def _cmd_midpoint(args: argparse.Namespace) -> int:
    a, b = args.start, args.end
    mid = geo.calculate_midpoint(a.lat, a.lng, b.lat, b.lng)
    _emit(args, {"midpoint": _point_payload(mid)}, geo.format_coordinates(mid.lat, mid.lng, _precision(args)))
    return 0


def _cmd_destination(args: argparse.Namespace) -> int:
    s = args.start
    dest = geo.calculate_destination(
        s.lat, s.lng, args.bearing, args.distance_km, radius_km=get_settings().geo.earth_radius_km
    )
    _emit(args, {"destination": _point_payload(dest)}, geo.format_coordinates(dest.lat, dest.lng, _precision(args)))
    return 0


def _cmd_area(args: argparse.Namespace) -> int:
    points: list[geo.Coordinate] = list(args.point or [])
    if args.file:
        points.extend(args.file)
    area = geo.calculate_polygon_area(points, radius_km=get_settings().geo.earth_radius_km)
    _emit(args, {"vertices": len(points), "area_km2": area}, f"{area:.3f} km²")
    return 0


def _cmd_dms(args: argparse.Namespace) -> int:
    if args.value is not None:
        dms = geo.dms_components(args.value, is_longitude=bool(args.longitude))
        decimal = args.value
    else:
        dms = args.parse
        decimal = dms.to_decimal()
    payload = {
        "decimal": decimal,
        "dms": str(dms),
        "degrees": dms.degrees,
        "minutes": dms.minutes,
        "seconds": dms.seconds,
        "direction": dms.direction,
    }
    _emit(args, payload, f"{dms}  ({decimal:.{_precision(args, 'high')}f})")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    if args.bounds:
        north, south, east, west = args.bounds
        bounds = geo.Bounds(north=north, south=south, east=east, west=west)
        ok = geo.validate_bounds(bounds)
        payload: dict[str, Any] = {"bounds": {"north": north, "south": south, "east": east, "west": west}}
    else:
        lat, lng = args.coordinates
        ok = geo.validate_coordinates(lat, lng)
        payload = {"lat": lat, "lng": lng}
    payload["valid"] = ok
    _emit(args, payload, "valid" if ok else "invalid")
    return 0 if ok else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the gischeck CLI."""
    parser = argparse.ArgumentParser(prog="gischeck")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    common.add_argument("--precision", type=int, default=None, help="Decimal places for coordinates and decimal degrees")

    for name, func, help_text in [
        ("distance", _cmd_distance, "Great-circle (haversine) distance in km."),
        ("bearing", _cmd_bearing, "Initial bearing from START to END in degrees."),
        ("midpoint", _cmd_midpoint, "Great-circle midpoint of START and END."),
    ]:
        p = sub.add_parser(name, parents=[common], help=help_text)
        p.add_argument("start", type=_parse_point)
        p.add_argument("end", type=_parse_point)
        p.set_defaults(func=log_call(name, func, logger=logger))

    dest = sub.add_parser("destination", parents=[common], help="Project a point by bearing and distance.")
    dest.add_argument("start", type=_parse_point)
    dest.add_argument("--bearing", type=_finite_float, required=True, help="Degrees clockwise from north")
    dest.add_argument("--distance-km", type=_finite_float, required=True)
    dest.set_defaults(func=log_call("destination", _cmd_destination, logger=logger))

    area = sub.add_parser("area", parents=[common], help="Spherical polygon area in km².")
    area.add_argument("point", nargs="*", type=_parse_point, help="Polygon vertices in order")
    area.add_argument("--file", type=_load_polygon, default=None, help="JSON list of [lat, lng] pairs")
    area.set_defaults(func=log_call("area", _cmd_area, logger=logger))

    dms = sub.add_parser("dms", parents=[common], help="Convert between decimal degrees and DMS.")
    group = dms.add_mutually_exclusive_group(required=True)
    group.add_argument("value", nargs="?", type=_finite_float, default=None, help="Decimal degrees")
    group.add_argument("--parse", type=_parse_dms_arg, default=None, help="DMS string, e.g. 37°46'29.64\"N")
    dms.add_argument("--longitude", action="store_true", help="Use E/W instead of N/S")
    dms.set_defaults(func=log_call("dms", _cmd_dms, logger=logger))

    val = sub.add_parser("validate", parents=[common], help="Check coordinate or bounds ranges (exit 1 if invalid).")
    target = val.add_mutually_exclusive_group(required=True)
    target.add_argument("--coordinates", nargs=2, type=float, metavar=("LAT", "LNG"))
    target.add_argument("--bounds", nargs=4, type=float, metavar=("NORTH", "SOUTH", "EAST", "WEST"))
    val.set_defaults(func=log_call("validate", _cmd_validate, logger=logger))

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m gischeck.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
