"""
Map-state assessment.

Turns one `MapSnapshot` into a `ValidationResult`: hard problems (no map, invalid
zoom/center/bounds) are errors, soft ones (no tiles yet, animation running) are
warnings. Nothing here raises; use `gischeck.core.validation.assert_*` for that.
"""

from __future__ import annotations

from gischeck.config.settings import Settings, get_settings
from gischeck.core.geo import format_coordinates, is_point_in_bounds, validate_bounds, validate_coordinates
from gischeck.core.validation import validate_zoom_level
from gischeck.domain.models import MapSnapshot, ValidationResult


def assess_map_state(snapshot: MapSnapshot, settings: Settings | None = None) -> ValidationResult:
    settings = settings or get_settings()
    errors: list[str] = []
    warnings: list[str] = []

    if not snapshot.map_present or snapshot.viewport is None:
        return ValidationResult(is_valid=False, errors=["Map instance not found"], warnings=warnings)

    vp = snapshot.viewport
    th = settings.thresholds

    if not validate_zoom_level(vp.zoom, th.min_zoom, th.max_zoom):
        errors.append(f"Invalid zoom level: {vp.zoom}")

    if not validate_coordinates(vp.center.lat, vp.center.lng):
        errors.append(
            "Invalid center coordinates: "
            + format_coordinates(vp.center.lat, vp.center.lng, settings.geo.coordinate_precision.default)
        )

    if not validate_bounds(vp.bounds.as_bounds()):
        b = vp.bounds
        errors.append(f"Invalid map bounds: N:{b.north:.2f} S:{b.south:.2f} E:{b.east:.2f} W:{b.west:.2f}")

    if snapshot.tile_count == 0:
        warnings.append("No tiles found - map may not be fully loaded")
    elif not snapshot.all_tiles_loaded:
        warnings.append(f"Tiles still loading ({snapshot.tiles_loaded}/{snapshot.tile_count})")

    if snapshot.animating:
        warnings.append("Map is currently animating")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def is_coordinate_in_view(snapshot: MapSnapshot, lat: float, lng: float) -> bool:
    """True if the point lies inside the snapshot's visible bounds."""
    if snapshot.viewport is None:
        return False
    return is_point_in_bounds(lat, lng, snapshot.viewport.bounds.as_bounds())
