"""
Domain models (Pydantic).

These types are the contract between the page (raw JSON from `page.evaluate`) and
the pure layers:
- `MapSnapshot` / `MapViewport`: what a Leaflet map reports at one instant
- `ValidationResult`: errors/warnings from assessing a snapshot

Coordinates are *not* range-checked here: a page reporting lat=120 must still parse,
so the assessment can report it instead of failing on load.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from gischeck.core.geo import Bounds, Coordinate


class LatLng(BaseModel):
    lat: float
    lng: float

    def as_coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class MapBounds(BaseModel):
    north: float
    south: float
    east: float
    west: float

    def as_bounds(self) -> Bounds:
        return Bounds(north=self.north, south=self.south, east=self.east, west=self.west)


class MapViewport(BaseModel):
    """Center, zoom and visible bounds of the map."""

    center: LatLng
    zoom: float
    bounds: MapBounds


class MapSnapshot(BaseModel):
    """Observable map state at one instant.

    `map_present=False` means the page has no map instance yet; every other field
    then keeps its default.
    """

    map_present: bool = False
    viewport: MapViewport | None = None
    loaded: bool = False
    animating: bool = False
    tile_count: int = Field(0, ge=0)
    tiles_loaded: int = Field(0, ge=0)
    layer_count: int = Field(0, ge=0)

    @property
    def all_tiles_loaded(self) -> bool:
        return self.tile_count > 0 and self.tiles_loaded >= self.tile_count

    @property
    def is_ready(self) -> bool:
        return self.map_present and self.loaded and not self.animating


class ValidationResult(BaseModel):
    """Outcome of a map-state assessment."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
