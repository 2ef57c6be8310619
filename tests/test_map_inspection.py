import asyncio

import pytest

from gischeck.config.settings import PollingSettings, Settings
from gischeck.core.errors import PollTimeoutError
from gischeck.core.geo import Coordinate
from gischeck.domain.models import MapSnapshot
from gischeck.inspection.assessment import assess_map_state, is_coordinate_in_view
from gischeck.inspection.reader import SNAPSHOT_SCRIPT, LeafletStateReader
from gischeck.inspection.waits import (
    wait_for_center_change,
    wait_for_layer_change,
    wait_for_map_idle,
    wait_for_map_ready,
    wait_for_tiles_loaded,
    wait_for_zoom,
)

# 1ms polling keeps these tests fast without faking the clock.
FAST = Settings(polling=PollingSettings(interval_ms=1))


def _snapshot(
    *,
    lat=37.7749,
    lng=-122.4194,
    zoom=10,
    bounds=(38.0, 37.5, -122.0, -123.0),
    loaded=True,
    animating=False,
    tile_count=12,
    tiles_loaded=12,
):
    north, south, east, west = bounds
    return MapSnapshot.model_validate(
        {
            "map_present": True,
            "viewport": {
                "center": {"lat": lat, "lng": lng},
                "zoom": zoom,
                "bounds": {"north": north, "south": south, "east": east, "west": west},
            },
            "loaded": loaded,
            "animating": animating,
            "tile_count": tile_count,
            "tiles_loaded": tiles_loaded,
            "layer_count": 2,
        }
    )


class SequenceAccessor:
    """Returns the given snapshots in order, then repeats the last one."""

    def __init__(self, snapshots):
        self._snapshots = list(snapshots)
        self.calls = 0

    async def __call__(self):
        item = self._snapshots[min(self.calls, len(self._snapshots) - 1)]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


class StubPage:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    async def evaluate(self, expression, arg=None):
        self.calls.append((expression, arg))
        return self.payload


def test_reader_parses_page_payload_and_passes_settings():
    payload = _snapshot().model_dump()
    page = StubPage(payload)
    settings = Settings.model_validate({"map": {"global_name": "leafletMap", "tile_selector": ".tile"}})
    reader = LeafletStateReader.from_settings(page, settings)

    snap = asyncio.run(reader())

    assert snap == _snapshot()
    expression, arg = page.calls[0]
    assert expression == SNAPSHOT_SCRIPT
    assert arg == {"mapGlobal": "leafletMap", "tileSelector": ".tile"}


def test_reader_returns_empty_snapshot_when_map_missing():
    snap = asyncio.run(LeafletStateReader(StubPage(None)).snapshot())

    assert snap.map_present is False
    assert snap.viewport is None
    assert not snap.is_ready


def test_wait_for_map_ready_skips_missing_and_animating_states():
    accessor = SequenceAccessor(
        [
            MapSnapshot(),
            RuntimeError("Execution context was destroyed"),
            _snapshot(loaded=False),
            _snapshot(animating=True),
            _snapshot(),
        ]
    )

    snap = asyncio.run(wait_for_map_ready(accessor, settings=FAST))

    assert snap.is_ready
    assert accessor.calls == 5


def test_wait_for_tiles_loaded_requires_every_tile():
    accessor = SequenceAccessor(
        [_snapshot(tile_count=0, tiles_loaded=0), _snapshot(tile_count=12, tiles_loaded=7), _snapshot()]
    )

    snap = asyncio.run(wait_for_tiles_loaded(accessor, settings=FAST))
    assert snap.tiles_loaded == 12


def test_wait_for_zoom_exact_and_with_tolerance():
    accessor = SequenceAccessor([_snapshot(zoom=10), _snapshot(zoom=11), _snapshot(zoom=12)])
    snap = asyncio.run(wait_for_zoom(accessor, 12, settings=FAST))
    assert snap.viewport.zoom == 12

    accessor = SequenceAccessor([_snapshot(zoom=10), _snapshot(zoom=11.6)])
    snap = asyncio.run(wait_for_zoom(accessor, 12, tolerance=0.5, settings=FAST))
    assert snap.viewport.zoom == 11.6


def test_wait_for_zoom_times_out_with_description():
    accessor = SequenceAccessor([_snapshot(zoom=10)])

    with pytest.raises(PollTimeoutError, match="zoom level 14"):
        asyncio.run(wait_for_zoom(accessor, 14, settings=FAST, timeout_ms=20))

    assert accessor.calls >= 1


def test_wait_for_center_change_ignores_jitter_and_animation():
    initial = Coordinate(37.7749, -122.4194)
    accessor = SequenceAccessor(
        [
            _snapshot(lat=37.7749 + 1e-9),
            _snapshot(lat=37.80, animating=True),
            _snapshot(lat=37.80),
        ]
    )

    snap = asyncio.run(wait_for_center_change(accessor, initial, settings=FAST))

    assert snap.viewport.center.lat == 37.80
    assert accessor.calls == 3


def test_wait_for_map_idle_and_layer_change():
    accessor = SequenceAccessor([_snapshot(animating=True), _snapshot()])
    assert not asyncio.run(wait_for_map_idle(accessor, settings=FAST)).animating

    accessor = SequenceAccessor([_snapshot(tile_count=0, tiles_loaded=0), _snapshot(tiles_loaded=3), _snapshot()])
    assert asyncio.run(wait_for_layer_change(accessor, settings=FAST)).all_tiles_loaded


def test_assess_map_state_valid_snapshot():
    result = assess_map_state(_snapshot(), FAST)

    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []


def test_assess_map_state_reports_errors_and_warnings():
    snap = _snapshot(lat=120, zoom=25, bounds=(10, 20, 10, 20), animating=True, tile_count=0, tiles_loaded=0)

    result = assess_map_state(snap, FAST)

    assert not result.is_valid
    assert "Invalid zoom level: 25.0" in result.errors
    assert any(e.startswith("Invalid center coordinates: 120.0000") for e in result.errors)
    assert any(e.startswith("Invalid map bounds") for e in result.errors)
    assert "No tiles found - map may not be fully loaded" in result.warnings
    assert "Map is currently animating" in result.warnings


def test_assess_map_state_missing_map():
    result = assess_map_state(MapSnapshot(), FAST)
    assert result.errors == ["Map instance not found"]


def test_is_coordinate_in_view():
    snap = _snapshot()

    assert is_coordinate_in_view(snap, 37.7749, -122.4194)
    assert not is_coordinate_in_view(snap, 40.7128, -74.006)
    assert not is_coordinate_in_view(MapSnapshot(), 0, 0)
