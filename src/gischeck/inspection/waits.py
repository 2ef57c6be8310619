"""
Map-state waits.

Each wait polls a page-state accessor (see `gischeck.inspection.reader`) with
`wait_for_value` until the snapshot meets a condition, then returns that snapshot.
Budgets come from `settings.timeouts` and the poll interval from `settings.polling`.

All waits raise `PollTimeoutError` when the map never reaches the state, and
`PollCancelledError` when the optional `cancel` event is set first.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from gischeck.config.settings import Settings, get_settings
from gischeck.core.geo import Coordinate
from gischeck.core.polling import PollOptions, wait_for_value
from gischeck.core.validation import validate_coordinate_change
from gischeck.domain.models import MapSnapshot
from gischeck.inspection.reader import PageStateAccessor


def _options(settings: Settings, timeout_ms: int | None, default_timeout_ms: int, description: str) -> PollOptions:
    return PollOptions(
        timeout_ms=default_timeout_ms if timeout_ms is None else int(timeout_ms),
        interval_ms=settings.polling.interval_ms,
        description=description,
    )


async def _wait(
    accessor: PageStateAccessor,
    check: Callable[[MapSnapshot], bool],
    options: PollOptions,
    cancel: asyncio.Event | None,
) -> MapSnapshot:
    return await wait_for_value(accessor, check, options, cancel=cancel)


async def wait_for_map_ready(
    accessor: PageStateAccessor,
    *,
    settings: Settings | None = None,
    timeout_ms: int | None = None,
    cancel: asyncio.Event | None = None,
) -> MapSnapshot:
    """Wait until the map exists, has loaded, and is not animating."""
    settings = settings or get_settings()
    opts = _options(settings, timeout_ms, settings.timeouts.map_load, "map to be ready")
    return await _wait(accessor, lambda s: s.is_ready, opts, cancel)


async def wait_for_tiles_loaded(
    accessor: PageStateAccessor,
    *,
    settings: Settings | None = None,
    timeout_ms: int | None = None,
    cancel: asyncio.Event | None = None,
) -> MapSnapshot:
    """Wait until at least one tile exists and every tile image has loaded."""
    settings = settings or get_settings()
    opts = _options(settings, timeout_ms, settings.timeouts.tile_load, "tiles to load")
    return await _wait(accessor, lambda s: s.all_tiles_loaded, opts, cancel)


async def wait_for_map_idle(
    accessor: PageStateAccessor,
    *,
    settings: Settings | None = None,
    timeout_ms: int | None = None,
    cancel: asyncio.Event | None = None,
) -> MapSnapshot:
    """Wait for zoom/pan animations to settle."""
    settings = settings or get_settings()
    opts = _options(settings, timeout_ms, settings.timeouts.animation_settle, "map animations to settle")
    return await _wait(accessor, lambda s: s.map_present and not s.animating, opts, cancel)


async def wait_for_zoom(
    accessor: PageStateAccessor,
    expected_zoom: float,
    *,
    tolerance: float | None = None,
    settings: Settings | None = None,
    timeout_ms: int | None = None,
    cancel: asyncio.Event | None = None,
) -> MapSnapshot:
    """Wait until the zoom level is within `tolerance` of `expected_zoom` (exact by default)."""
    settings = settings or get_settings()
    tol = settings.thresholds.zoom_tolerance if tolerance is None else float(tolerance)
    opts = _options(settings, timeout_ms, settings.timeouts.zoom_operation, f"zoom level {expected_zoom}")

    def _check(s: MapSnapshot) -> bool:
        return s.viewport is not None and abs(s.viewport.zoom - expected_zoom) <= tol

    return await _wait(accessor, _check, opts, cancel)


async def wait_for_center_change(
    accessor: PageStateAccessor,
    initial: Coordinate,
    *,
    settings: Settings | None = None,
    timeout_ms: int | None = None,
    cancel: asyncio.Event | None = None,
) -> MapSnapshot:
    """Wait until the map center moved away from `initial` and the map has settled.

    Snapshots taken mid-animation (zoom or pan, see `MapSnapshot.animating`) never count,
    so the returned center is where the pan ended rather than a frame along the way.
    """
    settings = settings or get_settings()
    threshold = settings.thresholds.coordinate_change_min
    opts = _options(settings, timeout_ms, settings.timeouts.pan_operation, "coordinate change")

    def _check(s: MapSnapshot) -> bool:
        if s.viewport is None or s.animating:
            return False
        return validate_coordinate_change(initial, s.viewport.center.as_coordinate(), threshold)

    return await _wait(accessor, _check, opts, cancel)


async def wait_for_layer_change(
    accessor: PageStateAccessor,
    *,
    settings: Settings | None = None,
    timeout_ms: int | None = None,
    cancel: asyncio.Event | None = None,
) -> MapSnapshot:
    """Wait for a base-layer switch: tiles present and fully loaded again."""
    settings = settings or get_settings()
    opts = _options(settings, timeout_ms, settings.timeouts.layer_switch, "layer change")
    return await _wait(accessor, lambda s: s.all_tiles_loaded and not s.animating, opts, cancel)
