"""
Leaflet page-state accessor.

`LeafletStateReader` reads the live map through a single `page.evaluate(...)` call
and parses the result into a `MapSnapshot`. The page object is duck-typed: anything
with `async evaluate(expression, arg)` works (a Playwright async `Page`, a `Frame`,
or a test stub), so this module has no browser dependency.

The reader is itself an async callable, which makes it a page-state accessor for
the waits in `gischeck.inspection.waits`.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Protocol

from gischeck.config.settings import Settings
from gischeck.domain.models import MapSnapshot

logger = logging.getLogger(__name__)

# Receives {"mapGlobal": ..., "tileSelector": ...}; returns null when no map exists yet.
SNAPSHOT_SCRIPT = """
(args) => {
  const map = window[args.mapGlobal];
  if (!map) return null;
  const tiles = Array.from(document.querySelectorAll(args.tileSelector));
  let layerCount = 0;
  if (typeof map.eachLayer === 'function') map.eachLayer(() => { layerCount += 1; });
  const center = map.getCenter();
  const bounds = map.getBounds();
  return {
    map_present: true,
    viewport: {
      center: { lat: center.lat, lng: center.lng },
      zoom: map.getZoom(),
      bounds: {
        north: bounds.getNorth(),
        south: bounds.getSouth(),
        east: bounds.getEast(),
        west: bounds.getWest(),
      },
    },
    loaded: !!map._loaded,
    animating: !!(map._animatingZoom || map._animatingPan),
    tile_count: tiles.length,
    tiles_loaded: tiles.filter((t) => t.complete && t.naturalWidth > 0).length,
    layer_count: layerCount,
  };
}
"""


class EvaluatingPage(Protocol):
    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...


PageStateAccessor = Callable[[], Awaitable[MapSnapshot]]


class LeafletStateReader:
    def __init__(
        self,
        page: EvaluatingPage,
        *,
        map_global: str = "map",
        tile_selector: str = ".leaflet-tile",
    ):
        self._page = page
        self._args = {"mapGlobal": map_global, "tileSelector": tile_selector}

    @classmethod
    def from_settings(cls, page: EvaluatingPage, settings: Settings) -> "LeafletStateReader":
        return cls(page, map_global=settings.map.global_name, tile_selector=settings.map.tile_selector)

    async def snapshot(self) -> MapSnapshot:
        """Read the current map state.

        Raises:
            pydantic.ValidationError: If the page returned a malformed payload.
        """
        raw = await self._page.evaluate(SNAPSHOT_SCRIPT, self._args)
        if raw is None:
            logger.debug("No map instance on window.%s yet", self._args["mapGlobal"])
            return MapSnapshot()
        return MapSnapshot.model_validate(raw)

    async def __call__(self) -> MapSnapshot:
        return await self.snapshot()
