"""
Static map facade.

StaticMap ties the pipeline together: resolve the view, acquire tiles,
compose tiles and tools, encode. StaticMapBuilder is the fluent entry point.

Example:
    m = (
        StaticMapBuilder()
        .width(300)
        .height(300)
        .zoom(4)
        .lat_center(52.6)
        .lon_center(13.4)
        .build()
    )
    m.add_tool(Circle(52.52, 13.40, radius=6))
    png = m.encode_png()

"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

from staticmap.domain.models import MapSettings
from staticmap.geo.bounds import resolve_view
from staticmap.imaging.composer import encode_png, new_canvas, save_png
from staticmap.render.compose import compose_map
from staticmap.tiles.cache import TileCache
from staticmap.tiles.fetcher import TileAcquirer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from PIL import Image

    from staticmap.geo.bounds import ViewWindow
    from staticmap.tiles.fetcher import PositionedTile
    from staticmap.tools.base import Tool

logger = logging.getLogger(__name__)


class StaticMap:
    """Map configuration plus an append-only list of tools.

    ``render`` can be called repeatedly; the view is recomputed every time
    while the tile cache is kept.
    """

    def __init__(
        self,
        settings: MapSettings | None = None,
        *,
        cache: TileCache | None = None,
        tools: Iterable[Tool] = (),
    ):
        self.settings = settings if settings is not None else MapSettings()
        self.cache = cache if cache is not None else TileCache()
        self._tools: list[Tool] = list(tools)

    @property
    def tools(self) -> tuple[Tool, ...]:
        return tuple(self._tools)

    def add_tool(self, tool: Tool) -> None:
        """Add a tool; tools are drawn in the order they were added."""
        self._tools.append(tool)

    def view(self) -> ViewWindow:
        """Resolve the view window without fetching anything."""
        s = self.settings
        return resolve_view(
            width=s.width,
            height=s.height,
            padding=s.padding,
            tile_size=s.tile_size,
            zoom=s.zoom,
            center_lon=s.center_lon,
            center_lat=s.center_lat,
            tools=self._tools,
        )

    def _acquirer(self) -> TileAcquirer:
        s = self.settings
        return TileAcquirer(
            s.url_template,
            self.cache,
            concurrency=s.concurrency,
            retries=s.retries,
            retry_delay=s.retry_delay,
            timeout=s.timeout,
        )

    def _prepare(self) -> tuple[ViewWindow, Image.Image]:
        """Resolve the view and allocate the canvas before any download."""
        view = self.view()
        canvas = new_canvas(view.width, view.height, self.settings.background)
        logger.info(
            'Rendering %dx%d map at zoom %d (%d tiles, %d tools)',
            view.width,
            view.height,
            view.zoom,
            view.tile_count,
            len(self._tools),
        )
        return view, canvas

    def _finish(
        self,
        view: ViewWindow,
        canvas: Image.Image,
        tiles: list[PositionedTile],
        started: float,
    ) -> Image.Image:
        logger.debug('Tile cache: %s', self.cache.stats())
        img = compose_map(view, tiles, self._tools, canvas=canvas)
        logger.info('Rendered map in %.2fs', time.perf_counter() - started)
        return img

    def render(
        self, *, on_progress: Callable[[int], None] | None = None
    ) -> Image.Image:
        """Render the map into a new RGBA image.

        Runs its own event loop, so it must not be called while one is
        running (Jupyter, async applications); use ``async_render`` there.
        """
        started = time.perf_counter()
        view, canvas = self._prepare()
        tiles = self._acquirer().acquire(view, on_progress=on_progress)
        return self._finish(view, canvas, tiles, started)

    async def async_render(
        self, *, on_progress: Callable[[int], None] | None = None
    ) -> Image.Image:
        """Render the map from inside a running event loop."""
        started = time.perf_counter()
        view, canvas = self._prepare()
        tiles = await self._acquirer().async_acquire(view, on_progress=on_progress)
        return self._finish(view, canvas, tiles, started)

    def encode_png(self) -> bytes:
        """Render the map and encode it as PNG."""
        return encode_png(self.render())

    def save_png(self, path: str | Path) -> None:
        """Render the map and write it as PNG to ``path``."""
        save_png(self.render(), Path(path))


class StaticMapBuilder:
    """Fluent builder for StaticMap; every setter returns the builder."""

    def __init__(self) -> None:
        self._fields: dict[str, Any] = {}
        self._cache: TileCache | None = None

    def width(self, width: int) -> StaticMapBuilder:
        """Image width in pixels (default 300)."""
        self._fields['width'] = width
        return self

    def height(self, height: int) -> StaticMapBuilder:
        """Image height in pixels (default 300)."""
        self._fields['height'] = height
        return self

    def padding(self, padding: tuple[int, int]) -> StaticMapBuilder:
        """Padding between tools and the image edge in x and y (default (0, 0))."""
        self._fields['padding_x'], self._fields['padding_y'] = padding
        return self

    def zoom(self, zoom: int) -> StaticMapBuilder:
        """Zoom level; inferred from the tools if not given."""
        self._fields['zoom'] = zoom
        return self

    def lat_center(self, lat: float) -> StaticMapBuilder:
        self._fields['center_lat'] = lat
        return self

    def lon_center(self, lon: float) -> StaticMapBuilder:
        self._fields['center_lon'] = lon
        return self

    def url_template(self, url_template: str) -> StaticMapBuilder:
        """Tile URL with {z}, {x} and {y} placeholders."""
        self._fields['url_template'] = url_template
        return self

    def tile_size(self, tile_size: int) -> StaticMapBuilder:
        self._fields['tile_size'] = tile_size
        return self

    def concurrency(self, concurrency: int) -> StaticMapBuilder:
        self._fields['concurrency'] = concurrency
        return self

    def cache(self, cache: TileCache) -> StaticMapBuilder:
        """Reuse a cache shared with other maps."""
        self._cache = cache
        return self

    def build(self) -> StaticMap:
        """Validate the configuration and create the map.

        Raises:
            pydantic.ValidationError: a setting is out of range

        """
        settings = MapSettings(**self._fields)
        return StaticMap(settings, cache=self._cache)
