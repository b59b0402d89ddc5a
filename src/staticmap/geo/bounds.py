"""
View window resolution.

Turns the requested canvas size, optional zoom/center and the extents of the
registered tools into a concrete ViewWindow: zoom, center and the range of
tiles that covers every pixel of the canvas.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from staticmap.exceptions import (
    InvalidSizeError,
    InvalidZoomError,
    MissingCenterError,
    MissingZoomError,
)
from staticmap.geo.projection import (
    lat_to_y,
    lon_to_x,
    validate_latitude,
    validate_longitude,
)
from staticmap.shared.constants import MAX_LATITUDE, MAX_ZOOM, TILE_SIZE

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from staticmap.tools.base import Extent, Tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewWindow:
    """Resolved mapping between geographic coordinates and canvas pixels.

    ``x_min``/``y_min`` are inclusive, ``x_max``/``y_max`` exclusive tile
    indices. Indices are not wrapped: x may leave [0, 2**zoom) when the
    view crosses the antimeridian.
    """

    zoom: int
    center_lon: float
    center_lat: float
    x_center: float
    y_center: float
    width: int
    height: int
    tile_size: int
    x_min: int
    x_max: int
    y_min: int
    y_max: int

    def x_to_px(self, x: float) -> int:
        """Fractional tile x -> canvas pixel column."""
        return math.floor((x - self.x_center) * self.tile_size + self.width / 2 + 0.5)

    def y_to_px(self, y: float) -> int:
        """Fractional tile y -> canvas pixel row."""
        return math.floor(
            (y - self.y_center) * self.tile_size + self.height / 2 + 0.5
        )

    def lon_to_px(self, lon: float) -> int:
        return self.x_to_px(lon_to_x(lon, self.zoom))

    def lat_to_px(self, lat: float) -> int:
        return self.y_to_px(lat_to_y(lat, self.zoom))

    def geo_to_px(self, lon: float, lat: float) -> tuple[int, int]:
        return self.lon_to_px(lon), self.lat_to_px(lat)

    def tile_indices(self) -> Iterator[tuple[int, int]]:
        """Yield every (x, y) tile index in the range, column by column."""
        for x in range(self.x_min, self.x_max):
            for y in range(self.y_min, self.y_max):
                yield x, y

    @property
    def tile_count(self) -> int:
        return (self.x_max - self.x_min) * (self.y_max - self.y_min)


def combined_extent(
    tools: Iterable[Tool], zoom: int, tile_size: int = TILE_SIZE
) -> Extent | None:
    """Smallest (lon_min, lat_min, lon_max, lat_max) box holding every tool.

    Tools reporting no extent are ignored; None means nothing constrains
    the view. Latitudes are clamped to the Mercator range since tools
    padded by a pixel radius may reach past the poles at low zoom.
    """
    extents = [e for e in (t.extent(zoom, tile_size) for t in tools) if e is not None]
    if not extents:
        return None
    lon_min = min(e[0] for e in extents)
    lat_min = max(min(e[1] for e in extents), -MAX_LATITUDE)
    lon_max = max(e[2] for e in extents)
    lat_max = min(max(e[3] for e in extents), MAX_LATITUDE)
    return lon_min, lat_min, lon_max, lat_max


def _span_px(
    extent: Extent,
    zoom: int,
    tile_size: int,
    center: tuple[float, float] | None,
) -> tuple[float, float]:
    lon_min, lat_min, lon_max, lat_max = extent
    x0, x1 = lon_to_x(lon_min, zoom), lon_to_x(lon_max, zoom)
    # y grows southwards
    y0, y1 = lat_to_y(lat_max, zoom), lat_to_y(lat_min, zoom)
    if center is None:
        return (x1 - x0) * tile_size, (y1 - y0) * tile_size
    cx, cy = lon_to_x(center[0], zoom), lat_to_y(center[1], zoom)
    return (
        2 * max(cx - x0, x1 - cx) * tile_size,
        2 * max(cy - y0, y1 - cy) * tile_size,
    )


def choose_zoom(
    tools: Iterable[Tool],
    *,
    width: int,
    height: int,
    padding: tuple[int, int] = (0, 0),
    tile_size: int = TILE_SIZE,
    center: tuple[float, float] | None = None,
) -> int:
    """Finest zoom at which all tools plus padding fit on the canvas.

    Searches from MAX_ZOOM downwards and falls back to 0. With an explicit
    ``center`` (lon, lat) the extent must fit symmetrically around it.
    """
    tools = list(tools)
    avail_w = width - 2 * padding[0]
    avail_h = height - 2 * padding[1]
    for zoom in range(MAX_ZOOM, -1, -1):
        extent = combined_extent(tools, zoom, tile_size)
        if extent is None:
            continue
        span_w, span_h = _span_px(extent, zoom, tile_size, center)
        if span_w <= avail_w and span_h <= avail_h:
            return zoom
    return 0


def resolve_view(
    *,
    width: int,
    height: int,
    padding: tuple[int, int] = (0, 0),
    tile_size: int = TILE_SIZE,
    zoom: int | None = None,
    center_lon: float | None = None,
    center_lat: float | None = None,
    tools: Iterable[Tool] = (),
) -> ViewWindow:
    """Build the ViewWindow for one render call.

    Raises:
        InvalidSizeError: width, height or tile_size is not positive
        InvalidZoomError: explicit zoom outside [0, MAX_ZOOM]
        MissingZoomError: no zoom and no tool extent to infer it from
        MissingCenterError: no center and no tool extent to infer it from
        InvalidCoordinateError: center outside the Mercator range

    """
    if width <= 0 or height <= 0:
        msg = f'Canvas size must be positive, got {width}x{height}'
        raise InvalidSizeError(msg)
    if tile_size <= 0:
        msg = f'Tile size must be positive, got {tile_size}'
        raise InvalidSizeError(msg)
    if zoom is not None and not (0 <= zoom <= MAX_ZOOM):
        msg = f'Zoom {zoom} outside supported range [0, {MAX_ZOOM}]'
        raise InvalidZoomError(msg)
    if center_lon is not None:
        validate_longitude(center_lon)
    if center_lat is not None:
        validate_latitude(center_lat)

    tools = list(tools)
    has_center = center_lon is not None and center_lat is not None

    if zoom is None:
        if combined_extent(tools, MAX_ZOOM, tile_size) is None:
            msg = 'Zoom is not set and there are no tools to infer it from'
            raise MissingZoomError(msg)
        zoom = choose_zoom(
            tools,
            width=width,
            height=height,
            padding=padding,
            tile_size=tile_size,
            center=(center_lon, center_lat) if has_center else None,  # type: ignore[arg-type]
        )
        logger.debug('Inferred zoom %d from %d tools', zoom, len(tools))

    if not has_center:
        extent = combined_extent(tools, zoom, tile_size)
        if extent is None:
            msg = 'Center is not set and there are no tools to infer it from'
            raise MissingCenterError(msg)
        lon_min, lat_min, lon_max, lat_max = extent
        if center_lon is None:
            center_lon = (lon_min + lon_max) / 2
        if center_lat is None:
            center_lat = (lat_min + lat_max) / 2

    assert center_lon is not None
    assert center_lat is not None

    x_center = lon_to_x(center_lon, zoom)
    y_center = lat_to_y(center_lat, zoom)

    x_min = math.floor(x_center - width / (2 * tile_size))
    y_min = math.floor(y_center - height / (2 * tile_size))
    x_max = x_min + math.ceil(width / tile_size) + 1
    y_max = y_min + math.ceil(height / tile_size) + 1

    view = ViewWindow(
        zoom=zoom,
        center_lon=center_lon,
        center_lat=center_lat,
        x_center=x_center,
        y_center=y_center,
        width=width,
        height=height,
        tile_size=tile_size,
        x_min=x_min,
        x_max=x_max,
        y_min=y_min,
        y_max=y_max,
    )
    logger.debug(
        'Resolved view: zoom=%d center=(%.6f, %.6f) tiles x[%d,%d) y[%d,%d)',
        zoom,
        center_lat,
        center_lon,
        x_min,
        x_max,
        y_min,
        y_max,
    )
    return view
