"""Multi-point annotations: polylines and polygons."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from PIL import ImageDraw

from staticmap.geo.projection import project_many
from staticmap.shared.constants import (
    DEFAULT_TOOL_COLOR,
    LINE_SIMPLIFY_TOLERANCE_PX,
    MIN_POINTS_FOR_LINE,
    MIN_POINTS_FOR_POLYGON,
)
from staticmap.tools.base import Tool, to_rgba

if TYPE_CHECKING:
    from collections.abc import Sequence

    from PIL import Image

    from staticmap.geo.bounds import ViewWindow
    from staticmap.tools.base import ColorLike, Extent


def _coordinate_arrays(
    lats: Sequence[float], lons: Sequence[float], min_points: int
) -> tuple[np.ndarray, np.ndarray]:
    lat_arr = np.asarray(lats, dtype=np.float64)
    lon_arr = np.asarray(lons, dtype=np.float64)
    if lat_arr.shape != lon_arr.shape or lat_arr.ndim != 1:
        msg = (
            'Latitude and longitude lists must be flat and of equal length, '
            f'got {lat_arr.shape} and {lon_arr.shape}'
        )
        raise ValueError(msg)
    if lat_arr.size < min_points:
        msg = f'At least {min_points} points are required, got {lat_arr.size}'
        raise ValueError(msg)
    # Validates the Mercator range up front
    project_many(lon_arr, lat_arr, 0)
    return lat_arr, lon_arr


def to_canvas_px(
    view: ViewWindow, lats: np.ndarray, lons: np.ndarray
) -> np.ndarray:
    """Project coordinates to canvas pixels, returning an (N, 2) float array."""
    xs, ys = project_many(lons, lats, view.zoom)
    px = (xs - view.x_center) * view.tile_size + view.width / 2
    py = (ys - view.y_center) * view.tile_size + view.height / 2
    return np.column_stack((px, py))


def simplify_px(points: np.ndarray, tolerance: float) -> np.ndarray:
    """Drop points closer than ``tolerance`` to the previously kept one.

    The first and last points are always kept.
    """
    if len(points) <= MIN_POINTS_FOR_LINE:
        return points
    keep = [0]
    last = points[0]
    for i in range(1, len(points) - 1):
        if np.hypot(*(points[i] - last)) >= tolerance:
            keep.append(i)
            last = points[i]
    keep.append(len(points) - 1)
    return points[keep]


def _check_width(width: int) -> int:
    if width < 0:
        msg = f'Stroke width must not be negative, got {width}'
        raise ValueError(msg)
    return int(width)


def _coordinate_extent(lats: np.ndarray, lons: np.ndarray) -> Extent:
    return (
        float(lons.min()),
        float(lats.min()),
        float(lons.max()),
        float(lats.max()),
    )


class Line(Tool):
    """
    Polyline through the given coordinates.

    With ``simplify`` enabled, vertices closer than one pixel to the previous
    vertex at render zoom are skipped.
    """

    def __init__(
        self,
        lats: Sequence[float],
        lons: Sequence[float],
        *,
        color: ColorLike = DEFAULT_TOOL_COLOR,
        width: int = 2,
        simplify: bool = True,
    ) -> None:
        self.lats, self.lons = _coordinate_arrays(lats, lons, MIN_POINTS_FOR_LINE)
        self.color = to_rgba(color)
        self.width = _check_width(width)
        self.simplify = simplify

    def extent(self, zoom: int, tile_size: int) -> Extent:
        return _coordinate_extent(self.lats, self.lons)

    def draw(self, view: ViewWindow, image: Image.Image) -> None:
        points = to_canvas_px(view, self.lats, self.lons)
        if self.simplify:
            points = simplify_px(points, LINE_SIMPLIFY_TOLERANCE_PX)
        xy = [(float(x), float(y)) for x, y in points]
        draw = ImageDraw.Draw(image, 'RGBA')
        draw.line(xy, fill=self.color, width=self.width, joint='curve')

    def __repr__(self) -> str:
        return f'Line(points={len(self.lats)}, width={self.width})'


class Polygon(Tool):
    """Closed shape through the given coordinates with optional fill."""

    def __init__(
        self,
        lats: Sequence[float],
        lons: Sequence[float],
        *,
        fill_color: ColorLike | None = None,
        outline_color: ColorLike | None = DEFAULT_TOOL_COLOR,
        width: int = 1,
    ) -> None:
        self.lats, self.lons = _coordinate_arrays(
            lats, lons, MIN_POINTS_FOR_POLYGON
        )
        self.fill_color = to_rgba(fill_color) if fill_color else None
        self.outline_color = to_rgba(outline_color) if outline_color else None
        self.width = _check_width(width)

    def extent(self, zoom: int, tile_size: int) -> Extent:
        return _coordinate_extent(self.lats, self.lons)

    def draw(self, view: ViewWindow, image: Image.Image) -> None:
        points = to_canvas_px(view, self.lats, self.lons)
        xy = [(float(x), float(y)) for x, y in points]
        draw = ImageDraw.Draw(image, 'RGBA')
        draw.polygon(
            xy,
            fill=self.fill_color,
            outline=self.outline_color,
            width=self.width if self.outline_color else 0,
        )

    def __repr__(self) -> str:
        return f'Polygon(points={len(self.lats)})'
