"""
Point annotations: filled circles and symbol markers.

Both are sized in pixels, so the geographic area they need visible shrinks
as zoom grows.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from PIL import ImageDraw

from staticmap.shared.constants import DEFAULT_TOOL_COLOR
from staticmap.tools.base import Tool, pixel_box_extent, to_rgba, validate_point

if TYPE_CHECKING:
    from PIL import Image

    from staticmap.geo.bounds import ViewWindow
    from staticmap.tools.base import ColorLike, Extent


class Circle(Tool):
    """Filled circle of ``radius`` pixels centred on (lat, lon)."""

    def __init__(
        self,
        lat: float,
        lon: float,
        *,
        radius: float = 5.0,
        color: ColorLike = DEFAULT_TOOL_COLOR,
    ) -> None:
        if radius < 0:
            msg = f'Circle radius must not be negative, got {radius}'
            raise ValueError(msg)
        self.lon, self.lat = validate_point(lon, lat)
        self.radius = float(radius)
        self.color = to_rgba(color)

    def extent(self, zoom: int, tile_size: int) -> Extent:
        r = self.radius
        return pixel_box_extent(
            self.lon, self.lat, zoom, tile_size, left=r, top=r, right=r, bottom=r
        )

    def draw(self, view: ViewWindow, image: Image.Image) -> None:
        x, y = view.geo_to_px(self.lon, self.lat)
        r = self.radius
        draw = ImageDraw.Draw(image, 'RGBA')
        draw.ellipse([x - r, y - r, x + r, y + r], fill=self.color)

    def __repr__(self) -> str:
        return f'Circle(lat={self.lat}, lon={self.lon}, radius={self.radius})'


class Marker(Tool):
    """
    Symbol marker at (lat, lon).

    ``symbol`` is one of ``dot``, ``square`` or ``triangle``; ``size`` is the
    symbol's edge length in pixels.
    """

    DOT = 'dot'
    SQUARE = 'square'
    TRIANGLE = 'triangle'
    SYMBOLS = (DOT, SQUARE, TRIANGLE)

    def __init__(
        self,
        lat: float,
        lon: float,
        *,
        symbol: str = DOT,
        size: float = 10.0,
        color: ColorLike = DEFAULT_TOOL_COLOR,
        outline_color: ColorLike | None = (0, 0, 0, 255),
        outline_width: int = 1,
    ) -> None:
        if symbol not in self.SYMBOLS:
            msg = f'Unknown marker symbol {symbol!r}, expected one of {self.SYMBOLS}'
            raise ValueError(msg)
        if size < 0:
            msg = f'Marker size must not be negative, got {size}'
            raise ValueError(msg)
        if outline_width < 0:
            msg = f'Marker outline width must not be negative, got {outline_width}'
            raise ValueError(msg)
        self.lon, self.lat = validate_point(lon, lat)
        self.symbol = symbol
        self.size = float(size)
        self.color = to_rgba(color)
        self.outline_color = to_rgba(outline_color) if outline_color else None
        self.outline_width = outline_width

    def extent(self, zoom: int, tile_size: int) -> Extent:
        half_h = self.size / 2 + self.outline_width
        half_w = half_h
        if self.symbol == self.TRIANGLE:
            half_w = self._triangle_side() / 2 + self.outline_width
        return pixel_box_extent(
            self.lon,
            self.lat,
            zoom,
            tile_size,
            left=half_w,
            top=half_h,
            right=half_w,
            bottom=half_h,
        )

    def _triangle_side(self) -> float:
        return self.size / math.sin(math.radians(60.0))

    def draw(self, view: ViewWindow, image: Image.Image) -> None:
        x, y = view.geo_to_px(self.lon, self.lat)
        draw = ImageDraw.Draw(image, 'RGBA')
        d = self.size / 2
        width = self.outline_width if self.outline_color else 0
        if self.symbol == self.SQUARE:
            draw.rectangle(
                [x - d, y - d, x + d, y + d],
                fill=self.color,
                outline=self.outline_color,
                width=width,
            )
        elif self.symbol == self.TRIANGLE:
            # Equilateral triangle with its centre on the anchor
            side = self._triangle_side()
            top = (x, y - d)
            left = (x - side / 2, y + d)
            right = (x + side / 2, y + d)
            draw.polygon(
                [top, right, left],
                fill=self.color,
                outline=self.outline_color,
                width=width,
            )
        else:
            draw.ellipse(
                [x - d, y - d, x + d, y + d],
                fill=self.color,
                outline=self.outline_color,
                width=width,
            )

    def __repr__(self) -> str:
        return f'Marker(lat={self.lat}, lon={self.lon}, symbol={self.symbol!r})'
