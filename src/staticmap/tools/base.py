"""Base class for map annotations (tools)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from PIL import ImageColor

from staticmap.geo.projection import (
    lat_to_y,
    lon_to_x,
    validate_latitude,
    validate_longitude,
    x_to_lon,
    y_to_lat,
)

if TYPE_CHECKING:
    from PIL import Image

    from staticmap.geo.bounds import ViewWindow

# (lon_min, lat_min, lon_max, lat_max)
Extent = tuple[float, float, float, float]

RGBA = tuple[int, int, int, int]
ColorLike = str | tuple[int, int, int] | tuple[int, int, int, int]


def to_rgba(color: ColorLike) -> RGBA:
    """Normalize a PIL color name, hex string or RGB(A) tuple to RGBA."""
    if isinstance(color, str):
        rgb = ImageColor.getcolor(color, 'RGBA')
        return rgb  # type: ignore[return-value]
    if len(color) == 3:  # noqa: PLR2004
        r, g, b = color  # type: ignore[misc]
        return int(r), int(g), int(b), 255
    r, g, b, a = color  # type: ignore[misc]
    return int(r), int(g), int(b), int(a)


def pixel_box_extent(
    lon: float,
    lat: float,
    zoom: int,
    tile_size: int,
    *,
    left: float,
    top: float,
    right: float,
    bottom: float,
) -> Extent:
    """
    Geographic box covering a pixel rectangle anchored at (lon, lat).

    Args:
        lon: Anchor longitude
        lat: Anchor latitude
        zoom: Zoom level the pixel sizes refer to
        tile_size: Tile size in pixels
        left: Pixels the drawing reaches west of the anchor
        top: Pixels the drawing reaches north of the anchor
        right: Pixels the drawing reaches east of the anchor
        bottom: Pixels the drawing reaches south of the anchor

    Returns:
        (lon_min, lat_min, lon_max, lat_max)

    """
    x = lon_to_x(lon, zoom)
    y = lat_to_y(lat, zoom)
    return (
        x_to_lon(x - left / tile_size, zoom),
        y_to_lat(y + bottom / tile_size, zoom),
        x_to_lon(x + right / tile_size, zoom),
        y_to_lat(y - top / tile_size, zoom),
    )


def validate_point(lon: float, lat: float) -> tuple[float, float]:
    return validate_longitude(float(lon)), validate_latitude(float(lat))


class Tool(ABC):
    """
    Drawable geographic feature composited on top of the tiles.

    Subclasses report the area they need visible and draw themselves on a
    transparent RGBA layer the size of the canvas.
    """

    @abstractmethod
    def extent(self, zoom: int, tile_size: int) -> Extent | None:
        """
        Geographic box that must stay visible to show the whole tool.

        Pixel-sized tools depend on zoom and tile size. Return None when the
        tool places no constraint on the view.
        """

    @abstractmethod
    def draw(self, view: ViewWindow, image: Image.Image) -> None:
        """Draw the tool onto ``image`` using the pixel mapping of ``view``."""
