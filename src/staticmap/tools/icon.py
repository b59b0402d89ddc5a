from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from staticmap.imaging.composer import alpha_composite_clipped, decode_image
from staticmap.tools.base import Tool, pixel_box_extent, validate_point

if TYPE_CHECKING:
    from staticmap.geo.bounds import ViewWindow
    from staticmap.tools.base import Extent


class Icon(Tool):
    """
    Raster icon anchored at (lat, lon).

    ``x_offset``/``y_offset`` locate the anchor inside the icon in pixels
    from its top-left corner, e.g. the tip of a pin.
    """

    def __init__(
        self,
        lat: float,
        lon: float,
        icon: Image.Image | str | Path,
        *,
        x_offset: int = 0,
        y_offset: int = 0,
    ) -> None:
        self.lon, self.lat = validate_point(lon, lat)
        if isinstance(icon, Image.Image):
            self.image = icon.convert('RGBA')
        else:
            self.image = decode_image(Path(icon).read_bytes())
        self.x_offset = int(x_offset)
        self.y_offset = int(y_offset)

    def extent(self, zoom: int, tile_size: int) -> Extent:
        w, h = self.image.size
        return pixel_box_extent(
            self.lon,
            self.lat,
            zoom,
            tile_size,
            left=self.x_offset,
            top=self.y_offset,
            right=w - self.x_offset,
            bottom=h - self.y_offset,
        )

    def draw(self, view: ViewWindow, image: Image.Image) -> None:
        x, y = view.geo_to_px(self.lon, self.lat)
        alpha_composite_clipped(image, self.image, x - self.x_offset, y - self.y_offset)

    def __repr__(self) -> str:
        return f'Icon(lat={self.lat}, lon={self.lon}, size={self.image.size})'
