from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PIL import Image

from staticmap.imaging.composer import alpha_composite_clipped, new_canvas
from staticmap.shared.constants import CANVAS_BACKGROUND

if TYPE_CHECKING:
    from collections.abc import Iterable

    from staticmap.geo.bounds import ViewWindow
    from staticmap.tiles.fetcher import PositionedTile
    from staticmap.tools.base import Tool

logger = logging.getLogger(__name__)


def paste_tiles(
    canvas: Image.Image, view: ViewWindow, tiles: Iterable[PositionedTile]
) -> int:
    """Blit each tile at its pixel offset; returns how many touched the canvas."""
    pasted = 0
    for tile in tiles:
        img = tile.image
        if img.size != (view.tile_size, view.tile_size):
            img = img.resize((view.tile_size, view.tile_size), Image.Resampling.LANCZOS)
        if alpha_composite_clipped(canvas, img, view.x_to_px(tile.x), view.y_to_px(tile.y)):
            pasted += 1
    return pasted


def draw_tools(canvas: Image.Image, view: ViewWindow, tools: Iterable[Tool]) -> None:
    """
    Draw tools in registration order.

    Each tool draws on its own transparent layer which is then
    alpha-composited onto the canvas, so later tools end up on top.
    """
    for tool in tools:
        layer = Image.new('RGBA', canvas.size, (0, 0, 0, 0))
        tool.draw(view, layer)
        canvas.alpha_composite(layer)
        layer.close()


def compose_map(
    view: ViewWindow,
    tiles: Iterable[PositionedTile],
    tools: Iterable[Tool],
    *,
    background: tuple[int, int, int, int] = CANVAS_BACKGROUND,
    canvas: Image.Image | None = None,
) -> Image.Image:
    """
    Paste the base layer, then draw the tools.

    ``canvas`` is drawn on in place when given; otherwise a new one is
    allocated with ``background``.
    """
    if canvas is None:
        canvas = new_canvas(view.width, view.height, background)
    pasted = paste_tiles(canvas, view, tiles)
    tools = list(tools)
    draw_tools(canvas, view, tools)
    logger.debug('Composed %d tiles and %d tools', pasted, len(tools))
    return canvas
