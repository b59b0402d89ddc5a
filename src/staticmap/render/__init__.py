"""Render package - tile base layer and annotation layers."""
from staticmap.render.compose import compose_map, draw_tools, paste_tiles

__all__ = [
    'compose_map',
    'draw_tools',
    'paste_tiles',
]
