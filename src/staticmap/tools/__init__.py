"""Map annotations drawn on top of the tiles."""

from staticmap.tools.base import Extent, Tool, to_rgba
from staticmap.tools.icon import Icon
from staticmap.tools.markers import Circle, Marker
from staticmap.tools.shapes import Line, Polygon

__all__ = [
    'Circle',
    'Extent',
    'Icon',
    'Line',
    'Marker',
    'Polygon',
    'Tool',
    'to_rgba',
]
