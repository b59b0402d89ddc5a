"""Render static map images from XYZ tiles with drawn annotations."""

from staticmap.domain.models import MapSettings
from staticmap.exceptions import (
    InvalidCoordinateError,
    InvalidSizeError,
    InvalidZoomError,
    MissingCenterError,
    MissingZoomError,
    PngDecodingError,
    PngEncodingError,
    StaticMapError,
    TileFetchError,
)
from staticmap.geo.bounds import ViewWindow
from staticmap.map import StaticMap, StaticMapBuilder
from staticmap.tiles.cache import TileCache
from staticmap.tools import Circle, Icon, Line, Marker, Polygon, Tool

__all__ = [
    'Circle',
    'Icon',
    'InvalidCoordinateError',
    'InvalidSizeError',
    'InvalidZoomError',
    'Line',
    'MapSettings',
    'Marker',
    'MissingCenterError',
    'MissingZoomError',
    'PngDecodingError',
    'PngEncodingError',
    'Polygon',
    'StaticMap',
    'StaticMapBuilder',
    'StaticMapError',
    'TileCache',
    'TileFetchError',
    'Tool',
    'ViewWindow',
]
