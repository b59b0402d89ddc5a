"""
Web Mercator projection helpers.

Tile coordinates are fractional: the integer part is the XYZ tile index and
the fractional part the position inside that tile. World pixels are tile
coordinates multiplied by the tile size.
"""

from __future__ import annotations

import math

import numpy as np

from staticmap.exceptions import InvalidCoordinateError
from staticmap.shared.constants import (
    MAX_LATITUDE,
    TILE_SIZE,
    WORLD_LNG_HALF_SPAN_DEG,
    WORLD_LNG_SPAN_DEG,
)


def validate_longitude(lon: float) -> float:
    if not math.isfinite(lon):
        msg = f'Longitude must be finite, got {lon!r}'
        raise InvalidCoordinateError(msg)
    return lon


def validate_latitude(lat: float) -> float:
    """Reject latitudes Web Mercator cannot project to finite pixels."""
    if not math.isfinite(lat) or abs(lat) > MAX_LATITUDE:
        msg = f'Latitude {lat!r} outside Web Mercator range ±{MAX_LATITUDE}'
        raise InvalidCoordinateError(msg)
    return lat


def lon_to_x(lon: float, zoom: int) -> float:
    """Longitude (degrees) -> fractional tile x at zoom."""
    validate_longitude(lon)
    return (lon + WORLD_LNG_HALF_SPAN_DEG) / WORLD_LNG_SPAN_DEG * (2**zoom)


def lat_to_y(lat: float, zoom: int) -> float:
    """Latitude (degrees) -> fractional tile y at zoom."""
    validate_latitude(lat)
    phi = math.radians(lat)
    merc = math.log(math.tan(math.pi / 4 + phi / 2))
    return (1 - merc / math.pi) / 2 * (2**zoom)


def x_to_lon(x: float, zoom: int) -> float:
    return x / (2**zoom) * WORLD_LNG_SPAN_DEG - WORLD_LNG_HALF_SPAN_DEG


def y_to_lat(y: float, zoom: int) -> float:
    merc = math.pi * (1 - 2 * y / (2**zoom))
    return math.degrees(math.atan(math.sinh(merc)))


def geo_to_pixel(
    lon: float, lat: float, zoom: int, tile_size: int = TILE_SIZE
) -> tuple[float, float]:
    """(lon, lat) -> world pixel coordinates at zoom."""
    return lon_to_x(lon, zoom) * tile_size, lat_to_y(lat, zoom) * tile_size


def pixel_to_geo(
    px: float, py: float, zoom: int, tile_size: int = TILE_SIZE
) -> tuple[float, float]:
    """World pixel coordinates -> (lon, lat) at zoom."""
    return x_to_lon(px / tile_size, zoom), y_to_lat(py / tile_size, zoom)


def pixel_to_tile(px: float, py: float, tile_size: int = TILE_SIZE) -> tuple[int, int]:
    """World pixel -> index of the tile containing it."""
    return math.floor(px / tile_size), math.floor(py / tile_size)


def wrap_tile_x(x: int, zoom: int) -> int:
    """Wrap a tile column into [0, 2**zoom); the world repeats in longitude."""
    return x % (2**zoom)


def is_tile_row_in_world(y: int, zoom: int) -> bool:
    return 0 <= y < 2**zoom


def project_many(
    lons: np.ndarray | list[float],
    lats: np.ndarray | list[float],
    zoom: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised lon_to_x / lat_to_y for polylines and polygons."""
    lon_arr = np.asarray(lons, dtype=np.float64)
    lat_arr = np.asarray(lats, dtype=np.float64)
    if lon_arr.shape != lat_arr.shape:
        msg = f'Coordinate arrays differ in shape: {lon_arr.shape} vs {lat_arr.shape}'
        raise InvalidCoordinateError(msg)
    if not np.all(np.isfinite(lon_arr)):
        msg = 'Longitude must be finite'
        raise InvalidCoordinateError(msg)
    bad = ~np.isfinite(lat_arr) | (np.abs(lat_arr) > MAX_LATITUDE)
    if np.any(bad):
        msg = (
            f'Latitude {lat_arr[bad][0]!r} outside Web Mercator range '
            f'±{MAX_LATITUDE}'
        )
        raise InvalidCoordinateError(msg)

    n = float(2**zoom)
    xs = (lon_arr + WORLD_LNG_HALF_SPAN_DEG) / WORLD_LNG_SPAN_DEG * n
    phi = np.radians(lat_arr)
    ys = (1 - np.log(np.tan(np.pi / 4 + phi / 2)) / np.pi) / 2 * n
    return xs, ys
