"""Geo package - Web Mercator projection and view window resolution."""

from staticmap.geo.bounds import ViewWindow, choose_zoom, combined_extent, resolve_view
from staticmap.geo.projection import (
    geo_to_pixel,
    lat_to_y,
    lon_to_x,
    pixel_to_geo,
    pixel_to_tile,
    project_many,
    validate_latitude,
    validate_longitude,
    wrap_tile_x,
    x_to_lon,
    y_to_lat,
)

__all__ = [
    'ViewWindow',
    'choose_zoom',
    'combined_extent',
    'geo_to_pixel',
    'lat_to_y',
    'lon_to_x',
    'pixel_to_geo',
    'pixel_to_tile',
    'project_many',
    'resolve_view',
    'validate_latitude',
    'validate_longitude',
    'wrap_tile_x',
    'x_to_lon',
    'y_to_lat',
]
