"""Tile cache and acquisition.

This package provides:
- TileCache: thread-safe in-memory URL -> image cache shared between maps
- TileAcquirer: concurrent, retrying fetcher that fills the cache
"""

from staticmap.tiles.cache import CacheStats, TileCache
from staticmap.tiles.fetcher import PositionedTile, TileAcquirer, tile_url

__all__ = [
    'CacheStats',
    'PositionedTile',
    'TileAcquirer',
    'TileCache',
    'tile_url',
]
