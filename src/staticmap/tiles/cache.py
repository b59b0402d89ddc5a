"""In-memory tile cache shared between renders.

TileCache maps a fully substituted tile URL to its decoded image. One
instance may be handed to several StaticMap objects, which then reuse each
other's tiles. Entries live as long as the cache object; there is no
eviction and nothing is written to disk.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PIL import Image

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Counters for cache usage."""

    entries: int
    hits: int
    misses: int
    inserts: int


class TileCache:
    """Thread-safe URL -> image mapping.

    Reads and writes are guarded by one lock; concurrent misses on the same
    URL are not coordinated and the last ``put`` wins.

    Usage:
        cache = TileCache()
        cache.put(url, tile_img)
        img = cache.get(url)
    """

    def __init__(self) -> None:
        self._tiles: dict[str, Image.Image] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._inserts = 0

    def get(self, url: str) -> Image.Image | None:
        """Return a copy of the cached tile, or None if absent.

        A copy is returned so callers may draw on it without touching the
        cached image.
        """
        with self._lock:
            img = self._tiles.get(url)
            if img is None:
                self._misses += 1
                return None
            self._hits += 1
            return img.copy()

    def put(self, url: str, img: Image.Image) -> None:
        """Insert or replace the tile for ``url``."""
        stored = img.copy()
        with self._lock:
            self._tiles[url] = stored
            self._inserts += 1

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._tiles)
            self._tiles.clear()
        logger.debug('Tile cache cleared (%d entries)', dropped)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self._tiles),
                hits=self._hits,
                misses=self._misses,
                inserts=self._inserts,
            )

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._tiles

    def __len__(self) -> int:
        with self._lock:
            return len(self._tiles)

    def __repr__(self) -> str:
        return f'TileCache(entries={len(self)})'
