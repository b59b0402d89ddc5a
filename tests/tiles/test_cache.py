"""Tests for TileCache."""

from __future__ import annotations

import threading

import pytest
from PIL import Image

from staticmap.tiles.cache import CacheStats, TileCache

URL = 'https://tiles.example/3/4/5.png'


@pytest.fixture
def cache():
    """Create an empty TileCache."""
    return TileCache()


@pytest.fixture
def tile():
    return Image.new('RGBA', (256, 256), (10, 20, 30, 255))


class TestTileCache:
    """Tests for TileCache class."""

    def test_get_missing_returns_none(self, cache):
        """Test that get returns None for an unknown URL."""
        assert cache.get(URL) is None

    def test_put_and_get(self, cache, tile):
        """Test basic put and get operations."""
        cache.put(URL, tile)
        result = cache.get(URL)
        assert result is not None
        assert result.getpixel((0, 0)) == (10, 20, 30, 255)
        assert URL in cache
        assert len(cache) == 1

    def test_get_returns_copy(self, cache, tile):
        """Drawing on a returned tile must not change the cached one."""
        cache.put(URL, tile)
        first = cache.get(URL)
        first.putpixel((0, 0), (255, 255, 255, 255))
        assert cache.get(URL).getpixel((0, 0)) == (10, 20, 30, 255)

    def test_put_stores_copy(self, cache, tile):
        """Mutating the source image after put must not reach the cache."""
        cache.put(URL, tile)
        tile.putpixel((0, 0), (255, 255, 255, 255))
        assert cache.get(URL).getpixel((0, 0)) == (10, 20, 30, 255)

    def test_put_replaces(self, cache, tile):
        cache.put(URL, tile)
        cache.put(URL, Image.new('RGBA', (256, 256), (1, 1, 1, 255)))
        assert cache.get(URL).getpixel((0, 0)) == (1, 1, 1, 255)
        assert len(cache) == 1

    def test_stats(self, cache, tile):
        """Test hit/miss/insert counters."""
        cache.get(URL)
        cache.put(URL, tile)
        cache.get(URL)
        cache.get(URL)
        assert cache.stats() == CacheStats(entries=1, hits=2, misses=1, inserts=1)

    def test_clear(self, cache, tile):
        cache.put(URL, tile)
        cache.clear()
        assert len(cache) == 0
        assert cache.get(URL) is None

    def test_repr(self, cache, tile):
        cache.put(URL, tile)
        assert repr(cache) == 'TileCache(entries=1)'

    def test_concurrent_puts(self, cache):
        """Test puts from several threads."""
        img = Image.new('RGBA', (4, 4))

        def _fill(offset):
            for i in range(50):
                cache.put(f'u/{offset}/{i}', img)

        threads = [threading.Thread(target=_fill, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(cache) == 200
        assert cache.stats().inserts == 200
