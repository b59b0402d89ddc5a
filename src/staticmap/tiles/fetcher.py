"""
Tile acquisition for one view window.

Tiles already in the shared cache are reused; the rest are downloaded
concurrently, each with a fixed number of attempts, decoded and inserted
into the cache. One tile failing for good aborts the whole acquisition.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from staticmap.exceptions import TileFetchError
from staticmap.geo.projection import is_tile_row_in_world, wrap_tile_x
from staticmap.imaging.composer import decode_image
from staticmap.infrastructure.http.client import download_tile_bytes, make_http_session
from staticmap.shared.constants import (
    DOWNLOAD_CONCURRENCY,
    HTTP_RETRIES_DEFAULT,
    HTTP_RETRY_DELAY_S,
    HTTP_TIMEOUT_DEFAULT,
)
from staticmap.tiles.cache import TileCache

if TYPE_CHECKING:
    from collections.abc import Callable

    import aiohttp
    from PIL import Image

    from staticmap.geo.bounds import ViewWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PositionedTile:
    """Decoded tile with the (unwrapped) index used to place it on the canvas."""

    x: int
    y: int
    url: str
    image: Image.Image


def tile_url(url_template: str, zoom: int, x: int, y: int) -> str:
    """Substitute {z}/{x}/{y} with plain text replacement."""
    return (
        url_template.replace('{z}', str(zoom))
        .replace('{x}', str(x))
        .replace('{y}', str(y))
    )


class TileAcquirer:
    """Fetches the tiles covering a view, using and filling a TileCache."""

    def __init__(
        self,
        url_template: str,
        cache: TileCache | None = None,
        *,
        concurrency: int = DOWNLOAD_CONCURRENCY,
        retries: int = HTTP_RETRIES_DEFAULT,
        retry_delay: float = HTTP_RETRY_DELAY_S,
        timeout: float = HTTP_TIMEOUT_DEFAULT,
        session_factory: Callable[[int], aiohttp.ClientSession] = make_http_session,
    ):
        if concurrency < 1:
            msg = f'Concurrency must be at least 1, got {concurrency}'
            raise ValueError(msg)
        if retries < 1:
            msg = f'Retries must be at least 1, got {retries}'
            raise ValueError(msg)
        self.url_template = url_template
        self.cache = cache if cache is not None else TileCache()
        self.concurrency = concurrency
        self.retries = retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self._session_factory = session_factory

    def tile_urls(self, view: ViewWindow) -> list[tuple[int, int, str]]:
        """(x, y, url) for every tile in the view that lies inside the world.

        x wraps around the antimeridian; rows above or below the Mercator
        world are skipped rather than wrapped.
        """
        out: list[tuple[int, int, str]] = []
        for x, y in view.tile_indices():
            if not is_tile_row_in_world(y, view.zoom):
                continue
            url = tile_url(self.url_template, view.zoom, wrap_tile_x(x, view.zoom), y)
            out.append((x, y, url))
        return out

    def acquire(
        self,
        view: ViewWindow,
        *,
        on_progress: Callable[[int], None] | None = None,
    ) -> list[PositionedTile]:
        """Blocking wrapper around async_acquire.

        Must not be called from a running event loop; use async_acquire there.
        """
        return asyncio.run(self.async_acquire(view, on_progress=on_progress))

    async def async_acquire(
        self,
        view: ViewWindow,
        *,
        on_progress: Callable[[int], None] | None = None,
    ) -> list[PositionedTile]:
        entries = self.tile_urls(view)

        images: dict[str, Image.Image] = {}
        missing: list[str] = []
        for _, _, url in entries:
            if url in images or url in missing:
                continue
            cached = self.cache.get(url)
            if cached is None:
                missing.append(url)
            else:
                images[url] = cached

        logger.info(
            'Tiles for zoom %d: %d needed, %d cached, %d to download',
            view.zoom,
            len(entries),
            len(images),
            len(missing),
        )
        if missing:
            images.update(await self._fetch_missing(missing, on_progress))

        return [PositionedTile(x, y, url, images[url]) for x, y, url in entries]

    async def _fetch_missing(
        self,
        urls: list[str],
        on_progress: Callable[[int], None] | None,
    ) -> dict[str, Image.Image]:
        sem = asyncio.Semaphore(self.concurrency)
        out: dict[str, Image.Image] = {}

        async with self._session_factory(self.concurrency) as client:

            async def _worker(url: str) -> None:
                async with sem:
                    img = await self.fetch_tile(client, url)
                self.cache.put(url, img)
                out[url] = img
                if on_progress is not None:
                    on_progress(1)

            tasks = [asyncio.ensure_future(_worker(u)) for u in urls]
            try:
                await asyncio.gather(*tasks)
            except BaseException:
                for t in tasks:
                    t.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        return out

    async def fetch_tile(self, client: aiohttp.ClientSession, url: str) -> Image.Image:
        """
        Download and decode one tile with a fixed retry budget.

        Every failure (transport, HTTP status, decoding) counts as one
        attempt. Attempts are separated by ``retry_delay`` seconds.

        Raises:
            TileFetchError: all attempts failed; ``cause`` is the last error

        """
        last_exc: Exception | None = None
        for attempt in range(1, self.retries + 1):
            try:
                data = await download_tile_bytes(client, url, timeout=self.timeout)
                return decode_image(data)
            except Exception as e:
                last_exc = e
                logger.warning(
                    'Tile %s attempt %d/%d failed: %s', url, attempt, self.retries, e
                )
            if attempt < self.retries:
                await asyncio.sleep(self.retry_delay)
        logger.error('Giving up on tile %s after %d attempts', url, self.retries)
        raise TileFetchError(url, last_exc)
