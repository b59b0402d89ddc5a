from __future__ import annotations

import ssl

import aiohttp
import certifi

from staticmap.shared.constants import (
    DOWNLOAD_CONCURRENCY,
    HTTP_OK,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_USER_AGENT,
)


def make_http_session(
    concurrency: int = DOWNLOAD_CONCURRENCY,
) -> aiohttp.ClientSession:
    """Create a session for tile downloads.

    Certificates come from certifi so TLS works on systems without a usable
    CA store. The connector limit matches the download concurrency.
    """
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(ssl=ssl_context, limit=max(1, concurrency))
    return aiohttp.ClientSession(
        connector=connector,
        headers={'User-Agent': HTTP_USER_AGENT},
    )


async def download_tile_bytes(
    client: aiohttp.ClientSession,
    url: str,
    *,
    timeout: float = HTTP_TIMEOUT_DEFAULT,
) -> bytes:
    """GET ``url`` and return the response body.

    Any status other than 200 raises RuntimeError; transport failures
    propagate as aiohttp/asyncio exceptions. The caller decides on retries.
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with client.get(url, timeout=client_timeout) as resp:
        sc = resp.status
        if sc != HTTP_OK:
            msg = f'Unexpected HTTP {sc} for {url}'
            raise RuntimeError(msg)
        return await resp.read()
