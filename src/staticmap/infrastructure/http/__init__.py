"""HTTP client infrastructure."""
from staticmap.infrastructure.http.client import download_tile_bytes, make_http_session

__all__ = [
    'download_tile_bytes',
    'make_http_session',
]
