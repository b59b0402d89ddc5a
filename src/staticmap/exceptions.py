"""Exceptions raised by the rendering pipeline."""

from __future__ import annotations


class StaticMapError(Exception):
    """Base exception for static map rendering."""


class InvalidSizeError(StaticMapError):
    """Canvas dimensions are zero, negative or cannot be allocated."""


class InvalidZoomError(StaticMapError):
    """Zoom level outside the supported range."""


class MissingZoomError(StaticMapError):
    """Zoom was not given and there are no tools to infer it from."""


class MissingCenterError(StaticMapError):
    """Center was not given and there are no tools to infer it from."""


class InvalidCoordinateError(StaticMapError, ValueError):
    """Coordinate outside the range Web Mercator can project."""


class PngDecodingError(StaticMapError):
    """Tile bytes could not be decoded into an image."""


class PngEncodingError(StaticMapError):
    """Rendered image could not be encoded or written."""


class TileFetchError(StaticMapError):
    """A tile could not be fetched within the retry budget."""

    def __init__(self, url: str, cause: BaseException | None) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f'Failed to fetch tile {url}: {cause}')
