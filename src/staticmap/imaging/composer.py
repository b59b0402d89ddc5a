"""Image primitives: canvas allocation, clipped blits, PNG decode/encode."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from staticmap.exceptions import InvalidSizeError, PngDecodingError, PngEncodingError
from staticmap.shared.constants import CANVAS_BACKGROUND

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def new_canvas(
    width: int,
    height: int,
    background: tuple[int, int, int, int] = CANVAS_BACKGROUND,
) -> Image.Image:
    """Allocate an RGBA canvas, raising InvalidSizeError if that is impossible."""
    if width <= 0 or height <= 0:
        msg = f'Canvas size must be positive, got {width}x{height}'
        raise InvalidSizeError(msg)
    try:
        return Image.new('RGBA', (width, height), background)
    except (MemoryError, ValueError, Image.DecompressionBombError) as e:
        msg = f'Cannot allocate {width}x{height} canvas: {e}'
        raise InvalidSizeError(msg) from e


def overlap_rect(
    x: int, y: int, w: int, h: int, canvas_w: int, canvas_h: int
) -> tuple[int, int, int, int] | None:
    """
    Intersection of a w*h rect placed at (x, y) with the canvas.

    Returns (x0, y0, x1, y1) in canvas pixels, or None if they do not meet.
    """
    x0 = max(x, 0)
    y0 = max(y, 0)
    x1 = min(x + w, canvas_w)
    y1 = min(y + h, canvas_h)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1


def alpha_composite_clipped(
    canvas: Image.Image, img: Image.Image, x: int, y: int
) -> bool:
    """
    Alpha-composite ``img`` onto ``canvas`` with its top-left at (x, y).

    Parts outside the canvas are clipped. Returns False if nothing was drawn.
    """
    rect = overlap_rect(x, y, img.width, img.height, canvas.width, canvas.height)
    if rect is None:
        return False
    x0, y0, x1, y1 = rect
    src = img if img.mode == 'RGBA' else img.convert('RGBA')
    canvas.alpha_composite(src, dest=(x0, y0), source=(x0 - x, y0 - y, x1 - x, y1 - y))
    return True


def decode_image(data: bytes) -> Image.Image:
    """Decode raster bytes (png/jpg/webp) into a fully loaded RGBA image."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert('RGBA')
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        msg = f'Cannot decode tile image ({len(data)} bytes): {e}'
        raise PngDecodingError(msg) from e


def encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    try:
        img.save(buf, format='PNG')
    except (OSError, ValueError) as e:
        msg = f'Cannot encode PNG: {e}'
        raise PngEncodingError(msg) from e
    return buf.getvalue()


def save_png(img: Image.Image, out_path: Path) -> None:
    """Encode ``img`` as PNG and write it to ``out_path``."""
    data = encode_png(img)
    try:
        out_path.write_bytes(data)
    except OSError as e:
        msg = f'Cannot write PNG to {out_path}: {e}'
        raise PngEncodingError(msg) from e
    logger.info('Saved %dx%d PNG to %s', img.width, img.height, out_path)
