"""Imaging package - canvas and PNG helpers built on Pillow."""

from staticmap.imaging.composer import (
    alpha_composite_clipped,
    decode_image,
    encode_png,
    new_canvas,
    overlap_rect,
    save_png,
)

__all__ = [
    'alpha_composite_clipped',
    'decode_image',
    'encode_png',
    'new_canvas',
    'overlap_rect',
    'save_png',
]
