"""Brightness to glyph mapping."""

from __future__ import annotations

import logging

import numpy as np

from .bmp import DecodedImage
from .errors import ParseError

logger = logging.getLogger(__name__)

LINE_BREAK = b"\n"


def glyph_indices(brightness, palette_length: int, invert: bool = False) -> np.ndarray:
    """Map brightness values in ``[0, 1]`` to indices into a palette.

    Halves round up, results are clamped to the palette and optionally
    mirrored so bright pixels pick the first glyphs.
    """

    top = palette_length - 1
    indices = np.floor(top * np.asarray(brightness, dtype=np.float64) + 0.5).astype(np.int64)
    indices = np.clip(indices, 0, top)
    if invert:
        indices = top - indices
    return indices


def glyph_index(brightness: float, palette_length: int, invert: bool = False) -> int:
    return int(glyph_indices(brightness, palette_length, invert))


def render(image: DecodedImage, char_map: bytes, invert_brightness: bool = False) -> bytes:
    """Render ``image`` as rows of glyphs, each followed by a line break.

    The output holds ``height * (width + 1)`` bytes, top row first.
    """

    if not char_map:
        raise ParseError("Character map must contain at least one glyph")

    height, width = image.height, image.width
    if height == 0 or width == 0:
        return LINE_BREAK * height

    channels = image.channels().astype(np.float64)
    brightness = channels.sum(axis=2) / (255.0 * 3.0)
    indices = glyph_indices(brightness, len(char_map), invert_brightness)

    palette = np.frombuffer(bytes(char_map), dtype=np.uint8)
    glyphs = np.flipud(palette[indices])
    breaks = np.full((height, 1), LINE_BREAK[0], dtype=np.uint8)
    art = np.hstack((glyphs, breaks))

    logger.debug("rendered %dx%d image with %d glyphs", width, height, len(char_map))
    return art.tobytes()
