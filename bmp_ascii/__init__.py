"""Render uncompressed 24-bit BMP images as ASCII art."""

from .bmp import BmpHeader, DecodedImage, Pixel, decode, encode_bitmap, read_header
from .char_map import DEFAULT_CHAR_MAP, parse_char_map
from .errors import BmpAsciiError, InsufficientBytes, ParseError, UnsupportedFormat
from .render import render
from .settings import RenderSettings, load_settings

__all__ = [
    "BmpHeader",
    "DecodedImage",
    "Pixel",
    "decode",
    "encode_bitmap",
    "read_header",
    "DEFAULT_CHAR_MAP",
    "parse_char_map",
    "BmpAsciiError",
    "InsufficientBytes",
    "ParseError",
    "UnsupportedFormat",
    "render",
    "RenderSettings",
    "load_settings",
]
