"""Exceptions raised while decoding bitmaps and parsing glyph maps."""

from __future__ import annotations


class BmpAsciiError(ValueError):
    """Base class for every failure surfaced by the conversion core."""


class InsufficientBytes(BmpAsciiError):
    """The buffer is too short for a required fixed-width field."""


class ParseError(BmpAsciiError):
    """A custom character map contains a glyph that is not a single byte."""


class UnsupportedFormat(BmpAsciiError):
    """The bitmap uses a layout this converter does not handle."""
