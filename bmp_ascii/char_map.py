"""Parsing of user supplied glyph palettes."""

from __future__ import annotations

from .errors import ParseError

# Darkest to lightest.
DEFAULT_CHAR_MAP = b"#!-. "


def parse_char_map(text: str) -> bytes:
    """Turn a ``"G S G S ..."`` string into an ordered palette of glyph bytes.

    Characters at even positions are glyphs, the ones in between are
    separators and are ignored. Every glyph must encode to exactly one byte
    in UTF-8. An empty string yields an empty palette; rejecting that is up
    to the caller.
    """

    glyphs = bytearray()
    for position, char in enumerate(text):
        if position % 2:
            continue
        try:
            encoded = char.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ParseError(f"Character at position {position} cannot be encoded") from exc
        if len(encoded) != 1:
            raise ParseError(
                f"Character {char!r} at position {position} is not a single byte glyph"
            )
        glyphs += encoded
    return bytes(glyphs)
