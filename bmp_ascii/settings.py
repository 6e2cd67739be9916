"""Rendering settings and their JSON representation."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path

from .char_map import DEFAULT_CHAR_MAP, parse_char_map
from .errors import ParseError


@dataclass(frozen=True)
class RenderSettings:
    """Options controlling how a bitmap is turned into text.

    ``char_map`` is ordered darkest to lightest.
    """

    char_map: bytes = DEFAULT_CHAR_MAP
    invert_brightness: bool = False
    standard_padding: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.char_map, bytes):
            raise ParseError(f"Character map must be bytes, got {type(self.char_map).__name__}")
        if not self.char_map:
            raise ParseError("Character map must contain at least one glyph")
        for name in ("invert_brightness", "standard_padding"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ParseError(f"Setting {name!r} must be true or false, got {value!r}")


DEFAULT_SETTINGS = RenderSettings()


def load_settings(path: Path | None) -> RenderSettings:
    if path is None:
        return DEFAULT_SETTINGS
    with Path(path).open("r", encoding="utf-8") as fp:
        data = json.load(fp)
    if not isinstance(data, dict):
        raise ParseError(f"Settings file {path} must contain a JSON object")

    known = {field.name for field in fields(RenderSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ParseError(f"Unknown settings in {path}: {', '.join(unknown)}")
    if "char_map" in data:
        if not isinstance(data["char_map"], str):
            raise ParseError(f"Setting 'char_map' in {path} must be a string")
        data["char_map"] = parse_char_map(data["char_map"])
    return RenderSettings(**data)
