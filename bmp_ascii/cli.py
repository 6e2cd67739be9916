"""Command line interface for the BMP to ASCII converter."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Iterable

from .bmp import BmpHeader, decode, read_header
from .char_map import parse_char_map
from .errors import ParseError
from .render import render
from .settings import RenderSettings, load_settings

logger = logging.getLogger(__name__)

CHAR_MAP_EXAMPLE = '"@ # ! - ."'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a 24-bit BMP image as ASCII art")
    parser.add_argument("bitmap_file", type=Path, help="The bitmap file to be read")
    parser.add_argument(
        "-H",
        "--print-header",
        action="store_true",
        help="Print some header values before the art",
    )
    parser.add_argument(
        "-i",
        "--inverse-brightness",
        action="store_true",
        default=None,
        help="Invert the brightness",
    )
    parser.add_argument(
        "-o",
        "--output-file",
        type=Path,
        default=None,
        help="File to write the art to (must not exist yet)",
    )
    parser.add_argument(
        "-c",
        "--custom-charmap",
        default=None,
        help=f"Custom characters, darkest first; odd characters are ignored, e.g. {CHAR_MAP_EXAMPLE}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional JSON file overriding the default render settings",
    )
    parser.add_argument(
        "--standard-padding",
        action="store_true",
        default=None,
        help="Align pixel rows to 4 bytes the way common encoders do",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root = logging.getLogger("bmp_ascii")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


def format_header(header: BmpHeader) -> str:
    rows = [
        ("signature", header.signature),
        ("file size", header.file_size),
        ("pixel array offset", header.pixel_array_offset),
        ("image width", header.width),
        ("image height", header.height),
        ("bits per pixel", header.bits_per_pixel),
        ("image size", header.image_size),
    ]
    label_width = max(len(label) for label, _ in rows)
    return "\n".join(f"{label:<{label_width}}: {value}" for label, value in rows)


def resolve_settings(args: argparse.Namespace) -> RenderSettings:
    settings = load_settings(args.config)
    overrides = {}
    if args.custom_charmap is not None:
        char_map = parse_char_map(args.custom_charmap)
        if not char_map:
            raise ParseError(f"Custom char map is empty, example {CHAR_MAP_EXAMPLE}")
        overrides["char_map"] = char_map
    if args.inverse_brightness is not None:
        overrides["invert_brightness"] = args.inverse_brightness
    if args.standard_padding is not None:
        overrides["standard_padding"] = args.standard_padding
    return dataclasses.replace(settings, **overrides)


def run(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    buffer = args.bitmap_file.read_bytes()
    logger.debug("read %d bytes from %s", len(buffer), args.bitmap_file)

    if args.print_header:
        print(format_header(read_header(buffer, standard_padding=settings.standard_padding)))

    image = decode(buffer, standard_padding=settings.standard_padding)
    art = render(image, settings.char_map, settings.invert_brightness)

    if args.output_file is not None:
        if args.output_file.exists():
            print(f"file {args.output_file} already exists", file=sys.stderr)
            return 1
        args.output_file.write_bytes(art)
        print(f"wrote art to {args.output_file}")
        return 0

    sys.stdout.write(art.decode("ascii"))
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    setup_logging(args.verbose)
    try:
        return run(args)
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
