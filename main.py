"""Command line entry point for the BMP to ASCII converter."""

from __future__ import annotations

from bmp_ascii.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
