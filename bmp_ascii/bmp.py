"""Decoding (and writing) of uncompressed 24-bit BMP images."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .errors import InsufficientBytes, UnsupportedFormat
from .read_bytes import read_u16_le, read_u32_le

logger = logging.getLogger(__name__)

SIGNATURE = "BM"
SUPPORTED_BITS_PER_PIXEL = (24,)

# File header followed by the leading fields of the DIB header, in file order.
HEADER_FIELDS: Tuple[Tuple[str, int, str], ...] = (
    ("signature", 2, "str"),
    ("file_size", 4, "u32"),
    ("reserved_1", 2, "u16"),
    ("reserved_2", 2, "u16"),
    ("pixel_array_offset", 4, "u32"),
    ("dib_header_size", 4, "u32"),
    ("width", 4, "u32"),
    ("height", 4, "u32"),
    ("planes", 2, "u16"),
    ("bits_per_pixel", 2, "u16"),
    ("compression", 4, "u32"),
    ("declared_image_size", 4, "u32"),
)
HEADER_SIZE = sum(width for _, width, _ in HEADER_FIELDS)

FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Pixel:
    red: int
    green: int
    blue: int

    @property
    def channel_sum(self) -> int:
        return self.red + self.green + self.blue

    @property
    def brightness(self) -> float:
        """Channel sum normalised to ``[0, 1]``."""

        return self.channel_sum / (255.0 * 3.0)


@dataclass(frozen=True)
class BmpHeader:
    """Fixed-offset header values of a bitmap file."""

    signature: str
    file_size: int
    reserved_1: int
    reserved_2: int
    pixel_array_offset: int
    dib_header_size: int
    width: int
    height: int
    planes: int
    bits_per_pixel: int
    compression: int
    declared_image_size: int
    standard_padding: bool = False

    @property
    def bytes_per_pixel(self) -> int:
        return self.bits_per_pixel // 8

    @property
    def row_padding_bytes(self) -> int:
        """Bytes skipped after every row of pixels.

        By default this is ``(width * bytes_per_pixel) % 4``. With
        ``standard_padding`` rows are aligned to the next multiple of four
        bytes instead, which is what most encoders write.
        """

        remainder = (self.width * self.bytes_per_pixel) % 4
        if self.standard_padding:
            return (4 - remainder) % 4
        return remainder

    @property
    def bytes_per_row(self) -> int:
        return self.bytes_per_pixel * self.width + self.row_padding_bytes

    @property
    def image_size(self) -> int:
        if self.declared_image_size:
            return self.declared_image_size
        return self.bytes_per_row * self.height

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def validate(self) -> None:
        """Raise :class:`UnsupportedFormat` unless the layout can be decoded."""

        if self.signature != SIGNATURE:
            raise UnsupportedFormat(
                f"Bad signature {self.signature!r}, expected {SIGNATURE!r}"
            )
        if self.bits_per_pixel not in SUPPORTED_BITS_PER_PIXEL:
            supported = ", ".join(str(bpp) for bpp in SUPPORTED_BITS_PER_PIXEL)
            raise UnsupportedFormat(
                f"Image bits per pixel ({self.bits_per_pixel}) not supported. "
                f"Supported: {supported}"
            )
        if self.compression != 0:
            raise UnsupportedFormat(
                f"Compressed bitmaps are not supported (compression={self.compression})"
            )


@dataclass
class DecodedImage:
    """Pixels of a bitmap in storage order.

    ``pixels`` is row-major with row 0 being the bottom row of the picture,
    exactly as the rows appear in the file.
    """

    header: BmpHeader
    pixels: List[Pixel]

    @property
    def width(self) -> int:
        return self.header.width

    @property
    def height(self) -> int:
        return self.header.height

    def pixel(self, x: int, y: int) -> Pixel:
        """Return the pixel at column ``x`` of storage row ``y`` (0 = bottom)."""

        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return self.pixels[y * self.width + x]

    def top_down_rows(self) -> Iterator[List[Pixel]]:
        """Yield rows in visual order, top row first."""

        for y in range(self.height - 1, -1, -1):
            start = y * self.width
            yield self.pixels[start : start + self.width]

    def channels(self) -> np.ndarray:
        """Return a ``(height, width, 3)`` RGB array in storage order."""

        if not self.pixels:
            return np.zeros((self.height, self.width, 3), dtype=np.uint8)
        flat = np.array(
            [(p.red, p.green, p.blue) for p in self.pixels], dtype=np.uint8
        )
        return flat.reshape(self.height, self.width, 3)


def _read_field(buffer: bytes, offset: int, width: int, kind: str):
    if kind == "u16":
        return read_u16_le(buffer, offset)
    if kind == "u32":
        return read_u32_le(buffer, offset)
    raw = bytes(buffer[offset : offset + width])
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnsupportedFormat(f"Signature {raw!r} is not valid UTF-8") from exc


def read_header(buffer: bytes, *, standard_padding: bool = False) -> BmpHeader:
    """Read the fixed header fields without validating them."""

    if len(buffer) < HEADER_SIZE:
        raise InsufficientBytes(
            f"Bitmap header needs {HEADER_SIZE} bytes, buffer holds {len(buffer)}"
        )

    values = {}
    offset = 0
    for name, width, kind in HEADER_FIELDS:
        values[name] = _read_field(buffer, offset, width, kind)
        offset += width

    header = BmpHeader(standard_padding=standard_padding, **values)
    logger.debug(
        "header: %dx%d, %d bpp, pixel array at %d, image size %d",
        header.width,
        header.height,
        header.bits_per_pixel,
        header.pixel_array_offset,
        header.image_size,
    )
    return header


def decode(buffer: bytes, *, standard_padding: bool = False) -> DecodedImage:
    """Decode a 24-bit BMP file held in ``buffer``.

    Pixels are returned in storage order (bottom row first); rendering is
    responsible for presenting them top to bottom.
    """

    header = read_header(buffer, standard_padding=standard_padding)
    header.validate()

    total = header.pixel_count
    if total == 0:
        return DecodedImage(header=header, pixels=[])

    stride = header.bytes_per_pixel
    padding = header.row_padding_bytes
    last_byte = (
        header.pixel_array_offset
        + (header.height - 1) * header.bytes_per_row
        + header.width * stride
    )
    if last_byte > len(buffer):
        raise InsufficientBytes(
            f"Pixel array ends at byte {last_byte}, buffer holds {len(buffer)}"
        )

    pixels: List[Pixel] = []
    cursor = header.pixel_array_offset
    column = 0
    while len(pixels) < total:
        blue, green, red = buffer[cursor : cursor + 3]
        pixels.append(Pixel(red, green, blue))
        cursor += stride
        column += 1
        if column == header.width:
            cursor += padding
            column = 0

    logger.debug("decoded %d pixels, %d padding bytes per row", len(pixels), padding)
    return DecodedImage(header=header, pixels=pixels)


def encode_bitmap(rows: Sequence[Sequence[RGB]], *, standard_padding: bool = False) -> bytes:
    """Encode visual rows (top row first) of RGB tuples as a 24-bit BMP."""

    rows = list(rows)
    width = len(rows[0]) if rows else 0
    for row in rows:
        if len(row) != width:
            raise ValueError("Rows must have equal length")

    height = len(rows)
    remainder = (width * 3) % 4
    row_padding = (4 - remainder) % 4 if standard_padding else remainder
    pixel_data_size = (width * 3 + row_padding) * height
    data_offset = FILE_HEADER_SIZE + INFO_HEADER_SIZE

    file_header = struct.pack(
        "<2sIHHI",
        SIGNATURE.encode("ascii"),
        data_offset + pixel_data_size,
        0,
        0,
        data_offset,
    )

    dib_header = struct.pack(
        "<IIIHHIIIIII",
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        24,
        0,
        pixel_data_size,
        2835,
        2835,
        0,
        0,
    )

    padding_bytes = b"\x00" * row_padding
    out = bytearray(file_header + dib_header)
    for row in reversed(rows):
        for red, green, blue in row:
            out.extend((blue & 0xFF, green & 0xFF, red & 0xFF))
        out.extend(padding_bytes)
    return bytes(out)


def save_bitmap(
    path: str | Path, rows: Sequence[Sequence[RGB]], *, standard_padding: bool = False
) -> None:
    """Write :func:`encode_bitmap` output to ``path``."""

    Path(path).write_bytes(encode_bitmap(rows, standard_padding=standard_padding))
