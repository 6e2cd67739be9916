from __future__ import annotations

import io
import struct

import numpy as np
import pytest
from PIL import Image

from bmp_ascii.bmp import HEADER_SIZE, Pixel, decode, encode_bitmap, read_header, save_bitmap
from bmp_ascii.errors import InsufficientBytes, UnsupportedFormat

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


def _pillow_bmp(array: np.ndarray) -> bytes:
    out = io.BytesIO()
    Image.fromarray(array).save(out, format="BMP")
    return out.getvalue()


def test_header_fields_are_read_at_fixed_offsets():
    buffer = encode_bitmap([[RED, GREEN], [BLUE, WHITE]])
    header = read_header(buffer)
    assert HEADER_SIZE == 38
    assert header.signature == "BM"
    assert header.file_size == len(buffer)
    assert header.pixel_array_offset == 54
    assert header.dib_header_size == 40
    assert (header.width, header.height) == (2, 2)
    assert header.planes == 1
    assert header.bits_per_pixel == 24
    assert header.compression == 0
    assert header.bytes_per_pixel == 3
    assert header.row_padding_bytes == 2
    assert header.bytes_per_row == 8
    assert header.image_size == 16


def test_image_size_falls_back_to_computed_value():
    buffer = bytearray(encode_bitmap([[RED, GREEN], [BLUE, WHITE]]))
    struct.pack_into("<I", buffer, 34, 0)
    assert read_header(bytes(buffer)).image_size == 16


def test_pixels_are_kept_in_storage_order():
    image = decode(encode_bitmap([[RED, GREEN], [BLUE, WHITE]]))
    assert len(image.pixels) == 4
    # Bottom row of the picture comes first.
    assert image.pixels == [
        Pixel(0, 0, 255),
        Pixel(255, 255, 255),
        Pixel(255, 0, 0),
        Pixel(0, 255, 0),
    ]
    assert image.pixel(0, 1) == Pixel(255, 0, 0)
    assert [list(row) for row in image.top_down_rows()] == [
        [Pixel(255, 0, 0), Pixel(0, 255, 0)],
        [Pixel(0, 0, 255), Pixel(255, 255, 255)],
    ]


def test_width_three_skips_single_padding_byte():
    rows = [
        [RED, GREEN, BLUE],
        [WHITE, BLACK, RED],
        [(1, 2, 3), (4, 5, 6), (7, 8, 9)],
    ]
    buffer = encode_bitmap(rows)
    assert len(buffer) == 54 + (9 + 1) * 3

    image = decode(buffer)
    assert image.header.row_padding_bytes == 1
    assert len(image.pixels) == 9
    expected = [Pixel(*rgb) for row in reversed(rows) for rgb in row]
    assert image.pixels == expected


def test_standard_padding_matches_pillow():
    rng = np.random.default_rng(1234)
    array = rng.integers(0, 256, size=(5, 7, 3), dtype=np.uint8)
    image = decode(_pillow_bmp(array), standard_padding=True)

    assert image.header.row_padding_bytes == 3
    np.testing.assert_array_equal(np.flipud(image.channels()), array)


def test_even_width_decodes_pillow_output_with_default_padding():
    rng = np.random.default_rng(99)
    array = rng.integers(0, 256, size=(3, 6, 3), dtype=np.uint8)
    image = decode(_pillow_bmp(array))
    np.testing.assert_array_equal(np.flipud(image.channels()), array)


def test_empty_images_decode_to_no_pixels():
    assert decode(encode_bitmap([])).pixels == []
    image = decode(encode_bitmap([[], []]))
    assert image.pixels == []
    assert image.channels().shape == (2, 0, 3)


def test_short_buffer_is_insufficient():
    with pytest.raises(InsufficientBytes):
        decode(b"BM\x00")
    with pytest.raises(InsufficientBytes):
        decode(encode_bitmap([[RED]])[:HEADER_SIZE - 1])


def test_truncated_pixel_array_is_insufficient():
    buffer = encode_bitmap([[RED, GREEN], [BLUE, WHITE]])
    with pytest.raises(InsufficientBytes):
        decode(buffer[:-4])


@pytest.mark.parametrize("bits", [1, 8, 16, 32])
def test_unsupported_bit_depth(bits):
    buffer = bytearray(encode_bitmap([[RED]]))
    struct.pack_into("<H", buffer, 28, bits)
    with pytest.raises(UnsupportedFormat):
        decode(bytes(buffer))


def test_compressed_bitmap_is_rejected():
    buffer = bytearray(encode_bitmap([[RED]]))
    struct.pack_into("<I", buffer, 30, 1)
    with pytest.raises(UnsupportedFormat):
        decode(bytes(buffer))


@pytest.mark.parametrize("signature", [b"BA", b"\xff\xfe"])
def test_bad_signature_is_rejected(signature):
    buffer = signature + encode_bitmap([[RED]])[2:]
    with pytest.raises(UnsupportedFormat):
        decode(buffer)


def test_pixel_brightness():
    assert Pixel(0, 0, 0).brightness == 0.0
    assert Pixel(255, 255, 255).brightness == 1.0
    assert Pixel(255, 0, 0).brightness == pytest.approx(1 / 3)


def test_save_bitmap_writes_encoded_bytes(tmp_path):
    rows = [[RED, GREEN, BLUE]]
    path = tmp_path / "row.bmp"
    save_bitmap(path, rows, standard_padding=True)
    assert path.read_bytes() == encode_bitmap(rows, standard_padding=True)
    assert decode(path.read_bytes(), standard_padding=True).header.row_padding_bytes == 3
