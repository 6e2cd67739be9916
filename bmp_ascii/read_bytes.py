"""Little-endian integer extraction from raw byte buffers."""

from __future__ import annotations

import struct

from .errors import InsufficientBytes

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


def _unpack(fmt: struct.Struct, buffer: bytes, offset: int) -> int:
    if offset < 0:
        raise ValueError(f"Offset must be non-negative, got {offset}")
    if len(buffer) < fmt.size or offset + fmt.size > len(buffer):
        raise InsufficientBytes(
            f"Need {fmt.size} bytes at offset {offset}, buffer holds {len(buffer)}"
        )
    return fmt.unpack_from(buffer, offset)[0]


def read_u16_le(buffer: bytes, offset: int) -> int:
    """Read an unsigned 16-bit little-endian integer at ``offset``."""

    return _unpack(_U16, buffer, offset)


def read_u32_le(buffer: bytes, offset: int) -> int:
    """Read an unsigned 32-bit little-endian integer at ``offset``."""

    return _unpack(_U32, buffer, offset)
