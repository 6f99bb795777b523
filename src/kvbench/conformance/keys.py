"""Key and value encoding helpers for scan scenarios.

Keys sort as plain strings, so numeric keys must be zero-padded to a fixed
width to scan in numeric order. That is the caller's job, not the store's.
"""

import struct

KEY_WIDTH = 5
_INDEX = struct.Struct("<i")


def padded(i: int, width: int = KEY_WIDTH) -> str:
    """Return `i` as a zero-padded decimal string of at least `width` chars.

    Raises:
        ValueError: If `i` is negative.
    """
    if i < 0:
        raise ValueError(f"cannot pad a negative key: {i}")
    return str(i).zfill(width)


def encode_index(i: int) -> bytes:
    """Encode `i` as a 4-byte little-endian two's-complement integer.

    Raises:
        struct.error: If `i` does not fit in a signed 32-bit integer.
    """
    return _INDEX.pack(i)


def decode_index(data: bytes) -> int:
    """Decode 4 little-endian bytes produced by `encode_index`."""
    return _INDEX.unpack(data)[0]
