"""Single-pass byte sequences used as field values.

A field value is modelled as a read-once cursor over bytes rather than a
materialized array, so adapters may stream large values without buffering
them in full. Consuming a sequence advances its read position; there is no
reset or clone.

Exports
-------
- ByteSequence:       Abstract read-once byte cursor (`has_next`, `next_byte`).
- ByteArraySequence:  Cursor over an owned copy of a fixed byte buffer.
- StreamByteSequence: Pull-based cursor over a binary file-like object.
- as_record:          Build a record from a mapping of field name to bytes.
- materialize:        Consume every sequence of a record into plain bytes.

Typical usage
-------------
    seq = ByteArraySequence(b"\\x01\\x02")
    while seq.has_next():
        b = seq.next_byte()

    # or, equivalently, with the iterator protocol
    data = bytes(ByteArraySequence(b"\\x01\\x02"))
"""

from __future__ import annotations

import abc
from collections.abc import Iterator, Mapping
from typing import BinaryIO

from .errors import ByteSequenceExhausted

__all__ = [
    "ByteSequence",
    "ByteArraySequence",
    "StreamByteSequence",
    "as_record",
    "materialize",
]

_CHUNK = 64 * 1024  # 64 KiB


class ByteSequence(abc.ABC):
    """Ordered, finite, one-shot sequence of bytes.

    Not thread-safe: concurrent consumption of the same sequence is undefined.
    """

    @abc.abstractmethod
    def has_next(self) -> bool:
        """Return True iff at least one more byte remains."""

    @abc.abstractmethod
    def next_byte(self) -> int:
        """Return the next byte (0..255) and advance the read position.

        Raises:
            ByteSequenceExhausted: If no byte remains.
        """

    def read_all(self) -> bytes:
        """Consume the remainder of the sequence and return it as bytes."""
        out = bytearray()
        while self.has_next():
            out.append(self.next_byte())
        return bytes(out)

    # ---- iterator protocol ----

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if not self.has_next():
            raise StopIteration
        return self.next_byte()


class ByteArraySequence(ByteSequence):
    """Cursor over a private copy of a fixed byte buffer.

    Example:
        seq = ByteArraySequence(bytes([1, 2, 3, 4]))
        assert seq.next_byte() == 1
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def has_next(self) -> bool:
        return self._pos < len(self._data)

    def next_byte(self) -> int:
        if self._pos >= len(self._data):
            raise ByteSequenceExhausted(self._pos)
        value = self._data[self._pos]
        self._pos += 1
        return value

    def read_all(self) -> bytes:
        rest = self._data[self._pos :]
        self._pos = len(self._data)
        return rest

    def __repr__(self) -> str:
        remaining = len(self._data) - self._pos
        return f"{type(self).__name__}(remaining={remaining})"


class StreamByteSequence(ByteSequence):
    """Pull-based cursor over a binary file-like object.

    Reads from the stream's *current position* in chunks of `chunk_size`
    bytes until EOF. The stream is not closed by the sequence; the caller
    owns it.
    """

    def __init__(self, fileobj: BinaryIO, chunk_size: int = _CHUNK) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._fileobj = fileobj
        self._chunk_size = chunk_size
        self._buffer = b""
        self._offset = 0
        self._consumed = 0
        self._eof = False

    def _fill(self) -> bool:
        """Ensure the buffer holds an unread byte; return False at EOF."""
        while self._offset >= len(self._buffer):
            if self._eof:
                return False
            chunk = self._fileobj.read(self._chunk_size)
            if not chunk:
                self._eof = True
                return False
            self._buffer = chunk
            self._offset = 0
        return True

    def has_next(self) -> bool:
        return self._fill()

    def next_byte(self) -> int:
        if not self._fill():
            raise ByteSequenceExhausted(self._consumed)
        value = self._buffer[self._offset]
        self._offset += 1
        self._consumed += 1
        return value


def as_record(values: Mapping[str, bytes]) -> dict[str, ByteSequence]:
    """Build a record whose fields are fresh `ByteArraySequence` cursors."""
    return {name: ByteArraySequence(data) for name, data in values.items()}


def materialize(record: Mapping[str, ByteSequence]) -> dict[str, bytes]:
    """Consume every field of `record` and return plain bytes per field.

    The record's sequences are exhausted afterwards.
    """
    return {name: seq.read_all() for name, seq in record.items()}
