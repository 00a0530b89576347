"""Low-level reading of RIFF chunks in SoundFont files."""

from __future__ import annotations

import struct
from collections.abc import Iterator
from typing import Protocol


class SoundFontError(Exception):
    """Raised when SoundFont data is malformed or unsupported."""


class _Readable(Protocol):
    def read(self, size: int) -> bytes: ...


def _read_exact(stream: _Readable, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise SoundFontError(
            f"unexpected end of data: wanted {size} bytes, got {len(data)}"
        )
    return data


class CountingReader:
    """Wraps a stream and counts how many bytes have been read through it."""

    def __init__(self, stream: _Readable) -> None:
        self._stream = stream
        self.bytes_read = 0

    def read(self, size: int) -> bytes:
        data = self._stream.read(size)
        self.bytes_read += len(data)
        return data


def read_four_cc(stream: _Readable) -> str:
    """Read a four-character chunk identifier."""
    return _read_exact(stream, 4).decode("latin-1")


def read_i16(stream: _Readable) -> int:
    """Read a little-endian signed 16-bit integer."""
    return struct.unpack("<h", _read_exact(stream, 2))[0]


def read_u16(stream: _Readable) -> int:
    """Read a little-endian unsigned 16-bit integer."""
    return struct.unpack("<H", _read_exact(stream, 2))[0]


def read_i32(stream: _Readable) -> int:
    """Read a little-endian signed 32-bit integer."""
    return struct.unpack("<i", _read_exact(stream, 4))[0]


def read_fixed_length_string(stream: _Readable, size: int) -> str:
    """Read ``size`` bytes and return the text before the first NUL byte."""
    data = _read_exact(stream, size)
    return data.split(b"\0", 1)[0].decode("latin-1")


def discard_data(stream: _Readable, size: int) -> None:
    """Skip ``size`` bytes of the stream."""
    remaining = size
    while remaining > 0:
        step = min(remaining, 1 << 16)
        _read_exact(stream, step)
        remaining -= step


def iter_subchunks(
    stream: _Readable, list_type: str
) -> Iterator[tuple[str, int, CountingReader]]:
    """Open a LIST chunk of the given type and yield its sub-chunks.

    Each item is ``(chunk_id, size, reader)``; the consumer must read exactly
    ``size`` bytes of the body from ``reader`` before asking for the next one.
    """
    if read_four_cc(stream) != "LIST":
        raise SoundFontError("the LIST chunk was not found")
    end = read_i32(stream)
    reader = CountingReader(stream)
    actual = read_four_cc(reader)
    if actual != list_type:
        raise SoundFontError(
            f"the type of the LIST chunk must be '{list_type}', but was '{actual}'"
        )
    while reader.bytes_read < end:
        chunk_id = read_four_cc(reader)
        size = read_i32(reader)
        if size < 0:
            raise SoundFontError(f"the '{chunk_id}' chunk has a negative size")
        yield chunk_id, size, reader