"""Length-prefixed framing: a 2-byte big-endian length followed by the payload."""

from __future__ import annotations

import struct
from typing import BinaryIO

MAX_FRAME_SIZE = 16384
"""Largest payload allowed in a single frame, to bound memory use."""

_LENGTH = struct.Struct(">H")


class FrameError(ValueError):
    """A frame is empty, too large, or otherwise malformed."""


def _write_all(writer: BinaryIO, chunk: bytes) -> None:
    written = writer.write(chunk)
    if written is not None and written < len(chunk):
        raise OSError(f"short write: {written} of {len(chunk)} bytes")


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = reader.read(remaining)
        if not chunk:
            got = size - remaining
            if got == 0:
                raise EOFError("end of stream")
            raise EOFError(f"unexpected end of stream after {got} of {size} bytes")
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def write_framed(writer: BinaryIO, data: bytes) -> None:
    """Write ``data`` to ``writer`` preceded by its 2-byte big-endian length."""
    if len(data) > MAX_FRAME_SIZE:
        raise FrameError(f"data too large: {len(data)} bytes (max {MAX_FRAME_SIZE})")
    _write_all(writer, _LENGTH.pack(len(data)))
    _write_all(writer, bytes(data))


def read_framed(reader: BinaryIO) -> bytes:
    """Read one length-prefixed frame from ``reader`` and return its payload."""
    (length,) = _LENGTH.unpack(_read_exact(reader, _LENGTH.size))
    if length == 0:
        raise FrameError("invalid frame length: 0")
    if length > MAX_FRAME_SIZE:
        raise FrameError(f"frame too large: {length} bytes (max {MAX_FRAME_SIZE})")
    return _read_exact(reader, length)