"""Typed streams: every stream opens with one byte naming the traffic it carries."""

from __future__ import annotations

import enum
from typing import Any, BinaryIO


class StreamType(enum.IntEnum):
    """Marker byte sent first on every stream to identify its purpose."""

    TCP = 0x01
    UDP = 0x02
    TUN = 0x03

    def __str__(self) -> str:
        return self.name


class InvalidStreamTypeError(ValueError):
    """An unknown stream type byte was encountered."""


class StreamTypeMismatchError(ValueError):
    """A stream carried a different type than the one expected."""


def _validate(stream_type: int) -> StreamType:
    try:
        return StreamType(stream_type)
    except ValueError:
        raise InvalidStreamTypeError(
            f"invalid stream type: 0x{int(stream_type) & 0xFF:02x}"
        ) from None


class StreamWrapper:
    """A byte stream together with the local and remote addresses of its connection."""

    def __init__(self, stream: BinaryIO, local_addr: Any, remote_addr: Any) -> None:
        self._stream = stream
        self._local_addr = local_addr
        self._remote_addr = remote_addr

    @property
    def local_addr(self) -> Any:
        """Local network address of the underlying connection."""
        return self._local_addr

    @property
    def remote_addr(self) -> Any:
        """Remote network address of the underlying connection."""
        return self._remote_addr

    @property
    def closed(self) -> bool:
        """True once the underlying stream has been closed."""
        return bool(getattr(self._stream, "closed", False))

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the stream."""
        return self._stream.read(size)

    def write(self, data: bytes) -> int:
        """Write ``data`` to the stream and return the number of bytes written."""
        written = self._stream.write(data)
        return len(data) if written is None else written

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()

    def __enter__(self) -> StreamWrapper:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def write_stream_type(stream: BinaryIO, stream_type: int) -> None:
    """Write the stream type marker; must be the first byte sent on a new stream."""
    marker = _validate(stream_type)
    written = stream.write(bytes([marker]))
    if written is not None and written < 1:
        raise OSError("failed to write stream type: short write")


def read_stream_type(stream: BinaryIO) -> StreamType:
    """Read and validate the stream type marker at the start of an accepted stream."""
    chunk = stream.read(1)
    if not chunk:
        raise EOFError("failed to read stream type: end of stream")
    return _validate(chunk[0])


def stream_type_string(stream_type: int) -> str:
    """Human-readable name of a stream type byte."""
    try:
        return StreamType(stream_type).name
    except ValueError:
        return f"Unknown(0x{int(stream_type) & 0xFF:02x})"