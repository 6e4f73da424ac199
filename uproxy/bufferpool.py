"""A thread-safe pool of fixed-size byte buffers."""

from __future__ import annotations

import threading


class BufferPool:
    """Hands out reusable ``bytearray`` buffers of a single fixed size."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"buffer size must be non-negative, got {size}")
        self._size = size
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    @property
    def size(self) -> int:
        """Size in bytes of every buffer this pool hands out."""
        return self._size

    def get(self) -> bytearray:
        """Take a buffer from the pool, allocating a new one if none is free."""
        with self._lock:
            if self._free:
                return self._free.pop()
        return bytearray(self._size)

    def put(self, buf: bytearray | None) -> None:
        """Return a buffer to the pool; ``None`` and wrongly sized buffers are dropped."""
        if buf is None or len(buf) != self._size:
            return
        with self._lock:
            self._free.append(buf)

    def __len__(self) -> int:
        """Number of buffers currently waiting in the pool."""
        with self._lock:
            return len(self._free)