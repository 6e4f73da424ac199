"""Connection metadata and formatting helpers for logging."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Any

from uproxy.streams import stream_type_string


class ConnectionState(enum.IntEnum):
    """Lifecycle state of a connection."""

    CONNECTING = 0
    CONNECTED = 1
    DISCONNECTED = 2
    CLOSED = 3

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass
class ConnectionInfo:
    """Addresses, timing and state of one connection; times are monotonic seconds."""

    local_addr: Any = None
    remote_addr: Any = None
    connected_at: float = field(default_factory=time.monotonic)
    last_activity_at: float | None = None
    state: ConnectionState = ConnectionState.CONNECTED

    def __post_init__(self) -> None:
        if self.last_activity_at is None:
            self.last_activity_at = self.connected_at

    def update_activity(self) -> None:
        """Record activity now."""
        self.last_activity_at = time.monotonic()

    def idle_duration(self) -> float:
        """Seconds since the last recorded activity."""
        assert self.last_activity_at is not None
        return time.monotonic() - self.last_activity_at

    def connection_duration(self) -> float:
        """Seconds since the connection was established."""
        return time.monotonic() - self.connected_at


_TLS_VERSIONS = {
    0x0304: "TLS1.3",
    0x0303: "TLS1.2",
    0x0302: "TLS1.1",
    0x0301: "TLS1.0",
}

_TLS_CIPHER_SUITES = {
    0x1301: "TLS_AES_128_GCM_SHA256",
    0x1302: "TLS_AES_256_GCM_SHA384",
    0x1303: "TLS_CHACHA20_POLY1305_SHA256",
}


def tls_version_string(version: int) -> str:
    """Human-readable name of a TLS protocol version number."""
    return _TLS_VERSIONS.get(version, f"Unknown(0x{version:04x})")


def tls_cipher_suite_string(suite: int) -> str:
    """Human-readable name of a TLS 1.3 cipher suite number."""
    return _TLS_CIPHER_SUITES.get(suite, f"Unknown(0x{suite:04x})")


def format_stream_info(stream_type: int, stream_id: int) -> str:
    """Format a stream's type and id for logging."""
    return f"type={stream_type_string(stream_type)} stream_id={stream_id}"