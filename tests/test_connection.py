import time

import pytest

from uproxy.connection import (
    ConnectionInfo,
    ConnectionState,
    format_stream_info,
    tls_cipher_suite_string,
    tls_version_string,
)
from uproxy.streams import StreamType


@pytest.mark.parametrize(
    "state, expected",
    [
        (ConnectionState.CONNECTING, "Connecting"),
        (ConnectionState.CONNECTED, "Connected"),
        (ConnectionState.DISCONNECTED, "Disconnected"),
        (ConnectionState.CLOSED, "Closed"),
    ],
)
def test_connection_state_string(state, expected):
    assert str(state) == expected


@pytest.mark.parametrize(
    "version, expected",
    [(0x0304, "TLS1.3"), (0x0303, "TLS1.2"), (0x0302, "TLS1.1"), (0x0301, "TLS1.0")],
)
def test_tls_version_string(version, expected):
    assert tls_version_string(version) == expected


def test_tls_version_string_unknown():
    result = tls_version_string(0x0305)
    assert result.startswith("Unknown(0x")
    assert "0305" in result


@pytest.mark.parametrize(
    "suite, expected",
    [
        (0x1301, "TLS_AES_128_GCM_SHA256"),
        (0x1302, "TLS_AES_256_GCM_SHA384"),
        (0x1303, "TLS_CHACHA20_POLY1305_SHA256"),
    ],
)
def test_tls_cipher_suite_string(suite, expected):
    assert tls_cipher_suite_string(suite) == expected


def test_tls_cipher_suite_string_unknown():
    result = tls_cipher_suite_string(0x00FF)
    assert result.startswith("Unknown(")
    assert "00ff" in result


def test_format_stream_info_known_type():
    assert format_stream_info(StreamType.TCP, 7) == "type=TCP stream_id=7"


def test_format_stream_info_unknown_type():
    result = format_stream_info(0xFF, 4)
    assert "Unknown(0xff)" in result
    assert result.endswith("stream_id=4")


def test_connection_info_defaults():
    info = ConnectionInfo(("127.0.0.1", 1000), ("127.0.0.1", 2000))
    assert info.state is ConnectionState.CONNECTED
    assert info.last_activity_at == info.connected_at
    assert info.local_addr == ("127.0.0.1", 1000)
    assert info.remote_addr == ("127.0.0.1", 2000)


def test_connection_duration_grows_from_start():
    started = time.monotonic() - 10
    info = ConnectionInfo(connected_at=started)
    assert info.connection_duration() >= 10
    assert info.idle_duration() >= 10


def test_update_activity_resets_idle_but_not_connection_time():
    started = time.monotonic() - 10
    info = ConnectionInfo(connected_at=started)
    info.update_activity()
    assert info.idle_duration() < 10
    assert info.connection_duration() >= 10
    assert info.last_activity_at > info.connected_at


def test_idle_never_exceeds_connection_duration():
    info = ConnectionInfo()
    info.update_activity()
    assert 0 <= info.idle_duration() <= info.connection_duration() + 1e-6