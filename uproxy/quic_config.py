"""QUIC transport and TLS settings for the proxy's mutually authenticated connections."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

DEFAULT_MAX_IDLE_TIMEOUT = 3600.0
"""Seconds a connection may sit idle before it is closed."""

DEFAULT_KEEP_ALIVE_PERIOD = 30.0
"""Seconds between keep-alive packets."""

DEFAULT_MAX_INCOMING_STREAMS = 0
"""Concurrent incoming bidirectional streams; 0 leaves the transport default."""

DEFAULT_MAX_INCOMING_UNI_STREAMS = 0
"""Concurrent incoming unidirectional streams; 0 leaves the transport default."""

NEXT_PROTO_UPROXY = "uproxy"
"""ALPN protocol identifier."""

TLS_VERSION_1_2 = 0x0303
TLS_VERSION_1_3 = 0x0304

_MIN_IDLE_TIMEOUT = 10.0
_MIN_KEEP_ALIVE_PERIOD = 5.0

VerifyCallback = Callable[[Sequence[bytes], Optional[Sequence[object]]], None]
"""Called with the peer's raw DER certificates; raises to reject the peer."""


class ConfigError(ValueError):
    """A QUIC or TLS configuration is missing something or holds a bad value."""


class NoCertificateError(ConfigError):
    """No certificate was provided."""

    def __init__(self) -> None:
        super().__init__("no certificate provided")


class NoVerifyCallbackError(ConfigError):
    """No peer verification callback was provided."""

    def __init__(self) -> None:
        super().__init__("no verification callback provided")


class ClientAuth(enum.IntEnum):
    """How a TLS server treats client certificates."""

    NO_CLIENT_CERT = 0
    REQUEST_CLIENT_CERT = 1
    REQUIRE_ANY_CLIENT_CERT = 2
    VERIFY_CLIENT_CERT_IF_GIVEN = 3
    REQUIRE_AND_VERIFY_CLIENT_CERT = 4


@dataclass
class QUICConfigOptions:
    """Options from which a QUICConfig is built; durations are in seconds."""

    handshake_idle_timeout: float = 0.0
    max_idle_timeout: float = 0.0
    keep_alive_period: float = 0.0
    max_incoming_streams: int = 0
    max_incoming_uni_streams: int = 0
    initial_stream_receive_window: int = 0
    max_stream_receive_window: int = 0
    initial_connection_receive_window: int = 0
    max_connection_receive_window: int = 0
    initial_packet_size: int = 0
    disable_path_mtu_discovery: bool = False
    enable_0rtt: bool = False
    enable_datagrams: bool = False


@dataclass
class QUICConfig:
    """QUIC transport settings; durations are in seconds, zero means the transport default."""

    handshake_idle_timeout: float = 0.0
    max_idle_timeout: float = 0.0
    keep_alive_period: float = 0.0
    max_incoming_streams: int = 0
    max_incoming_uni_streams: int = 0
    initial_stream_receive_window: int = 0
    max_stream_receive_window: int = 0
    initial_connection_receive_window: int = 0
    max_connection_receive_window: int = 0
    initial_packet_size: int = 0
    disable_path_mtu_discovery: bool = False
    allow_0rtt: bool = False
    enable_datagrams: bool = False


@dataclass
class TLSConfig:
    """TLS settings; each entry of ``certificates`` is a chain of DER-encoded certificates."""

    certificates: list[tuple[bytes, ...]] = field(default_factory=list)
    next_protos: list[str] = field(default_factory=list)
    client_auth: ClientAuth = ClientAuth.NO_CLIENT_CERT
    verify_peer_certificate: Optional[VerifyCallback] = None
    insecure_skip_verify: bool = False
    min_version: int = 0


def default_quic_config_options() -> QUICConfigOptions:
    """Return the default QUIC configuration options."""
    return QUICConfigOptions(
        handshake_idle_timeout=10.0,
        max_idle_timeout=DEFAULT_MAX_IDLE_TIMEOUT,
        keep_alive_period=DEFAULT_KEEP_ALIVE_PERIOD,
        max_incoming_streams=DEFAULT_MAX_INCOMING_STREAMS,
        max_incoming_uni_streams=DEFAULT_MAX_INCOMING_UNI_STREAMS,
        initial_packet_size=1280,
        disable_path_mtu_discovery=False,
        enable_0rtt=False,
        enable_datagrams=True,
    )


def new_quic_config(opts: QUICConfigOptions | None = None) -> QUICConfig:
    """Build a QUICConfig from ``opts``, or from the defaults when ``opts`` is None."""
    if opts is None:
        opts = default_quic_config_options()
    return QUICConfig(
        handshake_idle_timeout=opts.handshake_idle_timeout,
        max_idle_timeout=opts.max_idle_timeout,
        keep_alive_period=opts.keep_alive_period,
        max_incoming_streams=opts.max_incoming_streams,
        max_incoming_uni_streams=opts.max_incoming_uni_streams,
        initial_stream_receive_window=opts.initial_stream_receive_window,
        max_stream_receive_window=opts.max_stream_receive_window,
        initial_connection_receive_window=opts.initial_connection_receive_window,
        max_connection_receive_window=opts.max_connection_receive_window,
        initial_packet_size=opts.initial_packet_size,
        disable_path_mtu_discovery=opts.disable_path_mtu_discovery,
        allow_0rtt=opts.enable_0rtt,
        enable_datagrams=opts.enable_datagrams,
    )


def _checked_chain(
    certificate: Sequence[bytes] | None, verify_callback: VerifyCallback | None
) -> tuple[bytes, ...]:
    if not certificate:
        raise NoCertificateError()
    if verify_callback is None:
        raise NoVerifyCallbackError()
    return tuple(certificate)


def new_client_tls_config(
    certificate: Sequence[bytes] | None, verify_callback: VerifyCallback | None
) -> TLSConfig:
    """TLS settings for a client presenting ``certificate`` and checking the server itself."""
    chain = _checked_chain(certificate, verify_callback)
    return TLSConfig(
        certificates=[chain],
        next_protos=[NEXT_PROTO_UPROXY],
        client_auth=ClientAuth.NO_CLIENT_CERT,
        verify_peer_certificate=verify_callback,
        # Chain verification is replaced by the custom callback.
        insecure_skip_verify=True,
        min_version=TLS_VERSION_1_3,
    )


def new_server_tls_config(
    certificate: Sequence[bytes] | None, verify_callback: VerifyCallback | None
) -> TLSConfig:
    """TLS settings for a server presenting ``certificate`` and requiring client certificates."""
    chain = _checked_chain(certificate, verify_callback)
    return TLSConfig(
        certificates=[chain],
        next_protos=[NEXT_PROTO_UPROXY],
        client_auth=ClientAuth.REQUIRE_ANY_CLIENT_CERT,
        verify_peer_certificate=verify_callback,
        min_version=TLS_VERSION_1_3,
    )


def validate_quic_config(config: QUICConfig | None) -> None:
    """Raise ConfigError if ``config`` is missing or holds unusable values."""
    if config is None:
        raise ConfigError("QUIC config is None")
    if config.max_idle_timeout < 0:
        raise ConfigError(
            f"max_idle_timeout must be non-negative, got {config.max_idle_timeout}"
        )
    if 0 < config.max_idle_timeout < _MIN_IDLE_TIMEOUT:
        raise ConfigError(
            f"max_idle_timeout is too short (<{_MIN_IDLE_TIMEOUT:g}s), "
            "may cause frequent disconnections"
        )
    if config.keep_alive_period < 0:
        raise ConfigError(
            f"keep_alive_period must be non-negative, got {config.keep_alive_period}"
        )
    if 0 < config.keep_alive_period < _MIN_KEEP_ALIVE_PERIOD:
        raise ConfigError(
            f"keep_alive_period is too short (<{_MIN_KEEP_ALIVE_PERIOD:g}s), "
            "may cause excessive traffic"
        )
    if config.max_incoming_streams < 0:
        raise ConfigError(
            f"max_incoming_streams must be non-negative, got {config.max_incoming_streams}"
        )
    if config.max_incoming_uni_streams < 0:
        raise ConfigError(
            "max_incoming_uni_streams must be non-negative, "
            f"got {config.max_incoming_uni_streams}"
        )


def validate_tls_config(config: TLSConfig | None, is_server: bool) -> None:
    """Raise ConfigError if ``config`` is unfit for a mutually authenticated connection."""
    if config is None:
        raise ConfigError("TLS config is None")
    if not config.certificates:
        raise ConfigError("no certificates configured")
    if not config.next_protos:
        raise ConfigError("no ALPN protocols configured")
    if config.verify_peer_certificate is None:
        raise ConfigError("no peer certificate verification callback configured")
    if is_server:
        if config.client_auth != ClientAuth.REQUIRE_ANY_CLIENT_CERT:
            raise ConfigError(
                "server must require client certificates for mTLS, "
                f"got client_auth={config.client_auth.name}"
            )
    elif not config.insecure_skip_verify:
        raise ConfigError(
            "client must set insecure_skip_verify=True when using custom verification"
        )
    if config.min_version < TLS_VERSION_1_3:
        raise ConfigError(
            f"minimum TLS version must be 1.3, got 0x{config.min_version:04x}"
        )