# uproxy

Building blocks for a QUIC+mTLS proxy: length-prefixed framing, stream type
markers, `ip route` parsing, server address resolution, diagnosis of lost
connectivity, and QUIC/TLS configuration objects with their validators.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module                | Purpose                                                           |
|-----------------------|-------------------------------------------------------------------|
| `uproxy.bufferpool`   | `BufferPool`, a thread-safe pool of fixed-size `bytearray` buffers |
| `uproxy.logtags`      | `log`, `log_info`, `log_warn`, `log_error`, `log_debug`, tagging records with a `layer` |
| `uproxy.framing`      | `write_framed` / `read_framed`: 2-byte big-endian length-prefixed frames |
| `uproxy.routing`      | `RouteInfo`, `parse_ip_route_output`, `get_default_route`, `get_default_ipv6_route`, `get_route_to_host` |
| `uproxy.resolver`     | `extract_host`, `resolve_to_ipv4_and_ipv6`                        |
| `uproxy.diagnostics`  | `Diagnostics`, `SystemNetworkOps`, `DiagnosticResult`, `FailureType` |
| `uproxy.streams`      | `StreamType`, `write_stream_type`, `read_stream_type`, `stream_type_string`, `StreamWrapper` |
| `uproxy.connection`   | `ConnectionState`, `ConnectionInfo`, `tls_version_string`, `tls_cipher_suite_string`, `format_stream_info` |
| `uproxy.quic_config`  | `QUICConfigOptions`, `QUICConfig`, `TLSConfig`, their constructors and validators |

## Examples

### Buffer pool

```python
from uproxy.bufferpool import BufferPool

pool = BufferPool(2048)
buf = pool.get()          # a bytearray of 2048 bytes
pool.put(buf)             # returned for reuse; None or wrongly sized buffers are dropped
```

### Tagged logging

```python
import logging
from uproxy.logtags import log_info

logging.basicConfig(level=logging.DEBUG)
log_info("network", "connection established", host="example.com", port=8080)
# connection established layer=network host=example.com port=8080
```

Records go to the `uproxy` logger.

### Framing

```python
import io
from uproxy.framing import write_framed, read_framed

buf = io.BytesIO()
write_framed(buf, b"hello")
buf.seek(0)
assert read_framed(buf) == b"hello"
```

Frames are limited to `MAX_FRAME_SIZE` (16384) bytes. Writing a larger payload,
or reading a zero-length or oversized frame, raises `FrameError`. A stream that
ends before a whole frame has been read raises `EOFError`; a writer that accepts
fewer bytes than given raises `OSError`.

### Routes

```python
from uproxy.routing import parse_ip_route_output

info = parse_ip_route_output("default via 192.168.1.1 dev eth0 src 192.168.1.100")
print(info.gateway, info.interface, info.src_ip)
```

The first value after each of `via`, `dev` and `src` is taken. The interface is
required; without one `RouteError` is raised.

`get_default_route()` and `get_route_to_host(host, timeout)` run the `ip`
command and raise `RouteError` if it fails or its output cannot be parsed.
`get_default_ipv6_route()` returns an empty `RouteInfo` in either case.

### Address resolution

```python
from uproxy.resolver import extract_host, resolve_to_ipv4_and_ipv6

extract_host("[::1]:8080")                    # "::1"
ipv4, ipv6 = resolve_to_ipv4_and_ipv6("8.8.8.8:53")   # ("8.8.8.8", "")
```

IP literals are returned as they are; host names are looked up and the first
IPv4 and first IPv6 address are returned, either of which may be empty.
`ResolveError` is raised when nothing can be resolved.

### Diagnosing a lost connection

```python
import logging
from uproxy.diagnostics import Diagnostics, SystemNetworkOps

diag = Diagnostics("example.com:443", logging.getLogger("uproxy"), SystemNetworkOps())
result = diag.diagnose_failure()
print(result.failure_type, result.message)
```

The result's `failure_type` is one of `no_network`, `route_changed`,
`interface_down`, `gateway_unreachable` or `unknown`. The first call records
the current route; later calls report a change of gateway or source address.
`SystemNetworkOps` uses the `ip` and `ping` commands and `psutil` for interface
state. Any object with `get_route_to_host`, `is_interface_up` and
`ping_gateway` methods may be passed as `ops` instead.

### Stream type markers

```python
import io
from uproxy.streams import StreamType, write_stream_type, read_stream_type

buf = io.BytesIO()
write_stream_type(buf, StreamType.TCP)
buf.seek(0)
assert read_stream_type(buf) is StreamType.TCP
```

Unknown marker bytes raise `InvalidStreamTypeError`; an empty stream raises
`EOFError`. `stream_type_string(0xFF)` gives `"Unknown(0xff)"`.

### QUIC and TLS configuration

```python
from uproxy.quic_config import new_quic_config, validate_quic_config

config = new_quic_config(None)   # defaults: 3600 s idle timeout, 30 s keep-alive
validate_quic_config(config)     # raises ConfigError when invalid
```

`new_client_tls_config` and `new_server_tls_config` take a certificate chain
(a sequence of DER `bytes`) and a verification callback, and raise
`NoCertificateError` or `NoVerifyCallbackError` when either is missing.
`validate_tls_config(config, is_server)` raises `ConfigError` unless the
settings meet the mutual-TLS requirements (certificates, the `uproxy` ALPN
protocol, a callback, TLS 1.3, client certificates required on the server).

## What this package does not do

It has no command-line program and runs no client or server. It does not open
QUIC connections, serve SOCKS5, or create TUN devices: the configuration
objects in `uproxy.quic_config` describe settings but are not handed to any
QUIC implementation, and `StreamWrapper` wraps any binary stream you supply.