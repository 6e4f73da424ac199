"""Building blocks for a QUIC+mTLS proxy: framing, stream typing, routing, resolution, diagnostics and configuration."""

__version__ = "0.1.0"

__all__ = [
    "bufferpool",
    "connection",
    "diagnostics",
    "framing",
    "logtags",
    "quic_config",
    "resolver",
    "routing",
    "streams",
]