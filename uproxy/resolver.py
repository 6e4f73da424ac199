"""Host extraction and IPv4/IPv6 resolution of server addresses."""

from __future__ import annotations

import ipaddress
import socket


class ResolveError(Exception):
    """A server address could not be resolved to any IP address."""


def _split_host_port(addr: str) -> tuple[str, str]:
    """Split ``host:port`` or ``[host]:port`` into its parts; raise ValueError otherwise."""
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address: {addr}")
        rest = addr[end + 1 :]
        if not rest:
            raise ValueError(f"missing port in address: {addr}")
        if not rest.startswith(":"):
            raise ValueError(f"unexpected text after ']' in address: {addr}")
        host, port = addr[1:end], rest[1:]
        if "[" in host:
            raise ValueError(f"unexpected '[' in address: {addr}")
    else:
        colon = addr.rfind(":")
        if colon < 0:
            raise ValueError(f"missing port in address: {addr}")
        host, port = addr[:colon], addr[colon + 1 :]
        if ":" in host:
            raise ValueError(f"too many colons in address: {addr}")
        if "[" in host or "]" in host:
            raise ValueError(f"unexpected bracket in address: {addr}")
    if "[" in port or "]" in port:
        raise ValueError(f"unexpected bracket in port: {addr}")
    return host, port


def extract_host(addr: str) -> str:
    """Return the host part of ``addr``, which may or may not carry a port."""
    try:
        host, _ = _split_host_port(addr)
    except ValueError:
        return addr
    return host


def _parse_ip(text: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def _as_ipv4(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> ipaddress.IPv4Address | None:
    if isinstance(ip, ipaddress.IPv4Address):
        return ip
    return ip.ipv4_mapped


def resolve_to_ipv4_and_ipv6(server_addr: str) -> tuple[str, str]:
    """Resolve ``server_addr`` to its first IPv4 and first IPv6 address.

    Either element of the returned pair may be empty. An address that is
    already an IP literal is returned unchanged in the matching slot.
    """
    host = extract_host(server_addr)

    literal = _parse_ip(host)
    if literal is not None:
        if _as_ipv4(literal) is not None:
            return host, ""
        return "", host

    if not host:
        raise ResolveError("failed to resolve server address: empty host name")

    try:
        infos = socket.getaddrinfo(host, None)
    except (OSError, UnicodeError) as exc:
        raise ResolveError(f"failed to resolve server address: {exc}") from exc

    if not infos:
        raise ResolveError("no IPs found for server address")

    ipv4 = ipv6 = ""
    for info in infos:
        ip = _parse_ip(str(info[4][0]).split("%", 1)[0])
        if ip is None:
            continue
        as_v4 = _as_ipv4(ip)
        if as_v4 is not None:
            if not ipv4:
                ipv4 = str(as_v4)
        elif not ipv6:
            ipv6 = str(ip)
    return ipv4, ipv6