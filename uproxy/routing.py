"""Parsing of ``ip route`` output and lookup of system routes."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass


@dataclass
class RouteInfo:
    """Gateway, interface and source address of a route."""

    gateway: str = ""
    interface: str = ""
    src_ip: str = ""


class RouteError(Exception):
    """A route could not be looked up or parsed."""


_ROUTE_KEYWORDS = frozenset(
    {"via", "dev", "src", "proto", "metric", "scope", "link", "default"}
)

_FIELD_FOR_KEYWORD = {"via": "gateway", "dev": "interface", "src": "src_ip"}


def parse_ip_route_output(output: str) -> RouteInfo:
    """Parse one line of ``ip route`` output, e.g. ``default via 10.0.0.1 dev wlan0``.

    The first value after each of ``via``, ``dev`` and ``src`` is used. The
    interface is required; gateway and source address are optional.
    """
    fields = output.split()
    info = RouteInfo()
    for keyword, value in zip(fields, fields[1:]):
        attr = _FIELD_FOR_KEYWORD.get(keyword)
        if attr and not getattr(info, attr) and value not in _ROUTE_KEYWORDS:
            setattr(info, attr, value)

    if not info.interface:
        raise RouteError(f"could not parse route information from: {output}")
    return info


def _run_combined(args: list[str]) -> str:
    result = subprocess.run(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        check=True,
    )
    return result.stdout


def get_default_route() -> RouteInfo:
    """Return the default IPv4 route."""
    try:
        output = _run_combined(["ip", "route", "show", "default"])
    except (OSError, subprocess.SubprocessError) as exc:
        raise RouteError(f"failed to get default route: {exc}") from exc
    return parse_ip_route_output(output)


def get_default_ipv6_route() -> RouteInfo:
    """Return the default IPv6 route, or an empty RouteInfo if there is none."""
    try:
        output = _run_combined(["ip", "-6", "route", "show", "default"])
        return parse_ip_route_output(output)
    except (OSError, subprocess.SubprocessError, RouteError):
        return RouteInfo()


def get_route_to_host(host: str, timeout: float | None = None) -> RouteInfo:
    """Return the route the system would use to reach ``host``."""
    try:
        result = subprocess.run(
            ["ip", "route", "get", host],
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        raise RouteError(f"failed to get route to {host}: {exc}") from exc
    return parse_ip_route_output(result.stdout)