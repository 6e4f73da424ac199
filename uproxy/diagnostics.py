"""Diagnosis of why connectivity to the server was lost."""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

import psutil

from uproxy.resolver import extract_host
from uproxy.routing import RouteError, RouteInfo, get_route_to_host

_PING_TIMEOUT = 1.0


class FailureType(str, enum.Enum):
    """Kind of network failure that was detected."""

    UNKNOWN = "unknown"
    ROUTE_CHANGED = "route_changed"
    INTERFACE_DOWN = "interface_down"
    GATEWAY_UNREACHABLE = "gateway_unreachable"
    NO_NETWORK = "no_network"

    def __str__(self) -> str:
        return self.value


@dataclass
class DiagnosticResult:
    """Outcome of a diagnosis."""

    failure_type: FailureType
    message: str
    gateway: str = ""
    interface: str = ""


class _NetworkOps(Protocol):
    def get_route_to_host(self, host: str) -> RouteInfo: ...

    def is_interface_up(self, name: str) -> bool: ...

    def ping_gateway(self, gateway: str) -> bool: ...


class SystemNetworkOps:
    """Network checks performed against the running system."""

    def get_route_to_host(self, host: str) -> RouteInfo:
        """Return the route the system uses to reach ``host``."""
        return get_route_to_host(host, timeout=None)

    def is_interface_up(self, name: str) -> bool:
        """True if interface ``name`` exists and is up."""
        try:
            stats = psutil.net_if_stats()
        except OSError:
            return False
        entry = stats.get(name)
        return bool(entry is not None and entry.isup)

    def ping_gateway(self, gateway: str) -> bool:
        """True if ``gateway`` answers a single ping within one second."""
        try:
            result = subprocess.run(
                ["ping", "-c", "1", "-W", "1", gateway],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=_PING_TIMEOUT,
                check=False,
            )
        except (OSError, subprocess.SubprocessError):
            return False
        return result.returncode == 0


class Diagnostics:
    """Works out the likely cause of lost connectivity to one server."""

    def __init__(
        self,
        server_addr: str,
        logger: logging.Logger | None = None,
        ops: _NetworkOps | None = None,
    ) -> None:
        self.server_addr = server_addr
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._ops: _NetworkOps = ops if ops is not None else SystemNetworkOps()
        self._last_gateway = ""
        self._last_src_ip = ""

    @property
    def last_route(self) -> tuple[str, str]:
        """The last seen ``(gateway, source ip)`` pair; empty strings before the first look."""
        return self._last_gateway, self._last_src_ip

    def diagnose_failure(self) -> DiagnosticResult:
        """Inspect the network and report the most likely cause of failure."""
        try:
            route = self._ops.get_route_to_host(extract_host(self.server_addr))
        except (RouteError, OSError) as exc:
            self.logger.warning("Failed to get default route: %s", exc)
            return DiagnosticResult(FailureType.NO_NETWORK, "no default route found")

        changed = self._check_route_change(route)
        if changed is not None:
            return changed

        if not self._ops.is_interface_up(route.interface):
            return DiagnosticResult(
                FailureType.INTERFACE_DOWN,
                f"interface {route.interface} is down",
                interface=route.interface,
            )

        if not self._ops.ping_gateway(route.gateway):
            return DiagnosticResult(
                FailureType.GATEWAY_UNREACHABLE,
                f"gateway {route.gateway} is unreachable",
                gateway=route.gateway,
            )

        return DiagnosticResult(
            FailureType.UNKNOWN, "connectivity lost but network appears normal"
        )

    def _check_route_change(self, route: RouteInfo) -> DiagnosticResult | None:
        if not self._last_gateway:
            self._last_gateway, self._last_src_ip = route.gateway, route.src_ip
            return None

        if self._last_gateway == route.gateway and self._last_src_ip == route.src_ip:
            return None

        message = (
            f"route changed: gateway {self._last_gateway}->{route.gateway}, "
            f"src {self._last_src_ip}->{route.src_ip}"
        )
        self._last_gateway, self._last_src_ip = route.gateway, route.src_ip
        return DiagnosticResult(
            FailureType.ROUTE_CHANGED,
            message,
            gateway=route.gateway,
            interface=route.interface,
        )