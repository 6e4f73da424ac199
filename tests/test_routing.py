import subprocess
from unittest import mock

import pytest

from uproxy.routing import (
    RouteError,
    RouteInfo,
    get_default_ipv6_route,
    get_default_route,
    get_route_to_host,
    parse_ip_route_output,
)


def _completed(output):
    return subprocess.CompletedProcess(args=["ip"], returncode=0, stdout=output)


@pytest.mark.parametrize(
    "output, gateway, iface, src",
    [
        ("default via 192.168.1.1 dev eth0 src 192.168.1.100", "192.168.1.1", "eth0", "192.168.1.100"),
        ("default via 10.0.0.1 dev wlan0", "10.0.0.1", "wlan0", ""),
        (
            "default via 172.16.0.1 dev enp0s3 proto dhcp metric 100 src 172.16.0.50",
            "172.16.0.1",
            "enp0s3",
            "172.16.0.50",
        ),
        ("192.168.1.0/24 dev eth0 proto kernel scope link src 192.168.1.100", "", "eth0", "192.168.1.100"),
        ("default dev eth0", "", "eth0", ""),
    ],
)
def test_parse_ip_route_output(output, gateway, iface, src):
    assert parse_ip_route_output(output) == RouteInfo(gateway=gateway, interface=iface, src_ip=src)


@pytest.mark.parametrize(
    "output",
    ["", "default via 192.168.1.1", "default via 192.168.1.1 dev"],
    ids=["empty", "missing-interface", "dev-without-value"],
)
def test_parse_ip_route_output_errors(output):
    with pytest.raises(RouteError):
        parse_ip_route_output(output)


def test_via_at_end():
    info = parse_ip_route_output("default dev eth0 via")
    assert info.gateway == ""
    assert info.interface == "eth0"


def test_dev_at_end():
    with pytest.raises(RouteError):
        parse_ip_route_output("default via 10.0.0.1 dev")


def test_src_at_end():
    info = parse_ip_route_output("default via 10.0.0.1 dev eth0 src")
    assert info.src_ip == ""
    assert info.gateway == "10.0.0.1"


def test_multiple_via_uses_first():
    assert parse_ip_route_output("default via 10.0.0.1 dev eth0 via 10.0.0.2").gateway == "10.0.0.1"


def test_multiple_dev_uses_first():
    assert parse_ip_route_output("default via 10.0.0.1 dev eth0 dev wlan0").interface == "eth0"


def test_whitespace_variations():
    info = parse_ip_route_output("  default   via   10.0.0.1   dev   eth0  ")
    assert info.gateway == "10.0.0.1"
    assert info.interface == "eth0"


@pytest.mark.parametrize(
    "output, gateway",
    [("default via dev eth0", ""), ("default via proto dev eth0", "")],
)
def test_keyword_values_are_filtered(output, gateway):
    info = parse_ip_route_output(output)
    assert info.gateway == gateway
    assert info.interface == "eth0"


@pytest.mark.parametrize("output", ["default via 10.0.0.1 dev via", "default via 10.0.0.1"])
def test_keyword_validation_errors(output):
    with pytest.raises(RouteError):
        parse_ip_route_output(output)


def test_get_default_route_success():
    with mock.patch("uproxy.routing.subprocess.run", return_value=_completed("default via 10.0.0.1 dev wlan0 src 10.0.0.118 metric 600")) as run:
        info = get_default_route()
    assert info == RouteInfo(gateway="10.0.0.1", interface="wlan0", src_ip="10.0.0.118")
    assert run.call_args.args[0] == ["ip", "route", "show", "default"]


def test_get_default_route_command_failure():
    with mock.patch("uproxy.routing.subprocess.run", side_effect=subprocess.CalledProcessError(1, "ip")):
        with pytest.raises(RouteError):
            get_default_route()


def test_get_default_route_missing_binary():
    with mock.patch("uproxy.routing.subprocess.run", side_effect=FileNotFoundError("ip")):
        with pytest.raises(RouteError):
            get_default_route()


def test_get_default_route_parse_failure():
    with mock.patch("uproxy.routing.subprocess.run", return_value=_completed("invalid output without interface")):
        with pytest.raises(RouteError):
            get_default_route()


def test_get_default_route_missing_gateway():
    with mock.patch("uproxy.routing.subprocess.run", return_value=_completed("default dev eth0")):
        info = get_default_route()
    assert info.interface == "eth0"
    assert info.gateway == ""


def test_get_default_ipv6_route_parse_failure():
    with mock.patch("uproxy.routing.subprocess.run", return_value=_completed("invalid ipv6 output")):
        assert get_default_ipv6_route() == RouteInfo()


def test_get_default_ipv6_route_command_failure():
    with mock.patch("uproxy.routing.subprocess.run", side_effect=subprocess.CalledProcessError(1, "ip")):
        assert get_default_ipv6_route() == RouteInfo()


def test_get_default_ipv6_route_success():
    with mock.patch("uproxy.routing.subprocess.run", return_value=_completed("default via fe80::1 dev eth0 proto ra metric 100")) as run:
        info = get_default_ipv6_route()
    assert info == RouteInfo(gateway="fe80::1", interface="eth0")
    assert run.call_args.args[0] == ["ip", "-6", "route", "show", "default"]


def test_get_route_to_host_success():
    output = "8.8.8.8 via 192.168.1.1 dev eth0 src 192.168.1.100 uid 1000\n    cache\n"
    with mock.patch("uproxy.routing.subprocess.run", return_value=_completed(output)) as run:
        info = get_route_to_host("8.8.8.8", timeout=2.0)
    assert info == RouteInfo(gateway="192.168.1.1", interface="eth0", src_ip="192.168.1.100")
    assert run.call_args.args[0] == ["ip", "route", "get", "8.8.8.8"]
    assert run.call_args.kwargs["timeout"] == 2.0


def test_get_route_to_host_invalid_host():
    with mock.patch("uproxy.routing.subprocess.run", side_effect=subprocess.CalledProcessError(1, "ip")):
        with pytest.raises(RouteError, match="invalid-host"):
            get_route_to_host("invalid-host-that-does-not-exist-12345")


def test_get_route_to_host_timeout():
    with mock.patch("uproxy.routing.subprocess.run", side_effect=subprocess.TimeoutExpired("ip", 0.01)):
        with pytest.raises(RouteError):
            get_route_to_host("8.8.8.8", timeout=0.01)