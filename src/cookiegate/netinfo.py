"""Discover the IPv4 address this instance serves from."""

from __future__ import annotations

import ipaddress
import socket

__all__ = ["NetworkUnavailableError", "discover_ipv4"]

# Any routable address works; connecting a UDP socket sends no packets.
_PROBE_ADDRESS = ("192.0.2.1", 80)


class NetworkUnavailableError(OSError):
    """Raised when the host has no usable IPv4 address."""

    def __init__(self) -> None:
        super().__init__("are you connected to the network?")


def _usable(address: str) -> bool:
    try:
        ip = ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return not (ip.is_loopback or ip.is_unspecified)


def _route_address() -> str | None:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        try:
            sock.connect(_PROBE_ADDRESS)
        except OSError:
            return None
        return sock.getsockname()[0]


def _hostname_addresses() -> list[str]:
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        return []
    return [str(info[4][0]) for info in infos]


def discover_ipv4() -> str:
    """Return the first non-loopback IPv4 address of this host.

    The address of the default route is preferred; addresses the host name
    resolves to are used as a fallback.

    Raises
    ------
    NetworkUnavailableError
        If no usable address is found.
    """
    candidates = [_route_address(), *_hostname_addresses()]
    for address in candidates:
        if address is not None and _usable(address):
            return address
    raise NetworkUnavailableError()
