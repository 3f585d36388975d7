"""
Live network interface lookup.

An interface source is any mapping from interface name to its bound
addresses, written as ``address`` or ``address/prefixlen``. The default
source reads the host's interfaces through psutil.
"""

import ipaddress
import logging
import socket
from typing import Dict, List, Mapping, Sequence

import psutil

from inspect_proxy.errors import (
    InterfaceAddressNotFoundError,
    InterfaceError,
    InterfaceNotFoundError,
)

logger = logging.getLogger(__name__)

InterfaceSource = Mapping[str, Sequence[str]]


def _prefix_length(netmask: str) -> int:
    return ipaddress.IPv4Network(f"0.0.0.0/{netmask}").prefixlen


def list_interfaces() -> Dict[str, List[str]]:
    """
    Enumerate live interfaces with their IPv4 addresses.

    Addresses keep the order psutil reports them in and carry a prefix
    length when the netmask is known.

    Raises:
        InterfaceError: If the OS refuses to list interfaces
    """
    try:
        raw = psutil.net_if_addrs()
    except OSError as e:
        raise InterfaceError(f"Failed to enumerate network interfaces: {e}") from e

    interfaces: Dict[str, List[str]] = {}
    for name, addrs in raw.items():
        bound = []
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if addr.netmask:
                bound.append(f"{addr.address}/{_prefix_length(addr.netmask)}")
            else:
                bound.append(addr.address)
        interfaces[name] = bound
    return interfaces


class PsutilInterfaceSource(Mapping[str, Sequence[str]]):
    """Interface source backed by a single psutil snapshot, taken lazily."""

    def __init__(self) -> None:
        self._snapshot: Dict[str, List[str]] | None = None

    def _interfaces(self) -> Dict[str, List[str]]:
        if self._snapshot is None:
            self._snapshot = list_interfaces()
        return self._snapshot

    def __getitem__(self, name: str) -> Sequence[str]:
        return self._interfaces()[name]

    def __iter__(self):
        return iter(self._interfaces())

    def __len__(self) -> int:
        return len(self._interfaces())


def strip_prefix_length(address: str) -> str:
    """
    Drop a ``/prefixlen`` suffix from an address.

    Examples:
        >>> strip_prefix_length("10.0.0.5/24")
        '10.0.0.5'
        >>> strip_prefix_length("10.0.0.5")
        '10.0.0.5'
    """
    return address.split("/", 1)[0]


def resolve_interface_address(name: str, source: InterfaceSource) -> str:
    """
    Return the first address bound to the named interface.

    The name must match exactly (case-sensitive).

    Args:
        name: Interface name taken from the default route
        source: Live interfaces to search

    Returns:
        The first bound address without its prefix length

    Raises:
        InterfaceNotFoundError: If no interface has that name
        InterfaceAddressNotFoundError: If the interface has no address
    """
    if name not in source:
        raise InterfaceNotFoundError(name)

    addresses = source[name]
    if not addresses:
        raise InterfaceAddressNotFoundError(name)

    address = strip_prefix_length(addresses[0])
    logger.debug("Interface %s addresses: %s", name, list(addresses))
    return address
