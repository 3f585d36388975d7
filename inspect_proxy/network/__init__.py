"""Host network topology detection."""

from inspect_proxy.network.host import resolve_host_descriptor
from inspect_proxy.network.interfaces import (
    InterfaceSource,
    PsutilInterfaceSource,
    list_interfaces,
    resolve_interface_address,
)
from inspect_proxy.network.route_table import (
    RouteRecord,
    find_default_route,
    read_route_table,
)

__all__ = [
    "resolve_host_descriptor",
    "InterfaceSource",
    "PsutilInterfaceSource",
    "list_interfaces",
    "resolve_interface_address",
    "RouteRecord",
    "find_default_route",
    "read_route_table",
]
