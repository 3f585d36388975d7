"""Host descriptor resolution, run once before the listener starts."""

import logging
from typing import Optional

from inspect_proxy.models import HostDescriptor
from inspect_proxy.network.interfaces import (
    InterfaceSource,
    PsutilInterfaceSource,
    resolve_interface_address,
)
from inspect_proxy.network.route_table import (
    DEFAULT_ROUTE_TABLE_PATH,
    find_default_route,
    read_route_table,
)

logger = logging.getLogger(__name__)


def resolve_host_descriptor(
    route_table_path: str = DEFAULT_ROUTE_TABLE_PATH,
    interfaces: Optional[InterfaceSource] = None,
) -> HostDescriptor:
    """
    Work out the host's public IPv4 from its default route.

    Reads the route table, picks the default route and looks up the first
    address of the interface it goes through. The first failure propagates
    unchanged.

    Args:
        route_table_path: Location of the kernel route table
        interfaces: Live interfaces; psutil is queried when omitted

    Returns:
        The host descriptor

    Raises:
        StartupError: If any step fails
    """
    if interfaces is None:
        interfaces = PsutilInterfaceSource()

    lines = read_route_table(route_table_path)
    route = find_default_route(lines, source=route_table_path)
    logger.info(
        "Default route via %s (gateway %s, metric %d)",
        route.interface_name,
        route.gateway_address,
        route.metric,
    )

    public_ip = resolve_interface_address(route.interface_name, interfaces)
    host = HostDescriptor(public_ip=public_ip)
    logger.info("HostConfig is: %s", host.to_payload())
    return host
