"""
Container engine clients for the inspect proxy.

The proxy only needs to inspect containers, so drivers expose a single
inspect operation behind the ContainerInspector interface.
"""

from inspect_proxy.drivers.base import ContainerInspector
from inspect_proxy.drivers.docker import DockerInspector, build_ssl_context

__all__ = [
    "ContainerInspector",
    "DockerInspector",
    "build_ssl_context",
]
