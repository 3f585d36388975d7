"""Application context shared by all request handlers."""

from dataclasses import dataclass

from fastapi import Request

from inspect_proxy.drivers.base import ContainerInspector
from inspect_proxy.models import HostDescriptor


@dataclass(frozen=True)
class AppContext:
    """
    Dependencies built once at startup.

    Attributes:
        inspector: Client used for container lookups
        host: Host descriptor resolved before the listener started
        expose_upstream_errors: Whether daemon messages reach callers
    """

    inspector: ContainerInspector
    host: HostDescriptor
    expose_upstream_errors: bool = True


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the application context."""
    return request.app.state.context
