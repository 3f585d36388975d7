"""
Exception hierarchy for the inspect proxy.

Startup errors abort the process before the listener binds. Upstream and
serialization errors are contained to the request that raised them.
"""


class ProxyError(Exception):
    """Base class for all inspect proxy errors."""


class StartupError(ProxyError):
    """Raised when the host descriptor cannot be resolved at startup."""


class NotFoundError(ProxyError):
    """Raised when a looked-up entity does not exist."""


class RouteTableError(StartupError):
    """Raised when the route table cannot be read or parsed."""


class DefaultRouteNotFoundError(StartupError, NotFoundError):
    """Raised when the route table has no zero-destination entry."""

    def __init__(self, source: str = ""):
        self.source = source
        message = "default route not found"
        if source:
            message += f" in {source}"
        super().__init__(message)


class InterfaceError(StartupError):
    """Raised when live network interfaces cannot be enumerated."""


class InterfaceNotFoundError(StartupError, NotFoundError):
    """Raised when the default route names an interface that is not live."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"default interface not found: {name}")


class InterfaceAddressNotFoundError(StartupError, NotFoundError):
    """Raised when the default interface has no bound address."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"interface {name} has no bound address")


class UpstreamError(ProxyError):
    """
    Raised when the container engine fails to answer an inspect call.

    Attributes:
        container_id: The ID that was being inspected
        public_message: Generic text safe to return to callers
    """

    public_message = "container lookup failed"

    def __init__(self, container_id: str, message: str):
        self.container_id = container_id
        super().__init__(message)


class ContainerNotFoundError(UpstreamError, NotFoundError):
    """Raised when the daemon does not know the container."""

    public_message = "no such container"


class UpstreamTimeoutError(UpstreamError):
    """Raised when the daemon does not answer in time."""

    public_message = "container lookup timed out"


class SerializationError(ProxyError):
    """Raised when a descriptor cannot be encoded as JSON."""
