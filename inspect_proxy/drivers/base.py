"""
Abstract base class for container inspectors.

An inspector answers one question: given a container ID, return the
engine's descriptor for it or fail with an UpstreamError.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ContainerInspector(ABC):
    """
    Abstract base class for container engine clients.

    Implementations must be safe to call concurrently from many requests.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Open the connection to the container engine.

        Raises:
            Exception: If the engine cannot be reached
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the engine client and release its resources."""
        pass

    @abstractmethod
    async def inspect_container(self, container_id: str) -> Dict[str, Any]:
        """
        Inspect a container.

        Args:
            container_id: ID or name of the container, forwarded verbatim

        Returns:
            The engine's container descriptor, unmodified

        Raises:
            ContainerNotFoundError: If the engine does not know the container
            UpstreamTimeoutError: If the engine did not answer in time
            UpstreamError: For any other failure
        """
        pass
