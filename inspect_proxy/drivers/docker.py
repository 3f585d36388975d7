"""
Docker container inspector.

Talks to the Docker daemon through aiodocker, over the local socket or a
TCP endpoint with optional TLS.
"""

import asyncio
import logging
import ssl
from typing import Any, Dict, Optional

import aiodocker
import aiohttp
from aiodocker.exceptions import DockerError

from inspect_proxy.config import Settings
from inspect_proxy.drivers.base import ContainerInspector
from inspect_proxy.errors import (
    ContainerNotFoundError,
    UpstreamError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


def build_ssl_context(
    cacert: Optional[str] = None,
    cert: Optional[str] = None,
    key: Optional[str] = None,
    verify: bool = True,
) -> ssl.SSLContext:
    """
    Build a client TLS context for the Docker daemon.

    Args:
        cacert: CA bundle used to verify the daemon
        cert: Client certificate
        key: Client private key, defaults to the certificate file
        verify: Whether to verify the daemon's certificate

    Returns:
        A configured SSLContext
    """
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=cacert)
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    if cert:
        context.load_cert_chain(certfile=cert, keyfile=key)
    return context


class DockerInspector(ContainerInspector):
    """
    Docker implementation of the ContainerInspector interface.

    A single aiodocker client is shared by all requests. It is opened on
    initialize() and closed on close().
    """

    def __init__(
        self,
        endpoint: str = "unix:///var/run/docker.sock",
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.endpoint = endpoint
        self.ssl_context = ssl_context
        self.client: Optional[aiodocker.Docker] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DockerInspector":
        ssl_context = None
        if settings.use_tls:
            logger.info(
                "Connecting to TLS secured docker through endpoint: %s",
                settings.docker_host,
            )
            ssl_context = build_ssl_context(
                cacert=settings.docker_tls_cacert,
                cert=settings.docker_tls_cert,
                key=settings.docker_tls_key,
                verify=settings.docker_tls_verify,
            )
        else:
            logger.info(
                "Connecting to insecure docker through endpoint: %s",
                settings.docker_host,
            )
        return cls(endpoint=settings.docker_host, ssl_context=ssl_context)

    async def initialize(self) -> None:
        """Initialize Docker client."""
        async with self._lock:
            if self.client:
                return

            client = aiodocker.Docker(url=self.endpoint, ssl_context=self.ssl_context)
            try:
                # Test connection
                await client.version()
            except (DockerError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error(
                    "Failed to initialize %s: %s", self.__class__.__name__, e
                )
                await client.close()
                raise

            self.client = client
            logger.info("%s initialized successfully", self.__class__.__name__)

    async def close(self) -> None:
        """Close Docker client."""
        if self.client:
            await self.client.close()
            self.client = None

    async def inspect_container(self, container_id: str) -> Dict[str, Any]:
        """Inspect a container through the Docker API."""
        try:
            if not self.client:
                await self.initialize()

            assert self.client is not None  # For type checker
            return await self.client.containers.container(container_id).show()
        except DockerError as e:
            if e.status == 404:
                raise ContainerNotFoundError(container_id, e.message) from e
            raise UpstreamError(container_id, e.message) from e
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(
                container_id, f"Timed out inspecting container {container_id}"
            ) from e
        except aiohttp.ClientError as e:
            raise UpstreamError(container_id, str(e)) from e
