import json
import logging

from fastapi import Depends, status
from fastapi.responses import PlainTextResponse, Response

from inspect_proxy.context import AppContext, get_context
from inspect_proxy.errors import (
    ContainerNotFoundError,
    SerializationError,
    UpstreamError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)


def upstream_status(error: UpstreamError) -> int:
    """Map an inspect failure to the HTTP status returned to the caller"""
    if isinstance(error, ContainerNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, UpstreamTimeoutError):
        return status.HTTP_504_GATEWAY_TIMEOUT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(message: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(f"err:{message}", status_code=status_code)


def serialize_descriptor(descriptor) -> bytes:
    try:
        return json.dumps(descriptor, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(str(e)) from e


async def inspect_container(
    container_id: str, context: AppContext = Depends(get_context)
):
    """Inspect a container and return the engine's descriptor as JSON"""
    try:
        descriptor = await context.inspector.inspect_container(container_id)
    except UpstreamError as e:
        logger.error("Error while inspecting container %s: %s", container_id, e)
        message = str(e) if context.expose_upstream_errors else e.public_message
        return error_response(message, upstream_status(e))

    try:
        body = serialize_descriptor(descriptor)
    except SerializationError as e:
        logger.error("Error while serializing container %s: %s", container_id, e)
        message = str(e) if context.expose_upstream_errors else "serialization failed"
        return error_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(content=body, media_type="application/json")
