from fastapi import FastAPI
from contextlib import asynccontextmanager
import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from inspect_proxy import __version__
from inspect_proxy.config import Settings, load_settings
from inspect_proxy.context import AppContext
from inspect_proxy.drivers import DockerInspector
from inspect_proxy.errors import StartupError
from inspect_proxy.network import resolve_host_descriptor
from inspect_proxy.routing import build_router

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    context: AppContext = app.state.context

    # Startup
    logger.info("Starting inspect proxy...")
    # The daemon may come up later; inspect requests retry the connection
    try:
        await context.inspector.initialize()
        logger.info("Container inspector initialized")
    except Exception as e:
        logger.warning(f"Container engine unreachable at startup: {e}")

    yield

    # Shutdown
    logger.info("Shutting down inspect proxy...")
    try:
        await context.inspector.close()
        logger.info("Container inspector closed")
    except Exception as e:
        logger.error(f"Error closing container inspector: {e}")


def create_app(context: AppContext) -> FastAPI:
    """
    Create FastAPI application around an already built context.

    The host descriptor inside the context must be resolved before this is
    called, so the listener never serves without it.
    """
    app = FastAPI(
        title="Docker Inspect Proxy",
        description="Read-only gateway to container metadata and host address",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.context = context
    app.include_router(build_router())
    return app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Docker Inspect Proxy")
    parser.add_argument("-p", "--port", type=int, default=None, help="bind port")
    parser.add_argument(
        "--tlsVerify",
        dest="tls_verify",
        action="store_true",
        default=None,
        help="docker tls verify",
    )
    parser.add_argument(
        "-H", "--docker-host", dest="docker_host", default=None, help="docker host"
    )
    parser.add_argument("--cert", default=None, help="docker tls cert")
    parser.add_argument("--key", default=None, help="docker tls key")
    parser.add_argument("--cacert", default=None, help="docker tls cacert")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return load_settings(
        bind_port=args.port,
        docker_tls_verify=args.tls_verify,
        docker_host=args.docker_host,
        docker_tls_cert=args.cert,
        docker_tls_key=args.key,
        docker_tls_cacert=args.cacert,
    )


def bootstrap(settings: Settings) -> AppContext:
    """
    Build the application context.

    Raises:
        StartupError: If the host descriptor cannot be resolved
    """
    try:
        inspector = DockerInspector.from_settings(settings)
    except OSError as e:
        raise StartupError(f"Failed to load docker TLS files: {e}") from e

    host = resolve_host_descriptor(route_table_path=settings.route_table_path)
    return AppContext(
        inspector=inspector,
        host=host,
        expose_upstream_errors=settings.expose_upstream_errors,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the inspect proxy."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        parser.print_usage(sys.stderr)
        return 1

    configure_logging(settings.log_level)

    try:
        context = bootstrap(settings)
    except StartupError as e:
        logger.error("Unexpected error: %s", e)
        return 1

    import uvicorn

    logger.info("Listening on port: %d", settings.bind_port)
    uvicorn.run(
        create_app(context),
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
