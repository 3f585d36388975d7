"""
Route table for the inspect proxy.

Each route pairs a full path pattern with its handler and with the shape
its path parameters must have. A request whose parameters do not fit the
shape is answered with 404, as if the path had not matched at all.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional, Pattern, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request, status

from inspect_proxy.routes import container, host

# Container IDs and short IDs are plain alphanumerics
CONTAINER_ID_PATTERN = re.compile(r"[a-zA-Z0-9]+")

# Only GET (and the implied HEAD) is served; anything else is unknown
UNSERVED_METHODS = ["POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@dataclass(frozen=True)
class Route:
    """A GET route with constraints on its path parameters."""

    path: str
    endpoint: Callable
    name: str
    constraints: Dict[str, Pattern[str]] = field(default_factory=dict)

    def accepts(self, path_params: Dict[str, str]) -> bool:
        for param, pattern in self.constraints.items():
            value = path_params.get(param)
            if value is None or not pattern.fullmatch(value):
                return False
        return True


ROUTES: Tuple[Route, ...] = (
    Route(path="/host", endpoint=host.get_host, name="host"),
    Route(
        path="/container/{container_id}",
        endpoint=container.inspect_container,
        name="inspect_container",
        constraints={"container_id": CONTAINER_ID_PATTERN},
    ),
)


def _constraint_guard(route: Route) -> Callable:
    async def guard(request: Request) -> None:
        if not route.accepts(request.path_params):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    return guard


async def _not_found() -> None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


def build_router(routes: Optional[Iterable[Route]] = None) -> APIRouter:
    """Register every route of the table on a fresh APIRouter"""
    router = APIRouter(redirect_slashes=False)
    for route in ROUTES if routes is None else routes:
        dependencies = []
        if route.constraints:
            dependencies.append(Depends(_constraint_guard(route)))
        router.add_api_route(
            route.path,
            route.endpoint,
            methods=["GET"],
            name=route.name,
            dependencies=dependencies,
        )
        router.add_api_route(
            route.path,
            _not_found,
            methods=UNSERVED_METHODS,
            name=f"{route.name}_unserved",
            include_in_schema=False,
        )
    return router
