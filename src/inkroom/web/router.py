"""Router configuration for the inkroom API."""

from __future__ import annotations

from litestar import Router

from inkroom.web.controllers import DrawingController, RoomController, StatsController


def create_router(path: str = "/api") -> Router:
    """Create the inkroom API router.

    Args:
        path: The base path for all API routes. Defaults to "/api".

    Returns:
        A configured Litestar Router instance.
    """
    return Router(
        path=path,
        route_handlers=[DrawingController, StatsController, RoomController],
    )
