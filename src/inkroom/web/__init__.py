"""Web layer for inkroom: REST controllers, pages and health checks."""

from __future__ import annotations

from inkroom.web.controllers import DrawingController, RoomController, StatsController
from inkroom.web.health import HealthController
from inkroom.web.router import create_router
from inkroom.web.ui import index_page, room_page

__all__ = [
    "DrawingController",
    "HealthController",
    "RoomController",
    "StatsController",
    "create_router",
    "index_page",
    "room_page",
]
