"""Health and route-summary endpoints for inkroom."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar

from litestar import Controller, get
from sqlalchemy import text

from inkroom.realtime.manager import ConnectionManager  # noqa: TC001

if TYPE_CHECKING:
    from litestar import Request

    from inkroom.storage.db import DatabaseManager

ROUTE_SUMMARY = [
    "GET /, GET /room/{id} (auth-gated), GET /health, GET /docs",
    "GET /auth/me, POST /auth/register, POST /auth/login, POST /auth/logout",
    "GET /api/drawings, POST /api/drawings*, GET /api/drawings/{id}, PUT /api/drawings/{id}*, "
    "DELETE /api/drawings/{id}*",
    "GET /api/stats, POST /api/drawings/{id}/png*",
    "GET /api/rooms (active rooms + peers), POST /api/rooms/{name}/save*",
    "WS /yjs/{room}, WS /yjs?room={room}",
]


class HealthStatus(str, Enum):
    """Overall and per-component probe outcome."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Probe outcome of one part of the server, such as the relay or the database."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None


@dataclass
class HealthResponse:
    """Body of ``GET /health``.

    ``ok`` is the field load balancers look at; the rest is diagnostic.
    """

    status: HealthStatus
    rooms: int = 0
    connections: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "ok": self.status is HealthStatus.HEALTHY,
            "status": self.status.value,
            "rooms": self.rooms,
            "connections": self.connections,
            "timestamp": self.timestamp,
            "components": [{**asdict(c), "status": c.status.value} for c in self.components],
        }


class HealthController(Controller):
    """Liveness probe and API overview."""

    path = ""
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, request: Request, connection_manager: ConnectionManager) -> dict[str, Any]:
        """Report relay load and, when a database is configured, whether it answers."""
        components = [ComponentHealth(name="relay", status=HealthStatus.HEALTHY)]
        db_manager = getattr(request.app.state, "db_manager", None)
        if db_manager is not None:
            components.append(await _probe_database(db_manager))

        healthy = all(c.status is HealthStatus.HEALTHY for c in components)
        return HealthResponse(
            status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            rooms=connection_manager.active_rooms,
            connections=connection_manager.total_connections,
            components=components,
        ).to_dict()

    @get("/docs")
    async def docs(self) -> dict[str, Any]:
        """Summarize the drawing format and the available endpoints."""
        return {
            "about": "Canvas JSON format & API endpoints",
            "format": {"title": "str", "size": {"w": "number", "h": "number"}, "background": "str", "strokes": "list"},
            "routes": ROUTE_SUMMARY,
            "note": "* requires auth",
        }


async def _probe_database(db_manager: DatabaseManager) -> ComponentHealth:
    started = time.perf_counter()
    try:
        async with db_manager.session() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:  # noqa: BLE001
        return ComponentHealth(name="database", status=HealthStatus.UNHEALTHY, message=str(exc))
    return ComponentHealth(
        name="database",
        status=HealthStatus.HEALTHY,
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )
