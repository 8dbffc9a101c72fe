"""Main Litestar application for inkroom.

This module provides the application factory and the configured app instance
for running inkroom as a standalone server.
"""

from __future__ import annotations

import mimetypes
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from litestar import Litestar
from litestar.openapi import OpenAPIConfig

from inkroom.core.error_handling import get_exception_handlers
from inkroom.core.logging import CorrelationIdMiddleware, RequestLoggingMiddleware, configure_logging
from inkroom.plugin import InkroomConfig, InkroomPlugin
from inkroom.web.health import HealthController

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable

    from inkroom.storage.base import StorageProtocol
    from inkroom.storage.db import DatabaseManager

logger = structlog.get_logger(__name__)

# Slim container images may ship an incomplete mimetypes table.
mimetypes.add_type("text/css", ".css")
mimetypes.add_type("application/javascript", ".js")
mimetypes.add_type("image/svg+xml", ".svg")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("true", "1", "yes")


def _database_lifespan(db_manager: DatabaseManager) -> Callable:
    """Build a lifespan that opens the database before serving and closes it after."""

    @asynccontextmanager
    async def lifespan(app: Litestar) -> AsyncGenerator[None, None]:
        await db_manager.init()
        app.state.db_manager = db_manager
        logger.info("Database initialized", url=db_manager.engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            await db_manager.close()

    return lifespan


def create_app(
    *,
    debug: bool = False,
    json_logs: bool = False,
    static_dir: str | None = None,
    database_url: str | None = None,
    enable_api: bool = True,
    enable_websocket: bool = True,
) -> Litestar:
    """Create and configure the Litestar application.

    Args:
        debug: Whether to enable debug mode.
        json_logs: Whether to output logs as JSON (for production).
        static_dir: Directory of the front-end pages and assets.
        database_url: Database URL for drawing persistence. Drawings are kept
            in memory when None.
        enable_api: Whether to enable the REST API, auth and page routes.
        enable_websocket: Whether to enable the real-time relay.

    Returns:
        Configured Litestar application instance.
    """
    configure_logging(debug=debug, json_logs=json_logs)

    storage: StorageProtocol | None = None
    lifespan: list = []
    if database_url:
        from inkroom.storage.db import DatabaseManager, DatabaseStorage

        db_manager = DatabaseManager(database_url)
        storage = DatabaseStorage(db_manager)
        lifespan.append(_database_lifespan(db_manager))

    plugin = InkroomPlugin(
        InkroomConfig(
            storage=storage,
            enable_api=enable_api,
            enable_websocket=enable_websocket,
            static_dir=static_dir,
        )
    )

    return Litestar(
        route_handlers=[HealthController],
        plugins=[plugin],
        debug=debug,
        lifespan=lifespan,
        middleware=[CorrelationIdMiddleware, RequestLoggingMiddleware],
        exception_handlers=get_exception_handlers(),
        openapi_config=OpenAPIConfig(
            title="inkroom API",
            version="0.1.0",
            description="Collaborative drawing board with a real-time room relay",
            path="/schema",
            use_handler_docstrings=True,
        ),
    )


# Default application instance for uvicorn
app = create_app(
    debug=_env_flag("INKROOM_DEBUG"),
    json_logs=_env_flag("INKROOM_JSON_LOGS"),
    static_dir=os.environ.get("INKROOM_STATIC_DIR") or None,
    database_url=os.environ.get("DATABASE_URL") or None,
)
