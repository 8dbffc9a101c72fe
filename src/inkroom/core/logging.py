"""Structured logging setup and request middleware for inkroom."""

from __future__ import annotations

import logging
import sys
import time
import uuid
from typing import TYPE_CHECKING, Any

import structlog
from litestar.datastructures import Headers, MutableScopeHeaders
from litestar.enums import ScopeType
from litestar.middleware import AbstractMiddleware

if TYPE_CHECKING:
    from litestar.types import Message, Receive, Scope, Send

CORRELATION_HEADERS = ("x-correlation-id", "x-request-id")

# Libraries whose stdlib loggers are routed through structlog.
STDLIB_LOGGERS = ("litestar", "sqlalchemy.engine", "uvicorn.error")


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(*, debug: bool = False, json_logs: bool = False) -> None:
    """Configure structlog and hand stdlib records to the same renderer.

    Args:
        debug: Log at DEBUG instead of INFO.
        json_logs: Render JSON lines instead of the colored console format.
    """
    level = logging.DEBUG if debug else logging.INFO
    renderer: Any
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*_shared_processors(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *([structlog.processors.format_exc_info] if json_logs else []),
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    for name in STDLIB_LOGGERS:
        logging.getLogger(name).handlers = []


def _correlation_id(scope: Scope) -> str:
    headers = Headers.from_scope(scope)
    for name in CORRELATION_HEADERS:
        value = headers.get(name)
        if value:
            return value
    return uuid.uuid4().hex


class CorrelationIdMiddleware(AbstractMiddleware):
    """Bind a correlation ID to the structlog context of every connection.

    The ID is taken from the request headers or generated, stored in the
    scope state and echoed on HTTP responses. For WebSockets it stays bound
    for the whole session, so every relay line of a connection carries it.
    """

    scopes = {ScopeType.HTTP, ScopeType.WEBSOCKET}  # noqa: RUF012

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Bind the ID, run the app, then clear the context."""
        correlation_id = _correlation_id(scope)
        scope.setdefault("state", {})["correlation_id"] = correlation_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id, path=scope["path"])

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableScopeHeaders.from_message(message)["x-correlation-id"] = correlation_id
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            structlog.contextvars.clear_contextvars()


class RequestLoggingMiddleware(AbstractMiddleware):
    """Log one line per HTTP request with its status and duration.

    Polled endpoints are excluded. WebSocket sessions are logged by the relay.
    """

    scopes = {ScopeType.HTTP}  # noqa: RUF012
    exclude = ["^/health$", "^/api/rooms$", "^/favicon.ico$"]  # noqa: RUF012

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Time the request and log the outcome."""
        logger = structlog.get_logger(__name__)
        started = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            logger.exception("Unhandled error while serving request", method=scope["method"])
            raise
        finally:
            level = logging.ERROR if status_code >= 500 else logging.WARNING if status_code >= 400 else logging.INFO
            logger.log(
                level,
                "Request completed",
                method=scope["method"],
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
