"""WebSocket handler for real-time room collaboration."""

from __future__ import annotations

from pathlib import Path, PurePosixPath  # noqa: TC003
from typing import TYPE_CHECKING, Annotated

import structlog
from litestar import Router, WebSocket, websocket
from litestar.params import Parameter

if TYPE_CHECKING:
    from inkroom.realtime.manager import ConnectionManager

logger = structlog.get_logger(__name__)

DEFAULT_ROOM = "default"


def resolve_room_name(path_room: str | PurePosixPath | None = None, query_room: str | None = None) -> str:
    """Pick the room name from the connection target.

    The path remainder wins; the ``room`` query parameter is the fallback and
    ``"default"`` is used when both are absent.

    Args:
        path_room: Remainder of the path after the endpoint prefix.
        query_room: Value of the ``room`` query parameter.

    Returns:
        The room name.
    """
    name = str(path_room).strip("/") if path_room is not None else ""
    if not name:
        name = (query_room or "").strip()
    return name or DEFAULT_ROOM


class RoomWebSocketHandler:
    """Handler for room WebSocket connections.

    Accepts the socket, binds it to its room, processes frames in arrival
    order and tears the binding down when the transport closes.
    """

    def __init__(self, connection_manager: ConnectionManager) -> None:
        """Initialize the WebSocket handler.

        Args:
            connection_manager: The connection manager instance.
        """
        self._manager = connection_manager

    async def handle_connection(self, socket: WebSocket, room_name: str) -> None:
        """Handle a WebSocket connection for a room.

        Args:
            socket: The WebSocket connection.
            room_name: The room resolved from the connection target.
        """
        await socket.accept()
        connection = await self._manager.connect(socket, room_name)

        try:
            async for data in socket.iter_data(mode="binary"):
                await self._manager.dispatch(connection, data)
        except Exception:
            logger.exception("WebSocket error", room=room_name, connection_id=connection.id)
        finally:
            await self._manager.disconnect(connection)


def create_websocket_handler(path: str, connection_manager: ConnectionManager) -> Router:
    """Create the WebSocket router for room collaboration.

    Accepts ``{path}/<room>`` and ``{path}?room=<room>``. Upgrades to any
    other path are not routed and therefore refused.

    Args:
        path: Endpoint prefix, e.g. ``/yjs``.
        connection_manager: The connection manager instance.

    Returns:
        A Litestar Router with the WebSocket handlers.
    """
    handler = RoomWebSocketHandler(connection_manager)

    @websocket(path="/")
    async def room_websocket_by_query(socket: WebSocket, room: str | None = None) -> None:
        """WebSocket endpoint taking the room from the ``room`` query parameter.

        Args:
            socket: The WebSocket connection.
            room: The room name, if given.
        """
        await handler.handle_connection(socket, resolve_room_name(None, room))

    @websocket(path="/{room_path:path}")
    async def room_websocket(
        socket: WebSocket,
        room_path: Annotated[Path, Parameter(description="Room name after the endpoint prefix")],
    ) -> None:
        """WebSocket endpoint taking the room from the path remainder.

        Args:
            socket: The WebSocket connection.
            room_path: Everything after the endpoint prefix.
        """
        room_query = socket.query_params.get("room")
        await handler.handle_connection(socket, resolve_room_name(PurePosixPath(room_path), room_query))

    return Router(path=path, route_handlers=[room_websocket_by_query, room_websocket], tags=["WebSocket"])
