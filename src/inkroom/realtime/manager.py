"""Connection lifecycle management for room WebSocket sessions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from inkroom.exceptions import ProtocolError
from inkroom.realtime.presence import apply_presence_update, full_snapshot, remove_connection_presence
from inkroom.realtime.protocol import MessageKind, decode_message, encode_sync_request
from inkroom.realtime.sync import handle_sync_message

if TYPE_CHECKING:
    from litestar import WebSocket

    from inkroom.realtime.presence import PresenceDelta
    from inkroom.realtime.room import Room, RoomRegistry

logger = structlog.get_logger(__name__)


@dataclass(eq=False)
class Connection:
    """One real-time transport session bound to a single room.

    Attributes:
        socket: The underlying WebSocket, owned by the transport layer.
        room_name: Name of the room this connection is bound to for life.
        id: Generated connection id, used as the presence change origin.
        client_ids: Presence client ids announced over this connection.
        connected_at: When the connection was bound.
        closed: Set once a send fails or the transport closes.
    """

    socket: WebSocket
    room_name: str
    id: str = field(default_factory=lambda: uuid4().hex)
    client_ids: set[int] = field(default_factory=set)
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    closed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "room": self.room_name,
            "client_ids": sorted(self.client_ids),
            "connected_at": self.connected_at.isoformat(),
        }


class ConnectionManager:
    """Binds connections to rooms and relays their messages.

    Room state is only mutated synchronously between awaits, so every
    connection of a room observes the same document and presence set
    without explicit locking. Sends are the only suspension points.
    """

    def __init__(self, registry: RoomRegistry) -> None:
        """Initialize the connection manager.

        Args:
            registry: The room registry shared by every connection.
        """
        self._registry = registry

    @property
    def registry(self) -> RoomRegistry:
        """The room registry connections are bound through."""
        return self._registry

    async def connect(self, socket: WebSocket, room_name: str) -> Connection:
        """Bind an accepted socket to a room and push the initial state.

        The sync request goes out first, then the full presence snapshot.

        Args:
            socket: The accepted WebSocket.
            room_name: The target room.

        Returns:
            The new Connection.
        """
        room = self._registry.get_or_create(room_name)
        connection = Connection(socket=socket, room_name=room_name)
        room.add_connection(connection)

        logger.info(
            "Connection bound",
            room=room_name,
            connection_id=connection.id,
            total_connections=len(room.connections),
        )

        await self.send(connection, encode_sync_request(room.doc))
        await self.send(connection, full_snapshot(room))
        return connection

    async def dispatch(self, connection: Connection, data: bytes) -> None:
        """Route one inbound frame by its message-kind tag.

        Unknown kinds and undecodable frames are logged and dropped; the
        connection stays open and the room is untouched.

        Args:
            connection: The sending connection.
            data: The raw frame.
        """
        room = self._registry.get_or_create(connection.room_name)
        try:
            message = decode_message(data)
            if message.kind == MessageKind.SYNC:
                await self._handle_sync(room, connection, message.body)
            elif message.kind == MessageKind.AWARENESS:
                await self._handle_presence(room, connection, message.body)
            else:
                logger.debug("Ignoring unknown message kind", kind=message.kind, connection_id=connection.id)
        except ProtocolError as exc:
            logger.warning(
                "Dropping malformed message",
                room=room.name,
                connection_id=connection.id,
                error=str(exc),
            )

    async def _handle_sync(self, room: Room, connection: Connection, body: bytes) -> None:
        result = handle_sync_message(room, body)
        if result.reply is not None:
            await self.send(connection, result.reply)
        for update in result.updates:
            await self.broadcast(room, update, exclude=connection.id)

    async def _handle_presence(self, room: Room, connection: Connection, body: bytes) -> None:
        deltas = apply_presence_update(room, body, connection)
        await self._broadcast_presence(room, deltas)

    async def _broadcast_presence(self, room: Room, deltas: list[PresenceDelta]) -> None:
        for delta in deltas:
            await self.broadcast(room, delta.message, exclude=delta.origin)

    async def disconnect(self, connection: Connection) -> None:
        """Unbind a connection and clear its presence.

        Safe to call more than once. The removal delta goes to every
        connection still in the room.

        Args:
            connection: The connection whose transport closed.
        """
        connection.closed = True
        room = self._registry.get(connection.room_name)
        if room is None or not room.remove_connection(connection):
            return

        deltas = remove_connection_presence(room, connection)
        logger.info(
            "Connection unbound",
            room=room.name,
            connection_id=connection.id,
            remaining_connections=len(room.connections),
        )
        await self._broadcast_presence(room, deltas)

    async def send(self, connection: Connection, data: bytes) -> bool:
        """Send a binary frame to a single connection.

        A failed send marks the connection closed instead of raising.

        Args:
            connection: The target connection.
            data: The frame to send.

        Returns:
            True if sent successfully, False otherwise.
        """
        if connection.closed:
            return False
        try:
            await connection.socket.send_bytes(data)
        except Exception:  # noqa: BLE001
            connection.closed = True
            logger.warning(
                "Failed to send message, marking connection closed",
                room=connection.room_name,
                connection_id=connection.id,
                exc_info=True,
            )
            return False
        return True

    async def broadcast(self, room: Room, data: bytes, exclude: str | None = None) -> int:
        """Send a frame to every connection in a room.

        Sends to a snapshot of the membership concurrently, so connections
        leaving mid-broadcast do not disturb it and a slow or failed target
        never holds up the others.

        Args:
            room: The room to broadcast to.
            data: The frame to send.
            exclude: Optional connection id to skip (the change origin).

        Returns:
            The number of connections the frame was delivered to.
        """
        tasks = [self.send(connection, data) for connection in room.snapshot_connections() if connection.id != exclude]
        if not tasks:
            return 0
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return sum(1 for result in results if result is True)

    @property
    def active_rooms(self) -> int:
        """Get the number of rooms with at least one connection."""
        return sum(1 for room in self._registry.rooms() if room.connections)

    @property
    def total_connections(self) -> int:
        """Get the total number of bound connections."""
        return sum(len(room.connections) for room in self._registry.rooms())
