"""Real-time WebSocket module for inkroom.

This module provides the room relay: the room registry, binary framing,
document reconciliation, presence broadcasting and the connection lifecycle.
"""

from __future__ import annotations

from inkroom.realtime.directory import is_placeholder_name, list_rooms
from inkroom.realtime.handler import RoomWebSocketHandler, create_websocket_handler, resolve_room_name
from inkroom.realtime.manager import Connection, ConnectionManager
from inkroom.realtime.presence import PresenceDelta, apply_presence_update, full_snapshot
from inkroom.realtime.protocol import IncomingMessage, MessageKind, decode_message
from inkroom.realtime.room import Room, RoomRegistry
from inkroom.realtime.sync import SyncResult, handle_sync_message

__all__ = [
    "Connection",
    "ConnectionManager",
    "IncomingMessage",
    "MessageKind",
    "PresenceDelta",
    "Room",
    "RoomRegistry",
    "RoomWebSocketHandler",
    "SyncResult",
    "apply_presence_update",
    "create_websocket_handler",
    "decode_message",
    "full_snapshot",
    "handle_sync_message",
    "is_placeholder_name",
    "list_rooms",
    "resolve_room_name",
]
