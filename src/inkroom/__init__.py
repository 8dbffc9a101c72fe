"""inkroom: a collaborative drawing board on Litestar.

Users join a named room and see each other's strokes and cursors live. The
server relays Yjs document sync and awareness frames between the
connections of a room, and keeps saved drawings behind a small REST API.

Key Components:
    - Realtime: RoomRegistry, ConnectionManager and the ``/yjs`` endpoint
    - Storage: InMemoryStorage, DatabaseStorage, StorageProtocol
    - Services: DrawingService
    - Auth: AuthService, password login with server-side sessions
    - Plugin: InkroomPlugin for Litestar integration

Quick Start:
    >>> from litestar import Litestar
    >>> from inkroom import InkroomConfig, InkroomPlugin
    >>>
    >>> app = Litestar(plugins=[InkroomPlugin(InkroomConfig())])
"""

from __future__ import annotations

from inkroom.auth import AuthConfig, AuthController, AuthService, User
from inkroom.core import Drawing, Size
from inkroom.exceptions import (
    AuthenticationError,
    DrawingNotFoundError,
    InkroomError,
    InvalidDrawingError,
    MissingCredentialsError,
    ProtocolError,
    UserExistsError,
)
from inkroom.plugin import InkroomConfig, InkroomPlugin
from inkroom.realtime import Connection, ConnectionManager, Room, RoomRegistry, create_websocket_handler
from inkroom.services import DrawingService
from inkroom.storage import InMemoryStorage, StorageProtocol
from inkroom.web import create_router

__all__ = [
    "AuthConfig",
    "AuthController",
    "AuthService",
    "AuthenticationError",
    "Connection",
    "ConnectionManager",
    "Drawing",
    "DrawingNotFoundError",
    "DrawingService",
    "InMemoryStorage",
    "InkroomConfig",
    "InkroomError",
    "InkroomPlugin",
    "InvalidDrawingError",
    "MissingCredentialsError",
    "ProtocolError",
    "Room",
    "RoomRegistry",
    "StorageProtocol",
    "User",
    "UserExistsError",
    "create_router",
    "create_websocket_handler",
]

__version__ = "0.1.0"
