"""Litestar plugin for inkroom integration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from inkroom.auth.config import AuthConfig
from inkroom.auth.service import AuthService
from inkroom.realtime.directory import PLACEHOLDER_NAMES
from inkroom.realtime.manager import ConnectionManager
from inkroom.realtime.room import RoomRegistry
from inkroom.services.drawings import DrawingService
from inkroom.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from inkroom.storage.base import StorageProtocol


@dataclass
class InkroomConfig:
    """Configuration for the inkroom plugin.

    Attributes:
        storage: Storage backend for saved drawings. If None,
            InMemoryStorage will be used by default.
        enable_api: Whether to mount the REST API, auth and page routes.
        enable_websocket: Whether to mount the real-time relay.
        api_path: Base path for the REST API. Defaults to "/api".
        ws_path: Base path for the relay endpoint. Defaults to "/yjs".
        static_dir: Directory holding the front end (``index.html``,
            ``room.html`` and assets). Pages are not served when None.
        static_path: URL prefix for assets from ``static_dir``.
        placeholder_names: Lower-case display names hidden from the room
            directory.
        registry: Optional pre-built room registry, shared with the
            connection manager.
        connection_manager: Optional pre-configured ConnectionManager.
        auth_config: Session and password hashing settings.

    Example:
        >>> config = InkroomConfig(storage=InMemoryStorage(), ws_path="/live")
    """

    storage: StorageProtocol | None = None
    enable_api: bool = True
    enable_websocket: bool = True
    api_path: str = "/api"
    ws_path: str = "/yjs"
    static_dir: Path | str | None = None
    static_path: str = "/static"
    placeholder_names: frozenset[str] = PLACEHOLDER_NAMES
    registry: RoomRegistry | None = None
    connection_manager: ConnectionManager | None = field(default=None)
    auth_config: AuthConfig = field(default_factory=AuthConfig)


class InkroomPlugin(InitPluginProtocol):
    """Litestar plugin wiring the room relay, drawings API and auth.

    The plugin owns one room registry for the life of the application and
    hands it to both the relay and the directory endpoint.

    Example:
        >>> from litestar import Litestar
        >>> from inkroom import InkroomConfig, InkroomPlugin
        >>>
        >>> app = Litestar(plugins=[InkroomPlugin(InkroomConfig())])

        Accessing the service in route handlers:

        >>> from litestar import get
        >>> from inkroom.services.drawings import DrawingService
        >>>
        >>> @get("/custom")
        ... async def custom_handler(drawing_service: DrawingService) -> dict:
        ...     return await drawing_service.stats()
    """

    def __init__(self, config: InkroomConfig | None = None) -> None:
        """Initialize the plugin with optional configuration.

        Args:
            config: Plugin configuration. If None, InkroomConfig with default
                values will be used.
        """
        self._config = config or InkroomConfig()
        self._storage: StorageProtocol | None = None
        self._service: DrawingService | None = None
        self._registry: RoomRegistry | None = None
        self._connection_manager: ConnectionManager | None = None
        self._auth_service: AuthService | None = None

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Register dependencies, routes and the session middleware.

        Args:
            app_config: The Litestar application configuration object.

        Returns:
            The modified application configuration.
        """
        config = self._config
        self._storage = config.storage or InMemoryStorage()
        self._service = DrawingService(self._storage)
        if config.connection_manager is not None:
            self._connection_manager = config.connection_manager
            self._registry = self._connection_manager.registry
        else:
            self._registry = config.registry or RoomRegistry()
            self._connection_manager = ConnectionManager(self._registry)
        self._auth_service = AuthService(config.auth_config)
        static_dir = Path(config.static_dir) if config.static_dir else None
        placeholder_names = frozenset(name.lower() for name in config.placeholder_names)

        def provide_drawing_service() -> DrawingService:
            """Dependency provider for DrawingService."""
            return self.service

        def provide_room_registry() -> RoomRegistry:
            """Dependency provider for RoomRegistry."""
            return self.registry

        def provide_connection_manager() -> ConnectionManager:
            """Dependency provider for ConnectionManager."""
            return self.connection_manager

        def provide_auth_service() -> AuthService:
            """Dependency provider for AuthService."""
            return self.auth_service

        def provide_static_dir() -> Path | None:
            return static_dir

        def provide_placeholder_names() -> frozenset[str]:
            return placeholder_names

        app_config.dependencies.update(
            {
                "drawing_service": Provide(provide_drawing_service, sync_to_thread=False),
                "room_registry": Provide(provide_room_registry, sync_to_thread=False),
                "connection_manager": Provide(provide_connection_manager, sync_to_thread=False),
                "auth_service": Provide(provide_auth_service, sync_to_thread=False),
                "static_dir": Provide(provide_static_dir, sync_to_thread=False),
                "placeholder_names": Provide(provide_placeholder_names, sync_to_thread=False),
            }
        )

        if config.enable_api:
            from litestar.middleware.session.server_side import ServerSideSessionConfig

            from inkroom.auth.controller import AuthController
            from inkroom.web.router import create_router
            from inkroom.web.ui import index_page, room_page

            app_config.route_handlers.extend([create_router(path=config.api_path), AuthController, room_page])
            if static_dir is not None:
                from litestar.static_files import create_static_files_router

                app_config.route_handlers.extend(
                    [
                        index_page,
                        create_static_files_router(path=config.static_path, directories=[static_dir], name="static"),
                    ]
                )

            app_config.middleware.append(
                ServerSideSessionConfig(
                    key=config.auth_config.session_cookie_name,
                    max_age=config.auth_config.session_max_age,
                ).middleware
            )

        if config.enable_websocket:
            from inkroom.realtime.handler import create_websocket_handler

            app_config.route_handlers.append(
                create_websocket_handler(path=config.ws_path, connection_manager=self._connection_manager)
            )

        return app_config

    @property
    def storage(self) -> StorageProtocol:
        """Get the initialized storage backend.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._storage is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._storage

    @property
    def service(self) -> DrawingService:
        """Get the initialized drawing service.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._service

    @property
    def registry(self) -> RoomRegistry:
        """Get the room registry shared by the relay and the directory.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._registry is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._registry

    @property
    def connection_manager(self) -> ConnectionManager:
        """Get the initialized connection manager.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._connection_manager is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._connection_manager

    @property
    def auth_service(self) -> AuthService:
        """Get the initialized auth service.

        Raises:
            RuntimeError: If on_app_init has not run yet.
        """
        if self._auth_service is None:
            msg = "Plugin not initialized. Call on_app_init first."
            raise RuntimeError(msg)
        return self._auth_service
