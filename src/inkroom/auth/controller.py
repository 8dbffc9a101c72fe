"""Authentication controller for password login and sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import structlog
from litestar import Controller, get, post
from litestar.connection import Request  # noqa: TC002
from litestar.datastructures import CacheControlHeader
from litestar.status_codes import HTTP_200_OK

from inkroom.auth.guards import SESSION_USER_KEY, current_username
from inkroom.auth.service import AuthService  # noqa: TC001

logger = structlog.get_logger(__name__)


@dataclass
class Credentials:
    """Username and password pair posted to register and login."""

    username: str = ""
    password: str = ""


class AuthController(Controller):
    """Controller for registration, login, logout and session lookup."""

    path = "/auth"
    tags: ClassVar[list[str]] = ["Authentication"]

    @get("/me", cache_control=CacheControlHeader(no_store=True))
    async def me(self, request: Request) -> dict[str, Any]:
        """Report whether the caller is logged in.

        Returns:
            ``{"authenticated": True, "username": ...}`` or
            ``{"authenticated": False}``.
        """
        username = current_username(request)
        if username is None:
            return {"authenticated": False}
        return {"authenticated": True, "username": username}

    @post("/register", status_code=HTTP_200_OK)
    async def register(self, request: Request, data: Credentials, auth_service: AuthService) -> dict[str, Any]:
        """Create an account and log it in.

        Args:
            request: The request object.
            data: The requested credentials.
            auth_service: Auth service instance.

        Returns:
            ``{"ok": True, "username": ...}``
        """
        user = auth_service.register(data.username, data.password)
        self._start_session(request, user.username)
        return {"ok": True, "username": user.username}

    @post("/login", status_code=HTTP_200_OK)
    async def login(self, request: Request, data: Credentials, auth_service: AuthService) -> dict[str, Any]:
        """Log in with an existing account.

        Args:
            request: The request object.
            data: The credentials to check.
            auth_service: Auth service instance.

        Returns:
            ``{"ok": True, "username": ...}``
        """
        user = auth_service.authenticate(data.username, data.password)
        self._start_session(request, user.username)
        logger.info("User logged in", username=user.username)
        return {"ok": True, "username": user.username}

    @post("/logout", status_code=HTTP_200_OK)
    async def logout(self, request: Request) -> dict[str, Any]:
        """Drop the current session."""
        request.clear_session()
        return {"ok": True}

    @staticmethod
    def _start_session(request: Request, username: str) -> None:
        request.clear_session()
        request.set_session({SESSION_USER_KEY: {"username": username}})
