"""Route guards for authenticated endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from inkroom.exceptions import AuthenticationError

if TYPE_CHECKING:
    from litestar.connection import ASGIConnection
    from litestar.handlers.base import BaseRouteHandler

SESSION_USER_KEY = "user"


def current_username(connection: ASGIConnection[Any, Any, Any, Any]) -> str | None:
    """Return the logged-in username stored in the session, if any."""
    session = connection.scope.get("session") or {}
    user = session.get(SESSION_USER_KEY) or {}
    return user.get("username") if isinstance(user, dict) else None


def requires_auth(connection: ASGIConnection[Any, Any, Any, Any], _: BaseRouteHandler) -> None:
    """Guard rejecting requests without a logged-in session.

    Raises:
        AuthenticationError: If nobody is logged in.
    """
    if current_username(connection) is None:
        msg = "Auth required"
        raise AuthenticationError(msg)
