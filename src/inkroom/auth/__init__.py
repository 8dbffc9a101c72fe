"""Password authentication and session handling for inkroom."""

from __future__ import annotations

from inkroom.auth.config import AuthConfig
from inkroom.auth.controller import AuthController
from inkroom.auth.guards import current_username, requires_auth
from inkroom.auth.models import User
from inkroom.auth.service import AuthService

__all__ = [
    "AuthConfig",
    "AuthController",
    "AuthService",
    "User",
    "current_username",
    "requires_auth",
]
