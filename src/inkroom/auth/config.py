"""Authentication and session configuration for inkroom."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class AuthConfig:
    """Configuration for password auth and server-side sessions.

    Environment variables:
        SESSION_MAX_AGE: Session lifetime in seconds.
        PASSWORD_SCHEMES: Comma-separated passlib schemes, the first one hashes.
    """

    session_cookie_name: str = "inkroom_session"
    session_max_age: int = field(default_factory=lambda: int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 7))))
    password_schemes: list[str] = field(
        default_factory=lambda: [s.strip() for s in os.getenv("PASSWORD_SCHEMES", "pbkdf2_sha256").split(",")]
    )
