"""User model for inkroom."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass
class User:
    """A registered account.

    Attributes:
        username: Unique login name, also the display name.
        password_hash: passlib hash of the password.
        created_at: Registration timestamp.
    """

    username: str
    password_hash: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
