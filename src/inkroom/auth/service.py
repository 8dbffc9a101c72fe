"""Authentication service for password login."""

from __future__ import annotations

import structlog
from passlib.context import CryptContext

from inkroom.auth.config import AuthConfig
from inkroom.auth.models import User
from inkroom.exceptions import AuthenticationError, MissingCredentialsError, UserExistsError

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for user registration and credential checks.

    Users live in memory for the life of the process.
    """

    def __init__(self, config: AuthConfig | None = None) -> None:
        """Initialize the auth service.

        Args:
            config: Auth configuration. Uses defaults if not provided.
        """
        self._config = config or AuthConfig()
        self._pwd_context = CryptContext(schemes=self._config.password_schemes, deprecated="auto")
        self._users: dict[str, User] = {}

    @property
    def config(self) -> AuthConfig:
        """The auth configuration."""
        return self._config

    def register(self, username: str, password: str) -> User:
        """Create an account.

        Args:
            username: Requested login name.
            password: Plain-text password.

        Returns:
            The new user.

        Raises:
            MissingCredentialsError: If either field is empty.
            UserExistsError: If the username is taken.
        """
        if not username or not password:
            msg = "Username & password required"
            raise MissingCredentialsError(msg)
        if username in self._users:
            raise UserExistsError(username)

        user = User(username=username, password_hash=self._pwd_context.hash(password))
        self._users[username] = user
        logger.info("User registered", username=username, total_users=len(self._users))
        return user

    def authenticate(self, username: str, password: str) -> User:
        """Check a credential pair.

        Raises:
            AuthenticationError: If the user is unknown or the password is wrong.
        """
        user = self._users.get(username)
        if user is None or not self._pwd_context.verify(password, user.password_hash):
            logger.info("Login rejected", username=username)
            msg = "Invalid credentials"
            raise AuthenticationError(msg)
        return user

    def get_user(self, username: str) -> User | None:
        """Get a user by username."""
        return self._users.get(username)
