"""Custom exceptions for inkroom."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class InkroomError(Exception):
    """Base exception class for all inkroom errors."""


class DrawingNotFoundError(InkroomError):
    """Raised when a drawing with the specified ID cannot be found.

    Attributes:
        drawing_id: The UUID of the drawing that was not found.
    """

    def __init__(self, drawing_id: UUID | str) -> None:
        """Initialize the exception with the drawing ID.

        Args:
            drawing_id: The UUID of the drawing that was not found.
        """
        self.drawing_id = drawing_id
        super().__init__(f"Drawing with ID {drawing_id} not found")


class InvalidDrawingError(InkroomError):
    """Raised when a drawing payload fails validation.

    Attributes:
        issues: Field-level problems, as ``(field, message)`` pairs.
    """

    def __init__(self, issues: list[tuple[str, str]]) -> None:
        """Initialize the exception with the validation issues.

        Args:
            issues: Field-level problems found in the payload.
        """
        self.issues = issues
        super().__init__("; ".join(f"{field}: {message}" for field, message in issues))


class AuthenticationError(InkroomError):
    """Raised when credentials are missing or do not match."""


class MissingCredentialsError(InkroomError):
    """Raised when a registration lacks a username or a password."""


class UserExistsError(InkroomError):
    """Raised when registering a username that is already taken."""

    def __init__(self, username: str) -> None:
        """Initialize the exception with the username.

        Args:
            username: The username that is already registered.
        """
        self.username = username
        super().__init__(f"User {username!r} already exists")


class ProtocolError(InkroomError):
    """Raised when a real-time frame cannot be decoded."""


class StorageError(InkroomError):
    """Raised when a storage operation fails."""
