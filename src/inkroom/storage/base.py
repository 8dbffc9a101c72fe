"""Storage protocol definition for inkroom."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from inkroom.core.models import Drawing


@runtime_checkable
class StorageProtocol(Protocol):
    """Protocol defining the storage interface for saved drawings.

    Every backend must implement these coroutines; the service layer adds
    validation and merging on top.
    """

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Persist a new drawing.

        Args:
            drawing: The drawing to store.

        Returns:
            The stored drawing.

        Raises:
            StorageError: If the drawing cannot be created.
        """
        ...

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Retrieve a drawing by its ID.

        Args:
            drawing_id: The unique identifier of the drawing.

        Returns:
            The drawing if found, None otherwise.
        """
        ...

    async def list_drawings(self) -> list[Drawing]:
        """List all drawings, most recently updated first."""
        ...

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Replace a stored drawing and bump its ``updated_at``.

        Args:
            drawing: The drawing with updated data.

        Returns:
            The updated drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        ...

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing.

        Args:
            drawing_id: The unique identifier of the drawing to delete.

        Returns:
            True if the drawing was deleted, False if it did not exist.
        """
        ...

    async def count_drawings(self) -> int:
        """Return the number of stored drawings."""
        ...

    async def last_updated(self) -> datetime | None:
        """Return the newest ``updated_at`` across all drawings, if any."""
        ...
