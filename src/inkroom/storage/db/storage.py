"""Database storage implementation for inkroom."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from inkroom.exceptions import DrawingNotFoundError, StorageError
from inkroom.storage.db.models import DrawingModel, drawing_from_model, drawing_to_model

if TYPE_CHECKING:
    from uuid import UUID

    from inkroom.core.models import Drawing
    from inkroom.storage.db.setup import DatabaseManager


class DatabaseStorage:
    """Async database storage implementation using SQLAlchemy.

    Each operation runs in its own session from the manager, committed on
    success and rolled back on error. Implements StorageProtocol.

    Attributes:
        _db: The database manager providing sessions.
    """

    def __init__(self, db: DatabaseManager) -> None:
        """Initialize the database storage.

        Args:
            db: An initialized database manager.
        """
        self._db = db

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Insert a new drawing row.

        Raises:
            StorageError: If the row cannot be written.
        """
        try:
            async with self._db.session() as session:
                model = drawing_to_model(drawing)
                session.add(model)
                await session.flush()
                await session.refresh(model)
                return drawing_from_model(model)
        except SQLAlchemyError as e:
            msg = f"Failed to store drawing {drawing.id}"
            raise StorageError(msg) from e

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Retrieve a drawing by its ID, or None."""
        async with self._db.session() as session:
            model = await session.get(DrawingModel, drawing_id)
            return drawing_from_model(model) if model else None

    async def list_drawings(self) -> list[Drawing]:
        """List all drawings, most recently updated first."""
        async with self._db.session() as session:
            result = await session.execute(select(DrawingModel).order_by(DrawingModel.updated_at.desc()))
            return [drawing_from_model(m) for m in result.scalars().all()]

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Replace a stored drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        async with self._db.session() as session:
            model = await session.get(DrawingModel, drawing.id)
            if model is None:
                raise DrawingNotFoundError(drawing.id)
            model.title = drawing.title
            model.body = drawing.body()
            model.updated_at = datetime.now(UTC)
            await session.flush()
            await session.refresh(model)
            return drawing_from_model(model)

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing; returns whether it existed."""
        async with self._db.session() as session:
            model = await session.get(DrawingModel, drawing_id)
            if model is None:
                return False
            await session.delete(model)
            return True

    async def count_drawings(self) -> int:
        """Return the number of stored drawings."""
        async with self._db.session() as session:
            result = await session.execute(select(func.count()).select_from(DrawingModel))
            return int(result.scalar_one())

    async def last_updated(self) -> datetime | None:
        """Return the newest ``updated_at``, if any drawing exists."""
        async with self._db.session() as session:
            result = await session.execute(select(func.max(DrawingModel.updated_at)))
            return result.scalar_one_or_none()
