"""In-memory storage implementation for inkroom."""

from __future__ import annotations

import asyncio
import copy
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from inkroom.exceptions import DrawingNotFoundError

if TYPE_CHECKING:
    from uuid import UUID

    from inkroom.core.models import Drawing


def _copy(drawing: Drawing) -> Drawing:
    return replace(drawing, size=replace(drawing.size), strokes=copy.deepcopy(drawing.strokes))


class InMemoryStorage:
    """Dictionary-backed drawing storage.

    Returns copies so callers can never mutate stored state. All data is lost
    when the process stops; suitable for development, tests and demos.

    Attributes:
        _drawings: Stored drawings keyed by ID.
        _lock: Asyncio lock serializing access.
    """

    def __init__(self) -> None:
        """Initialize the in-memory storage with no drawings."""
        self._drawings: dict[UUID, Drawing] = {}
        self._lock = asyncio.Lock()

    async def create_drawing(self, drawing: Drawing) -> Drawing:
        """Store a copy of ``drawing`` and return another copy."""
        async with self._lock:
            self._drawings[drawing.id] = _copy(drawing)
            return _copy(drawing)

    async def get_drawing(self, drawing_id: UUID) -> Drawing | None:
        """Return a copy of the drawing, or None if unknown."""
        async with self._lock:
            drawing = self._drawings.get(drawing_id)
            return _copy(drawing) if drawing else None

    async def list_drawings(self) -> list[Drawing]:
        """Return copies of all drawings, most recently updated first."""
        async with self._lock:
            drawings = [_copy(drawing) for drawing in self._drawings.values()]
            return sorted(drawings, key=lambda d: d.updated_at, reverse=True)

    async def update_drawing(self, drawing: Drawing) -> Drawing:
        """Replace a stored drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        async with self._lock:
            if drawing.id not in self._drawings:
                raise DrawingNotFoundError(drawing.id)
            updated = replace(_copy(drawing), updated_at=datetime.now(UTC))
            self._drawings[drawing.id] = updated
            return _copy(updated)

    async def delete_drawing(self, drawing_id: UUID) -> bool:
        """Delete a drawing; returns whether it existed."""
        async with self._lock:
            return self._drawings.pop(drawing_id, None) is not None

    async def count_drawings(self) -> int:
        """Return the number of stored drawings."""
        async with self._lock:
            return len(self._drawings)

    async def last_updated(self) -> datetime | None:
        """Return the newest ``updated_at``, if any drawing exists."""
        async with self._lock:
            return max((d.updated_at for d in self._drawings.values()), default=None)
