"""Drawing service providing business logic for saved drawings."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import structlog

from inkroom.core.models import DEFAULT_TITLE, Drawing, Size, validate_drawing_fields
from inkroom.exceptions import DrawingNotFoundError

if TYPE_CHECKING:
    from uuid import UUID

    from inkroom.realtime.room import Room
    from inkroom.storage.base import StorageProtocol

logger = structlog.get_logger(__name__)

PNG_DATA_URL = re.compile(r"^data:image/png;base64,")


def is_png_data_url(value: str | None) -> bool:
    """Check that ``value`` is a base64 PNG data URL."""
    return bool(value) and PNG_DATA_URL.match(value) is not None


class DrawingService:
    """Service for managing saved drawings.

    Wraps the storage layer with payload validation, partial updates and the
    hand-off from a live room document to a saved drawing.
    """

    def __init__(self, storage: StorageProtocol) -> None:
        """Initialize the drawing service.

        Args:
            storage: Storage backend implementing StorageProtocol.
        """
        self._storage = storage

    async def list_drawings(self) -> list[Drawing]:
        """List all drawings, most recently updated first."""
        return await self._storage.list_drawings()

    async def create_drawing(
        self,
        title: str,
        size: dict[str, Any],
        background: str = "#ffffff",
        strokes: list[Any] | None = None,
    ) -> Drawing:
        """Validate and store a new drawing.

        Args:
            title: Display title, non-empty.
            size: ``{"w": ..., "h": ...}`` with positive numbers.
            background: Background colour.
            strokes: Opaque stroke records.

        Returns:
            The stored drawing.

        Raises:
            InvalidDrawingError: If the payload breaks a rule.
        """
        validate_drawing_fields(title=title, size=size)
        drawing = Drawing(
            title=title,
            size=Size(w=size["w"], h=size["h"]),
            background=background,
            strokes=list(strokes or []),
        )
        created = await self._storage.create_drawing(drawing)
        logger.info("Drawing created", drawing_id=str(created.id), strokes=len(created.strokes))
        return created

    async def get_drawing(self, drawing_id: UUID) -> Drawing:
        """Get a drawing by ID.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await self._storage.get_drawing(drawing_id)
        if drawing is None:
            raise DrawingNotFoundError(drawing_id)
        return drawing

    async def update_drawing(
        self,
        drawing_id: UUID,
        *,
        title: str | None = None,
        size: dict[str, Any] | None = None,
        background: str | None = None,
        strokes: list[Any] | None = None,
    ) -> Drawing:
        """Shallow-merge the given fields into a stored drawing.

        Fields left as None keep their stored value.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
            InvalidDrawingError: If a provided field breaks a rule.
        """
        validate_drawing_fields(title=title, size=size, partial=True)
        existing = await self.get_drawing(drawing_id)
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if size is not None:
            changes["size"] = Size(w=size["w"], h=size["h"])
        if background is not None:
            changes["background"] = background
        if strokes is not None:
            changes["strokes"] = list(strokes)

        updated = await self._storage.update_drawing(replace(existing, **changes))
        logger.info("Drawing updated", drawing_id=str(drawing_id), fields=sorted(changes))
        return updated

    async def delete_drawing(self, drawing_id: UUID) -> None:
        """Delete a drawing. Deleting an unknown ID is not an error."""
        deleted = await self._storage.delete_drawing(drawing_id)
        logger.info("Drawing deleted", drawing_id=str(drawing_id), existed=deleted)

    async def stats(self) -> dict[str, Any]:
        """Return ``{"count": ..., "lastUpdated": ...}`` for the drawing store."""
        count = await self._storage.count_drawings()
        last = await self._storage.last_updated()
        return {"count": count, "lastUpdated": last.isoformat() if last else None}

    async def save_room(
        self,
        room: Room,
        *,
        title: str | None = None,
        size: dict[str, Any] | None = None,
        background: str | None = None,
    ) -> Drawing:
        """Store the current content of a live room as a new drawing.

        Values missing from the arguments are taken from the room's ``meta``
        map, then from defaults.

        Args:
            room: The room whose document to save.
            title: Title override; defaults to the room name.
            size: Size override.
            background: Background override.

        Returns:
            The stored drawing.
        """
        content = room.content()
        meta = content["meta"]
        return await self.create_drawing(
            title=title or meta.get("title") or room.name or DEFAULT_TITLE,
            size=size or meta.get("size") or {"w": 1280, "h": 720},
            background=background or meta.get("background") or "#ffffff",
            strokes=content["strokes"],
        )
