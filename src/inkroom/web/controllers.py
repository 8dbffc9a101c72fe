"""Litestar controllers for inkroom API endpoints."""

from __future__ import annotations

from typing import Annotated, Any, ClassVar
from uuid import UUID  # noqa: TC003

from litestar import Controller, delete, get, post, put
from litestar.datastructures import CacheControlHeader
from litestar.exceptions import ClientException, NotFoundException
from litestar.params import Dependency
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED

from inkroom.auth.guards import requires_auth
from inkroom.realtime.directory import list_rooms
from inkroom.realtime.room import RoomRegistry  # noqa: TC001
from inkroom.services.drawings import DrawingService, is_png_data_url  # noqa: TC001
from inkroom.web.dto import CreateDrawingDTO, PeerDTO, PngExportDTO, RoomDTO, SaveRoomDTO, UpdateDrawingDTO


class DrawingController(Controller):
    """Controller for saved drawings.

    Reads are public; writes require a logged-in session.
    """

    path = "/drawings"
    tags: ClassVar[list[str]] = ["Drawings"]

    @get("/")
    async def list_drawings(self, drawing_service: DrawingService) -> list[dict[str, Any]]:
        """List drawings as ``{id, title, created_at, updated_at}``, newest update first."""
        return [drawing.summary() for drawing in await drawing_service.list_drawings()]

    @post("/", guards=[requires_auth], status_code=HTTP_201_CREATED)
    async def create_drawing(self, data: CreateDrawingDTO, drawing_service: DrawingService) -> dict[str, str]:
        """Create a drawing.

        Args:
            data: The drawing document.
            drawing_service: The drawing service instance (injected).

        Returns:
            ``{"id": ...}`` of the new drawing.
        """
        drawing = await drawing_service.create_drawing(
            title=data.title,
            size=data.size.to_dict(),
            background=data.background,
            strokes=data.strokes,
        )
        return {"id": str(drawing.id)}

    @get("/{drawing_id:uuid}")
    async def get_drawing(self, drawing_id: UUID, drawing_service: DrawingService) -> dict[str, Any]:
        """Return the stored drawing document.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        drawing = await drawing_service.get_drawing(drawing_id)
        return drawing.body()

    @put("/{drawing_id:uuid}", guards=[requires_auth])
    async def update_drawing(
        self,
        drawing_id: UUID,
        data: UpdateDrawingDTO,
        drawing_service: DrawingService,
    ) -> dict[str, bool]:
        """Merge the provided fields into a drawing.

        Raises:
            DrawingNotFoundError: If the drawing does not exist.
        """
        await drawing_service.update_drawing(
            drawing_id,
            title=data.title,
            size=data.size.to_dict() if data.size else None,
            background=data.background,
            strokes=data.strokes,
        )
        return {"ok": True}

    @delete("/{drawing_id:uuid}", guards=[requires_auth], status_code=HTTP_200_OK)
    async def delete_drawing(self, drawing_id: UUID, drawing_service: DrawingService) -> dict[str, bool]:
        """Delete a drawing; unknown IDs are not an error."""
        await drawing_service.delete_drawing(drawing_id)
        return {"ok": True}

    @post("/{drawing_id:uuid}/png", guards=[requires_auth], status_code=HTTP_200_OK)
    async def export_png(self, drawing_id: UUID, data: PngExportDTO) -> dict[str, bool]:  # noqa: ARG002
        """Accept a client-rendered PNG export.

        Only the data URL shape is checked; nothing is stored.

        Raises:
            ClientException: If ``dataUrl`` is not a base64 PNG data URL.
        """
        if not is_png_data_url(data.dataUrl):
            msg = "Invalid PNG dataUrl"
            raise ClientException(msg)
        return {"ok": True}


class StatsController(Controller):
    """Controller for drawing store statistics."""

    path = "/stats"
    tags: ClassVar[list[str]] = ["Stats"]

    @get("/")
    async def get_stats(self, drawing_service: DrawingService) -> dict[str, Any]:
        """Return ``{"count": ..., "lastUpdated": ...}``."""
        return await drawing_service.stats()


class RoomController(Controller):
    """Controller exposing live rooms to monitoring views."""

    path = "/rooms"
    tags: ClassVar[list[str]] = ["Rooms"]

    @get("/", cache_control=CacheControlHeader(no_store=True))
    async def room_directory(
        self,
        room_registry: RoomRegistry,
        placeholder_names: Annotated[frozenset[str], Dependency(skip_validation=True)],
    ) -> list[RoomDTO]:
        """List active rooms with their named peers.

        Placeholder names are filtered out. Computed on every call.
        """
        return [
            RoomDTO(name=room["name"], peers=[PeerDTO(**peer) for peer in room["peers"]])
            for room in list_rooms(room_registry, placeholder_names)
        ]

    @post("/{room_name:str}/save", guards=[requires_auth], status_code=HTTP_201_CREATED)
    async def save_room(
        self,
        room_name: str,
        room_registry: RoomRegistry,
        drawing_service: DrawingService,
        data: SaveRoomDTO | None = None,
    ) -> dict[str, str]:
        """Save the live document of a room as a new drawing.

        Raises:
            NotFoundException: If no connection ever referenced the room.
        """
        room = room_registry.get(room_name)
        if room is None:
            msg = f"Room {room_name!r} not found"
            raise NotFoundException(msg)
        data = data or SaveRoomDTO()
        drawing = await drawing_service.save_room(
            room,
            title=data.title,
            size=data.size.to_dict() if data.size else None,
            background=data.background,
        )
        return {"id": str(drawing.id)}
