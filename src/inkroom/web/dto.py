"""Data Transfer Objects (DTOs) for the inkroom API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SizeDTO:
    """Drawing surface dimensions; both must be positive."""

    w: float
    h: float

    def to_dict(self) -> dict[str, float]:
        """Convert to the plain mapping the service expects."""
        return {"w": self.w, "h": self.h}


@dataclass
class CreateDrawingDTO:
    """DTO for creating a drawing.

    Attributes:
        title: Display title, non-empty.
        size: Surface dimensions.
        background: Background colour.
        strokes: Opaque stroke records.
    """

    title: str
    size: SizeDTO
    background: str
    strokes: list[Any]


@dataclass
class UpdateDrawingDTO:
    """DTO for partially updating a drawing.

    All fields are optional. Only provided fields are merged.
    """

    title: str | None = None
    size: SizeDTO | None = None
    background: str | None = None
    strokes: list[Any] | None = None


@dataclass
class SaveRoomDTO:
    """DTO for saving a live room as a drawing; every field is optional."""

    title: str | None = None
    size: SizeDTO | None = None
    background: str | None = None


@dataclass
class PngExportDTO:
    """DTO carrying a client-rendered PNG as a data URL."""

    dataUrl: str | None = None  # noqa: N815


@dataclass
class PeerDTO:
    """A named participant of a room."""

    id: int
    name: str
    color: str


@dataclass
class RoomDTO:
    """A room and its named participants."""

    name: str
    peers: list[PeerDTO] = field(default_factory=list)
