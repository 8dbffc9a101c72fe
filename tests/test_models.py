"""Tests for drawing models, validation and the drawing service."""

from __future__ import annotations

from uuid import uuid4

import pytest
from pycrdt import Array, Map

from inkroom.core.models import DEFAULT_TITLE, Drawing, Size, validate_drawing_fields
from inkroom.exceptions import DrawingNotFoundError, InvalidDrawingError
from inkroom.realtime.room import Room
from inkroom.services.drawings import DrawingService, is_png_data_url
from inkroom.storage.memory import InMemoryStorage


@pytest.fixture
def service(storage: InMemoryStorage) -> DrawingService:
    return DrawingService(storage)


class TestValidateDrawingFields:
    """Tests for validate_drawing_fields."""

    def test_valid(self) -> None:
        """Test that a complete payload passes."""
        validate_drawing_fields(title="Board", size={"w": 800, "h": 600.5})

    def test_required_fields(self) -> None:
        """Test that missing fields are reported individually."""
        with pytest.raises(InvalidDrawingError) as exc_info:
            validate_drawing_fields()

        assert [field for field, _ in exc_info.value.issues] == ["title", "size"]

    def test_partial_allows_omissions(self) -> None:
        """Test that partial payloads may leave fields out."""
        validate_drawing_fields(partial=True)

    def test_bad_sizes(self) -> None:
        """Test non-positive and non-numeric sides."""
        with pytest.raises(InvalidDrawingError) as exc_info:
            validate_drawing_fields(title="x", size={"w": -1, "h": "tall"})

        assert exc_info.value.issues == [
            ("size.w", "Number must be greater than 0"),
            ("size.h", "Expected number"),
        ]

    def test_bool_is_not_a_number(self) -> None:
        """Test that booleans are rejected as sizes."""
        with pytest.raises(InvalidDrawingError):
            validate_drawing_fields(title="x", size={"w": True, "h": 1})

    def test_empty_title(self) -> None:
        """Test that an empty title is rejected even in partial mode."""
        with pytest.raises(InvalidDrawingError):
            validate_drawing_fields(title="", partial=True)


class TestDrawing:
    """Tests for the Drawing model."""

    def test_defaults(self) -> None:
        """Test default values."""
        drawing = Drawing(title="Board", size=Size(w=10, h=20))

        assert drawing.background == "#ffffff"
        assert drawing.strokes == []
        assert drawing.created_at.tzinfo is not None

    def test_body_and_summary(self, sample_drawing: Drawing) -> None:
        """Test the stored and listed projections."""
        assert sample_drawing.body() == {
            "title": "Whiteboard",
            "size": {"w": 1280, "h": 720},
            "background": "#fafafa",
            "strokes": sample_drawing.strokes,
        }
        summary = sample_drawing.summary()
        assert summary["id"] == str(sample_drawing.id)
        assert summary["created_at"] == sample_drawing.created_at.isoformat()

    def test_from_body(self, sample_drawing: Drawing) -> None:
        """Test rebuilding a drawing from its body."""
        rebuilt = Drawing.from_body(sample_drawing.body(), id=sample_drawing.id)

        assert rebuilt.id == sample_drawing.id
        assert rebuilt.body() == sample_drawing.body()

    def test_from_empty_body(self) -> None:
        """Test the fallbacks for a sparse body."""
        drawing = Drawing.from_body({})

        assert drawing.title == DEFAULT_TITLE
        assert drawing.size == Size(w=1, h=1)


class TestDrawingService:
    """Tests for DrawingService."""

    @pytest.mark.asyncio
    async def test_create_validates(self, service: DrawingService) -> None:
        """Test that invalid payloads never reach storage."""
        with pytest.raises(InvalidDrawingError):
            await service.create_drawing(title="x", size={"w": 0, "h": 1})

        assert (await service.stats())["count"] == 0

    @pytest.mark.asyncio
    async def test_update_merges(self, service: DrawingService) -> None:
        """Test that only provided fields change."""
        created = await service.create_drawing(title="Board", size={"w": 4, "h": 3}, strokes=["a"])

        updated = await service.update_drawing(created.id, size={"w": 8, "h": 6})

        assert updated.title == "Board"
        assert updated.size == Size(w=8, h=6)
        assert updated.strokes == ["a"]

    @pytest.mark.asyncio
    async def test_get_missing(self, service: DrawingService) -> None:
        """Test that unknown IDs raise."""
        with pytest.raises(DrawingNotFoundError):
            await service.get_drawing(uuid4())
        with pytest.raises(DrawingNotFoundError):
            await service.update_drawing(uuid4(), title="x")

    @pytest.mark.asyncio
    async def test_stats(self, service: DrawingService) -> None:
        """Test the statistics projection."""
        assert await service.stats() == {"count": 0, "lastUpdated": None}

        created = await service.create_drawing(title="Board", size={"w": 1, "h": 1})

        assert await service.stats() == {"count": 1, "lastUpdated": created.updated_at.isoformat()}

    @pytest.mark.asyncio
    async def test_save_room_defaults(self, service: DrawingService) -> None:
        """Test saving a room without metadata."""
        room = Room("studio-123")
        room.doc.get("strokes", type=Array).append("s1")

        saved = await service.save_room(room)

        assert saved.title == "studio-123"
        assert saved.size == Size(w=1280, h=720)
        assert saved.strokes == ["s1"]

    @pytest.mark.asyncio
    async def test_save_room_uses_meta(self, service: DrawingService) -> None:
        """Test that the room's meta map and explicit arguments are honoured."""
        room = Room("studio-123")
        meta = room.doc.get("meta", type=Map)
        meta["title"] = "Poster"
        meta["background"] = "#101010"

        from_meta = await service.save_room(room)
        overridden = await service.save_room(room, title="Override")

        assert from_meta.title == "Poster"
        assert from_meta.background == "#101010"
        assert overridden.title == "Override"


class TestPngDataUrl:
    """Tests for is_png_data_url."""

    def test_accepts_png(self) -> None:
        assert is_png_data_url("data:image/png;base64,AAAA")

    def test_rejects_others(self) -> None:
        assert not is_png_data_url("data:image/jpeg;base64,AAAA")
        assert not is_png_data_url("")
        assert not is_png_data_url(None)
