"""SQLAlchemy models for inkroom database storage."""

from __future__ import annotations

from typing import Any

from advanced_alchemy.base import UUIDAuditBase
from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from inkroom.core.models import Drawing


class DrawingModel(UUIDAuditBase):
    """SQLAlchemy model for saved drawings.

    The whole drawing document lives in one JSON column; the title is
    duplicated into its own column for listings.

    Attributes:
        id: UUID primary key (from UUIDAuditBase).
        title: Display title.
        body: JSON document with title, size, background and strokes.
        created_at: Creation timestamp (from UUIDAuditBase).
        updated_at: Last update timestamp (from UUIDAuditBase).
    """

    __tablename__ = "drawings"

    title: Mapped[str] = mapped_column(String(255), default="(untitled)")
    body: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)


def drawing_to_model(drawing: Drawing) -> DrawingModel:
    """Convert a domain drawing to a new ORM row."""
    return DrawingModel(
        id=drawing.id,
        title=drawing.title,
        body=drawing.body(),
        created_at=drawing.created_at,
        updated_at=drawing.updated_at,
    )


def drawing_from_model(model: DrawingModel) -> Drawing:
    """Convert an ORM row back to a domain drawing."""
    return Drawing.from_body(
        model.body,
        id=model.id,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
