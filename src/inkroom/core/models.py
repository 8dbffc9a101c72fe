"""Domain models for saved drawings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from inkroom.exceptions import InvalidDrawingError

DEFAULT_TITLE = "(untitled)"


@dataclass
class Size:
    """Drawing surface dimensions.

    Attributes:
        w: Width, strictly positive.
        h: Height, strictly positive.
    """

    w: float
    h: float

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary for serialization."""
        return {"w": self.w, "h": self.h}


@dataclass
class Drawing:
    """A persisted drawing.

    Strokes are opaque to the server; whatever the client put in the shared
    document is stored as-is.

    Attributes:
        id: Unique identifier.
        title: Display title.
        size: Surface dimensions.
        background: Background colour or pattern, client-defined.
        strokes: Stroke records, client-defined.
        created_at: Creation timestamp.
        updated_at: Last modification timestamp.
    """

    title: str
    size: Size
    background: str = "#ffffff"
    strokes: list[Any] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def body(self) -> dict[str, Any]:
        """The stored document: title, size, background and strokes."""
        return {
            "title": self.title,
            "size": self.size.to_dict(),
            "background": self.background,
            "strokes": self.strokes,
        }

    def summary(self) -> dict[str, Any]:
        """The listing projection used by ``GET /api/drawings``."""
        return {
            "id": str(self.id),
            "title": self.title,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_body(cls, body: dict[str, Any], **extra: Any) -> Drawing:
        """Build a drawing from a stored document body.

        Args:
            body: A dict as returned by :meth:`body`.
            **extra: ``id``, ``created_at`` and ``updated_at`` overrides.

        Returns:
            The drawing.
        """
        size = body.get("size") or {}
        return cls(
            title=body.get("title") or DEFAULT_TITLE,
            size=Size(w=size.get("w", 1), h=size.get("h", 1)),
            background=body.get("background", "#ffffff"),
            strokes=list(body.get("strokes") or []),
            **extra,
        )


def validate_drawing_fields(
    *,
    title: str | None = None,
    size: dict[str, Any] | None = None,
    partial: bool = False,
) -> None:
    """Check the domain rules a decoded payload must satisfy.

    Args:
        title: The title, required and non-empty unless ``partial``.
        size: The size mapping; both sides must be positive numbers.
        partial: Whether omitted fields are allowed.

    Raises:
        InvalidDrawingError: If any rule is broken.
    """
    issues: list[tuple[str, str]] = []
    if title is None:
        if not partial:
            issues.append(("title", "Required"))
    elif not title:
        issues.append(("title", "String must contain at least 1 character(s)"))

    if size is None:
        if not partial:
            issues.append(("size", "Required"))
    else:
        for side in ("w", "h"):
            value = size.get(side)
            if isinstance(value, bool) or not isinstance(value, int | float):
                issues.append((f"size.{side}", "Expected number"))
            elif value <= 0:
                issues.append((f"size.{side}", "Number must be greater than 0"))

    if issues:
        raise InvalidDrawingError(issues)
