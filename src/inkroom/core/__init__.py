"""Core domain models and application plumbing for inkroom."""

from inkroom.core.models import Drawing, Size, validate_drawing_fields

__all__ = ["Drawing", "Size", "validate_drawing_fields"]
