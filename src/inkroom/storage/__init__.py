"""Storage backends for inkroom."""

from __future__ import annotations

from typing import TYPE_CHECKING

from inkroom.storage.base import StorageProtocol
from inkroom.storage.memory import InMemoryStorage

if TYPE_CHECKING:
    from inkroom.storage.db import DatabaseStorage

__all__ = ["DatabaseStorage", "InMemoryStorage", "StorageProtocol"]


def __getattr__(name: str) -> object:
    """Lazy import DatabaseStorage so the database stack loads only when used."""
    if name == "DatabaseStorage":
        from inkroom.storage.db import DatabaseStorage

        return DatabaseStorage
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
