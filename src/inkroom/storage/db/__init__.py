"""SQLAlchemy persistence for saved drawings.

Used when the app is started with a database URL; otherwise drawings stay in
memory.
"""

from __future__ import annotations

from inkroom.storage.db.models import DrawingModel
from inkroom.storage.db.setup import DatabaseManager, normalize_database_url
from inkroom.storage.db.storage import DatabaseStorage

__all__ = ["DatabaseManager", "DatabaseStorage", "DrawingModel", "normalize_database_url"]
