"""Room state and the process-wide room registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pycrdt import Array, Awareness, Doc, Map

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pycrdt import TransactionEvent

    from inkroom.realtime.manager import Connection

logger = structlog.get_logger(__name__)

# Empty update emitted by yrs when a transaction changed nothing.
EMPTY_UPDATE = b"\x00\x00"


@dataclass
class PresenceChange:
    """Client ids touched by one awareness ``update`` event."""

    added: list[int] = field(default_factory=list)
    updated: list[int] = field(default_factory=list)
    removed: list[int] = field(default_factory=list)
    origin: Any = None

    @property
    def client_ids(self) -> list[int]:
        """All changed client ids, in added, updated, removed order."""
        return [*self.added, *self.updated, *self.removed]


class Room:
    """An isolated collaboration session.

    A room owns exactly one shared document and one presence set for the
    lifetime of the process. Connections are tracked by id only; the transport
    layer owns the sockets.

    Attributes:
        name: The room name taken from the connection target.
        doc: The shared pycrdt document.
        awareness: The presence set attached to ``doc``.
        connections: Connected clients keyed by connection id.
        created_at: When the room was first referenced.
    """

    def __init__(self, name: str) -> None:
        """Initialize a room with a fresh document and presence set.

        Args:
            name: The room name.
        """
        self.name = name
        self.doc = Doc()
        self.awareness = Awareness(self.doc)
        self.connections: dict[str, Connection] = {}
        self.created_at = datetime.now(UTC)
        self._doc_updates: list[bytes] = []
        self._presence_changes: list[PresenceChange] = []
        self.doc.observe(self._on_doc_update)
        self.awareness.observe(self._on_presence_event)

    def _on_doc_update(self, event: TransactionEvent) -> None:
        update = event.update
        if update and update != EMPTY_UPDATE:
            self._doc_updates.append(update)

    def _on_presence_event(self, topic: str, payload: tuple[dict[str, Any], Any]) -> None:
        if topic != "update":
            return
        changes, origin = payload
        self._presence_changes.append(
            PresenceChange(
                added=list(changes["added"]),
                updated=list(changes["updated"]),
                removed=list(changes["removed"]),
                origin=origin,
            )
        )

    def drain_document_updates(self) -> list[bytes]:
        """Return and forget the document updates observed since the last drain."""
        updates, self._doc_updates = self._doc_updates, []
        return updates

    def drain_presence_changes(self) -> list[PresenceChange]:
        """Return and forget the presence changes observed since the last drain."""
        changes, self._presence_changes = self._presence_changes, []
        return changes

    def add_connection(self, connection: Connection) -> None:
        """Register a connection as a member of this room."""
        self.connections[connection.id] = connection

    def remove_connection(self, connection: Connection) -> bool:
        """Drop a connection from this room.

        Returns:
            True if the connection was a member, False otherwise.
        """
        return self.connections.pop(connection.id, None) is not None

    def snapshot_connections(self) -> list[Connection]:
        """Copy of the current members, safe to iterate across awaits."""
        return list(self.connections.values())

    @property
    def presence_states(self) -> dict[int, dict[str, Any]]:
        """Current presence entries keyed by client id."""
        return self.awareness.states

    def content(self) -> dict[str, Any]:
        """Current logical document content as plain nested values.

        Returns:
            A dict with the ``strokes`` list and the ``meta`` map, both empty
            when no client has written them yet.
        """
        strokes = self.doc.get("strokes", type=Array).to_py() or []
        meta = self.doc.get("meta", type=Map).to_py() or {}
        return {"strokes": strokes, "meta": meta}

    def __repr__(self) -> str:
        return f"Room(name={self.name!r}, connections={len(self.connections)})"


class RoomRegistry:
    """Process-wide mapping from room name to :class:`Room`.

    Rooms are created lazily on first reference and never evicted. Creation
    never suspends, so two connection setups on the same event loop always
    resolve a name to the same instance.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._rooms: dict[str, Room] = {}

    def get_or_create(self, name: str) -> Room:
        """Return the room called ``name``, creating it on first reference.

        Args:
            name: The room name.

        Returns:
            The single Room instance for ``name``.
        """
        room = self._rooms.get(name)
        if room is None:
            room = Room(name)
            self._rooms[name] = room
            logger.info("Room created", room=name, total_rooms=len(self._rooms))
        return room

    def get(self, name: str) -> Room | None:
        """Return the room called ``name`` without creating it."""
        return self._rooms.get(name)

    def rooms(self) -> list[Room]:
        """All rooms, in creation order."""
        return list(self._rooms.values())

    @property
    def names(self) -> list[str]:
        """Names of all rooms, in creation order."""
        return list(self._rooms)

    def __contains__(self, name: object) -> bool:
        return name in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self.rooms())
