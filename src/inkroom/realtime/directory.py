"""Read-only room directory for monitoring views."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Collection

    from inkroom.realtime.room import Room, RoomRegistry

PLACEHOLDER_NAMES = frozenset({"user", "guest"})
DEFAULT_PEER_COLOR = "#999"


def is_placeholder_name(name: str, placeholders: Collection[str] = PLACEHOLDER_NAMES) -> bool:
    """Check whether a display name counts as anonymous.

    Args:
        name: The display name, untrimmed.
        placeholders: Reserved lower-case names.

    Returns:
        True for empty names and reserved names in any case.
    """
    trimmed = name.strip()
    return not trimmed or trimmed.lower() in placeholders


def room_peers(room: Room, placeholders: Collection[str] = PLACEHOLDER_NAMES) -> list[dict[str, Any]]:
    """Project a room's presence set into ``{id, name, color}`` entries.

    Entries without a real display name are left out.
    """
    peers = []
    for client_id, state in room.presence_states.items():
        entry = state if isinstance(state, dict) else {}
        name = entry.get("name")
        if not isinstance(name, str) or is_placeholder_name(name, placeholders):
            continue
        peers.append({"id": client_id, "name": name.strip(), "color": entry.get("color") or DEFAULT_PEER_COLOR})
    return peers


def list_rooms(registry: RoomRegistry, placeholders: Collection[str] = PLACEHOLDER_NAMES) -> list[dict[str, Any]]:
    """List every room with its named peers.

    Reads the live presence sets on every call.

    Args:
        registry: The room registry.
        placeholders: Reserved lower-case names to filter out.

    Returns:
        ``[{"name": ..., "peers": [{"id", "name", "color"}, ...]}, ...]``
    """
    return [{"name": room.name, "peers": room_peers(room, placeholders)} for room in registry.rooms()]
