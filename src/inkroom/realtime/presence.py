"""Presence (awareness) handling for rooms."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from pycrdt import Decoder

from inkroom.exceptions import ProtocolError
from inkroom.realtime.protocol import encode_awareness, read_awareness_payload

if TYPE_CHECKING:
    from inkroom.realtime.manager import Connection
    from inkroom.realtime.room import PresenceChange, Room

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PresenceDelta:
    """An encoded awareness frame ready to fan out.

    Attributes:
        client_ids: Client ids covered by the frame.
        message: The complete awareness frame.
        origin: Id of the connection that caused the change, or None when the
            server did (disconnect cleanup). The origin never receives it.
    """

    client_ids: list[int]
    message: bytes
    origin: str | None = None


def _encode_change(room: Room, change: PresenceChange) -> PresenceDelta:
    client_ids = change.client_ids
    payload = room.awareness.encode_awareness_update(client_ids)
    origin = change.origin if isinstance(change.origin, str) else None
    return PresenceDelta(client_ids=client_ids, message=encode_awareness(payload), origin=origin)


def _check_awareness_update(payload: bytes) -> None:
    """Decode every entry of an awareness update without applying it.

    The presence set applies entries one by one and only reports them once
    all are in, so a bad entry after a good one must be caught up front.

    Raises:
        ProtocolError: If any entry is truncated or its state is not JSON.
    """
    decoder = Decoder(payload)
    try:
        for _ in range(decoder.read_var_uint()):
            decoder.read_var_uint()
            decoder.read_var_uint()
            state = decoder.read_var_string()
            if decoder.length < 0:
                msg = "Truncated awareness entry"
                raise ProtocolError(msg)
            if state:
                json.loads(state)
    except (IndexError, RuntimeError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        msg = "Malformed awareness update"
        raise ProtocolError(msg) from exc


def apply_presence_update(room: Room, body: bytes, connection: Connection) -> list[PresenceDelta]:
    """Apply an awareness frame body from ``connection`` to the room presence set.

    Client ids the update announces with a live state become controlled by the
    connection, so they can be dropped when it disconnects.

    Args:
        room: The room the connection is bound to.
        body: The frame body after the message-kind tag.
        connection: The sending connection; recorded as the change origin.

    Returns:
        One delta per awareness change event, covering exactly the changed ids.

    Raises:
        ProtocolError: If the body cannot be decoded.
    """
    payload = read_awareness_payload(body)
    _check_awareness_update(payload)
    room.drain_presence_changes()
    try:
        room.awareness.apply_awareness_update(payload, connection.id)
    except (IndexError, RuntimeError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        room.drain_presence_changes()
        msg = "Malformed awareness update"
        raise ProtocolError(msg) from exc

    deltas = []
    for change in room.drain_presence_changes():
        if change.origin == connection.id:
            connection.client_ids.update(change.added)
            connection.client_ids.update(change.updated)
            connection.client_ids.difference_update(change.removed)
        deltas.append(_encode_change(room, change))
    return deltas


def full_snapshot(room: Room) -> bytes:
    """Encode every known client's presence as a single awareness frame.

    The frame is produced even when the presence set is empty.
    """
    client_ids = list(room.awareness.states)
    return encode_awareness(room.awareness.encode_awareness_update(client_ids))


def remove_connection_presence(room: Room, connection: Connection) -> list[PresenceDelta]:
    """Drop every presence entry controlled by ``connection``.

    Returns:
        Removal deltas with no origin, meant for all remaining connections.
    """
    client_ids = [client_id for client_id in connection.client_ids if client_id in room.awareness.states]
    connection.client_ids.clear()
    if not client_ids:
        return []

    room.drain_presence_changes()
    room.awareness.remove_awareness_states(client_ids, None)
    deltas = [_encode_change(room, change) for change in room.drain_presence_changes()]
    logger.debug("Presence removed", room=room.name, connection_id=connection.id, client_ids=client_ids)
    return deltas
