"""Document reconciliation for rooms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pycrdt import YSyncMessageType
from pycrdt import handle_sync_message as apply_sync_message

from inkroom.exceptions import ProtocolError
from inkroom.realtime.protocol import encode_document_update, unwrap_sync_payload

if TYPE_CHECKING:
    from inkroom.realtime.room import Room


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync message.

    Attributes:
        reply: Frame to send back to the sender only (sync step 2), if any.
        updates: Document updates the message applied, already framed for
            relaying to every other connection in the room.
    """

    reply: bytes | None = None
    updates: list[bytes] = field(default_factory=list)


def handle_sync_message(room: Room, body: bytes) -> SyncResult:
    """Apply a sync frame body to the room document.

    A step 1 request yields a step 2 reply carrying whatever the sender is
    missing. Step 2 and update frames are merged into the document; the
    resulting changes are returned for fan-out. Duplicate updates merge to
    nothing and produce no relay frames.

    Args:
        room: The room the sender is bound to.
        body: The frame body after the message-kind tag.

    Returns:
        The reply for the sender and the frames to relay.

    Raises:
        ProtocolError: If the body is malformed or the update cannot be applied.
    """
    unwrap_sync_payload(body)
    if body[0] not in YSyncMessageType._value2member_map_:
        msg = f"Unknown sync step: {body[0]}"
        raise ProtocolError(msg)

    room.drain_document_updates()
    try:
        reply = apply_sync_message(body, room.doc)
    except Exception as exc:  # noqa: BLE001
        room.drain_document_updates()
        msg = "Could not apply sync message"
        raise ProtocolError(msg) from exc

    updates = [encode_document_update(update) for update in room.drain_document_updates()]
    return SyncResult(reply=reply, updates=updates)
