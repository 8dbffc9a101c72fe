"""Binary framing for the real-time endpoint.

Every frame starts with a varuint message-kind tag followed by a kind-specific
body. The body is handed to pycrdt untouched; the relay never looks inside
document updates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from pycrdt import Decoder, create_awareness_message, create_sync_message, create_update_message, read_message

from inkroom.exceptions import ProtocolError

if TYPE_CHECKING:
    from pycrdt import Doc


class MessageKind(IntEnum):
    """Leading tag of every real-time frame."""

    SYNC = 0
    AWARENESS = 1


@dataclass(frozen=True)
class IncomingMessage:
    """A decoded frame: its kind tag and the undecoded remainder."""

    kind: int
    body: bytes

    @property
    def known(self) -> bool:
        """Whether the tag names a kind the relay handles."""
        return self.kind in MessageKind._value2member_map_


def decode_message(data: bytes) -> IncomingMessage:
    """Split a frame into its kind tag and body.

    Args:
        data: Raw bytes received from the socket.

    Returns:
        The decoded frame.

    Raises:
        ProtocolError: If the frame is empty or the tag is truncated.
    """
    if not data:
        msg = "Empty frame"
        raise ProtocolError(msg)
    decoder = Decoder(data)
    try:
        kind = decoder.read_var_uint()
    except (IndexError, RuntimeError) as exc:
        msg = "Truncated message-kind tag"
        raise ProtocolError(msg) from exc
    return IncomingMessage(kind=kind, body=bytes(data[decoder.i0 :]))


def read_awareness_payload(body: bytes) -> bytes:
    """Unwrap the length-prefixed awareness update carried by an awareness frame.

    Raises:
        ProtocolError: If the body is empty or shorter than its length prefix.
    """
    decoder = Decoder(body)
    try:
        payload = decoder.read_message()
    except (IndexError, RuntimeError) as exc:
        msg = "Malformed awareness frame"
        raise ProtocolError(msg) from exc
    if payload is None or decoder.length < 0:
        msg = "Malformed awareness frame"
        raise ProtocolError(msg)
    return bytes(payload)


def encode_sync_request(doc: Doc) -> bytes:
    """Build the reconciliation request (sync step 1) for ``doc``."""
    return create_sync_message(doc)


def encode_document_update(update: bytes) -> bytes:
    """Wrap an applied document update for relaying to other peers."""
    return create_update_message(update)


def encode_awareness(payload: bytes) -> bytes:
    """Wrap an encoded awareness update in an awareness frame."""
    return create_awareness_message(payload)


def unwrap_sync_payload(body: bytes) -> bytes:
    """Return the update or state vector carried by a sync body.

    The first byte of a sync body is the sync step, the rest is a
    length-prefixed payload.

    Raises:
        ProtocolError: If the body is too short.
    """
    if len(body) < 2:
        msg = "Sync frame too short"
        raise ProtocolError(msg)
    try:
        return bytes(read_message(body[1:]))
    except (AssertionError, IndexError, RuntimeError) as exc:
        msg = "Malformed sync frame"
        raise ProtocolError(msg) from exc
