"""Client-side helpers shared by the realtime tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from pycrdt import (
    Array,
    Awareness,
    Decoder,
    Doc,
    Encoder,
    YMessageType,
    create_awareness_message,
    create_sync_message,
    create_update_message,
    handle_sync_message,
    read_message,
)

from inkroom.realtime.manager import Connection


class YjsPeer:
    """A client-side replica speaking the relay's wire format.

    Holds its own document and presence set so tests can build real frames
    and check what the server sent back.
    """

    def __init__(self, name: str | None = None, color: str | None = "#e11d48") -> None:
        self.doc = Doc()
        self.awareness = Awareness(self.doc)
        if name is not None:
            self.set_presence(name=name, color=color)

    @property
    def client_id(self) -> int:
        return self.doc.client_id

    @property
    def strokes(self) -> list[Any]:
        return self.doc.get("strokes", type=Array).to_py() or []

    def set_presence(self, **state: Any) -> None:
        self.awareness.set_local_state({"cursor": None, **state})

    def presence_frame(self) -> bytes:
        return create_awareness_message(self.awareness.encode_awareness_update([self.client_id]))

    def sync_request(self) -> bytes:
        return create_sync_message(self.doc)

    def draw(self, stroke: Any) -> bytes:
        """Append a stroke locally and return the update frame for it."""
        before = self.doc.get_state()
        self.doc.get("strokes", type=Array).append(stroke)
        return create_update_message(self.doc.get_update(before))

    def receive(self, frame: bytes) -> bytes | None:
        """Apply a frame from the server; returns the sync reply, if any."""
        if frame[0] == YMessageType.SYNC:
            return handle_sync_message(frame[1:], self.doc)
        if frame[0] == YMessageType.AWARENESS:
            self.awareness.apply_awareness_update(read_message(frame[1:]), "server")
        return None


def presence_of(frame: bytes) -> dict[int, Any]:
    """Decode an awareness frame into ``{client_id: state}``; None marks a removal."""
    assert frame[0] == YMessageType.AWARENESS
    decoder = Decoder(read_message(frame[1:]))
    states: dict[int, Any] = {}
    for _ in range(decoder.read_var_uint()):
        client_id = decoder.read_var_uint()
        decoder.read_var_uint()
        states[client_id] = json.loads(decoder.read_var_string())
    return states


def awareness_frame(*entries: tuple[int, int, str]) -> bytes:
    """Build an awareness frame from raw ``(client_id, clock, state_json)`` entries."""
    encoder = Encoder()
    encoder.write_var_uint(len(entries))
    for client_id, clock, state in entries:
        encoder.write_var_uint(client_id)
        encoder.write_var_uint(clock)
        encoder.write_var_string(state)
    return create_awareness_message(encoder.to_bytes())


def is_sync_step(frame: bytes, step: int) -> bool:
    """Whether ``frame`` is a document sync frame of the given step."""
    return frame[0] == YMessageType.SYNC and frame[1] == step


def make_socket() -> MagicMock:
    """Create a fake WebSocket recording the frames sent to it."""
    socket = MagicMock()
    socket.send_bytes = AsyncMock()
    return socket


def sent_frames(connection: Connection) -> list[bytes]:
    """Frames sent to a connection's fake socket, oldest first."""
    return [call.args[0] for call in connection.socket.send_bytes.await_args_list]
