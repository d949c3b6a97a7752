"""Shared fixtures: an in-memory camera and a no-op sleep."""

from __future__ import annotations

import pytest

from vc0706_mcp.protocol.framing import encode_reply, encode_simple_reply

READ_FBUF = 0x32
GET_FBUF_LEN = 0x34
GET_VERSION = 0x11

VERSION_TEXT = b"VC0703 1.00"


class FakeCamera:
    """Answers commands the way a healthy camera would.

    ``corrupt(command, reply)`` may rewrite any reply before it is read.
    With ``fifo=True`` replies queue up like a real UART: bytes a read
    leaves behind stay pending until read or discarded.
    """

    def __init__(
        self,
        image: bytes = b"",
        corrupt=None,
        length: int | None = None,
        fifo: bool = False,
    ):
        self.image = image
        self.length = len(image) if length is None else length
        self.corrupt = corrupt
        self.fifo = fifo
        self.input_resets = 0
        self.writes: list[bytes] = []
        self.read_sizes: list[int] = []
        self._pending = b""

    def write(self, data: bytes) -> int:
        data = bytes(data)
        self.writes.append(data)
        reply = self.respond(data)
        if self.corrupt is not None:
            reply = self.corrupt(data, reply)
        self._pending = self._pending + reply if self.fifo else reply
        return len(data)

    def read(self, size: int) -> bytes:
        self.read_sizes.append(size)
        out = self._pending[:size]
        self._pending = self._pending[size:] if self.fifo else b""
        return out

    def reset_input_buffer(self) -> None:
        self.input_resets += 1
        self._pending = b""

    def respond(self, command: bytes) -> bytes:
        opcode = command[2]
        if opcode == READ_FBUF:
            offset = int.from_bytes(command[6:10], "big")
            length = int.from_bytes(command[10:14], "big")
            marker = encode_simple_reply(READ_FBUF)
            return marker + self.image[offset : offset + length] + marker
        if opcode == GET_FBUF_LEN:
            return encode_reply(GET_FBUF_LEN, 0, self.length.to_bytes(4, "big"))
        if opcode == GET_VERSION:
            return encode_reply(GET_VERSION, 0, VERSION_TEXT)
        return encode_simple_reply(opcode)

    @property
    def chunk_requests(self) -> list[tuple[int, int]]:
        """(offset, length) of every READ_FBUF command sent."""
        return [
            (int.from_bytes(w[6:10], "big"), int.from_bytes(w[10:14], "big"))
            for w in self.writes
            if w[2] == READ_FBUF
        ]


@pytest.fixture
def fake_camera():
    return FakeCamera


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Replace time.sleep so settle delays are recorded, not waited out."""
    calls: list[float] = []
    monkeypatch.setattr(
        "vc0706_mcp.transport.transaction.time.sleep", calls.append
    )
    return calls
