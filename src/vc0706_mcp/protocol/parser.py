"""Payload parsing for camera replies."""

from __future__ import annotations

from .framing import REPLY_HEADER_SIZE, Reply
from ..exceptions import TruncatedReplyError

BUFFER_LENGTH_SIZE = 4


def parse_version(reply: Reply) -> str:
    """Decode the firmware version string from a GET_VERSION reply.

    The version is whatever text follows the 5-byte reply header, e.g.
    ``"VC0703 1.00"``.
    """
    text = reply.raw[REPLY_HEADER_SIZE:] if reply.raw else reply.payload
    return text.decode("ascii", errors="replace").rstrip("\x00").strip()


def parse_buffer_length(reply: Reply) -> int:
    """Decode the 4-byte big-endian frame buffer length.

    Raises:
        TruncatedReplyError: If fewer than four length bytes arrived.
    """
    data = reply.payload[:BUFFER_LENGTH_SIZE]
    if len(data) < BUFFER_LENGTH_SIZE:
        raise TruncatedReplyError(
            REPLY_HEADER_SIZE + BUFFER_LENGTH_SIZE,
            REPLY_HEADER_SIZE + len(reply.payload),
        )
    return int.from_bytes(data, "big")
