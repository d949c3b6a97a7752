"""Single request/response exchange with the camera.

The camera has no ready signal, so every exchange is: write the command,
sleep a fixed settle delay tuned per command, then read the reply in one
go. Nothing here retries.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

from ..exceptions import ChannelError, ProtocolError
from ..protocol.framing import Reply, decode_and_check_reply

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """Byte-oriented duplex channel with no framing of its own."""

    def write(self, data: bytes) -> int: ...

    def read(self, size: int) -> bytes: ...


def discard_input(channel: Channel) -> None:
    """Drop unread input if the channel supports it.

    Channels may provide ``reset_input_buffer()`` (pyserial does); those
    that do not are left alone.

    Raises:
        ChannelError: If discarding fails with an I/O error.
    """
    reset = getattr(channel, "reset_input_buffer", None)
    if reset is None:
        return
    try:
        reset()
    except OSError as e:
        logger.warning("Could not discard input: %s", e)
        raise ChannelError(f"Could not discard input: {e}") from e
    logger.debug("Discarded unread input")


def exchange(
    channel: Channel,
    command: bytes,
    expected_reply_len: int,
    settle_delay: float,
) -> bytes:
    """Write ``command``, wait ``settle_delay`` seconds, and read the reply.

    Returns:
        Whatever arrived, at most ``expected_reply_len`` bytes.

    Raises:
        ChannelError: On an I/O error or a short write.
    """
    logger.debug("TX %s", command.hex(" "))
    try:
        written = channel.write(command)
    except OSError as e:
        logger.warning("Write failed: %s", e)
        raise ChannelError(f"Write failed: {e}") from e
    if written is not None and written != len(command):
        logger.warning("Short write: %d of %d bytes", written, len(command))
        raise ChannelError(f"Short write: {written} of {len(command)} bytes")

    time.sleep(settle_delay)

    try:
        data = bytes(channel.read(expected_reply_len))
    except OSError as e:
        logger.warning("Read failed: %s", e)
        raise ChannelError(f"Read failed: {e}") from e
    if len(data) < expected_reply_len:
        logger.debug("Short read: %d of %d bytes", len(data), expected_reply_len)
    logger.debug("RX %s", data.hex(" ") if data else "(empty)")
    return data


def run_transaction(
    channel: Channel,
    command: bytes,
    expected_reply_len: int,
    settle_delay: float,
) -> Reply:
    """Run one command and validate its reply against the command's opcode.

    Args:
        channel: Open duplex channel.
        command: Encoded command frame.
        expected_reply_len: Maximum number of reply bytes to read.
        settle_delay: Seconds to wait between write and read.

    Raises:
        ChannelError: On I/O failure.
        ProtocolError: If reply validation fails.
    """
    data = exchange(channel, command, expected_reply_len, settle_delay)
    try:
        return decode_and_check_reply(command[2], data)
    except ProtocolError as e:
        logger.warning("Bad reply to opcode 0x%02X: %s", command[2], e)
        raise
