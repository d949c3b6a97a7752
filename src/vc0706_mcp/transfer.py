"""Frame buffer transfer: capture a frame and pull it out in chunks.

::

    IDLE -> AWAITING_CAPTURE -> LENGTH_KNOWN -> TRANSFERRING -> DONE

Any step before DONE can end in FAILED.

Each chunk comes back wrapped in an empty success reply on both sides.
A chunk whose wrapping is corrupt is requested again at the same offset;
failures draw on one retry budget shared by the whole transfer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .config import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_CHUNK_ATTEMPTS
from .exceptions import ProtocolError, TooManyRetriesError
from .protocol.commands import (
    Opcode,
    build_get_buffer_length,
    build_read_buffer,
    build_take_photo,
)
from .protocol.framing import REPLY_HEADER_SIZE, verify_chunk_frame
from .protocol.parser import parse_buffer_length
from .transport.transaction import Channel, discard_input, run_transaction

logger = logging.getLogger(__name__)

TAKE_PHOTO_REPLY_LEN = 5
TAKE_PHOTO_DELAY = 5.0
BUFFER_LEN_REPLY_LEN = 9
BUFFER_LEN_DELAY = 0.5
READ_BUFFER_DELAY = 0.5


class TransferState(Enum):
    IDLE = "idle"
    AWAITING_CAPTURE = "awaiting_capture"
    LENGTH_KNOWN = "length_known"
    TRANSFERRING = "transferring"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TransferSession:
    """Progress of one transfer."""

    total_length: int = 0
    cursor: int = 0
    retries_remaining: int = DEFAULT_MAX_CHUNK_ATTEMPTS

    @property
    def remaining(self) -> int:
        return max(self.total_length - self.cursor, 0)

    def next_chunk_length(self, chunk_size: int) -> int:
        return min(chunk_size, self.remaining)


class BufferTransfer:
    """Runs one capture-and-download cycle over a channel.

    A ``BufferTransfer`` is single use: build one per photo.
    """

    def __init__(
        self,
        channel: Channel,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_attempts: int = DEFAULT_MAX_CHUNK_ATTEMPTS,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")
        if max_attempts <= 0:
            raise ValueError(f"Max attempts must be positive, got {max_attempts}")
        self._channel = channel
        self._chunk_size = chunk_size
        self._max_attempts = max_attempts
        self._state = TransferState.IDLE
        self._session = TransferSession(retries_remaining=max_attempts)
        self.error: Exception | None = None

    @property
    def state(self) -> TransferState:
        return self._state

    @property
    def session(self) -> TransferSession:
        return self._session

    def _advance(self, state: TransferState) -> None:
        logger.debug("Transfer %s -> %s", self._state.value, state.value)
        self._state = state

    def run(self) -> bytes:
        """Capture the current frame and return its JPEG bytes.

        Raises:
            ChannelError: On any I/O failure (never retried).
            ProtocolError: If the capture or length query is rejected.
            TooManyRetriesError: If chunk reads exhaust the retry budget.
        """
        if self._state is not TransferState.IDLE:
            raise RuntimeError("BufferTransfer instances are single use")
        try:
            self._capture()
            self._read_length()
            image = self._transfer()
        except Exception as e:
            self.error = e
            self._advance(TransferState.FAILED)
            raise
        self._advance(TransferState.DONE)
        return image

    def _capture(self) -> None:
        run_transaction(
            self._channel, build_take_photo(), TAKE_PHOTO_REPLY_LEN, TAKE_PHOTO_DELAY
        )
        self._advance(TransferState.AWAITING_CAPTURE)

    def _read_length(self) -> None:
        reply = run_transaction(
            self._channel,
            build_get_buffer_length(),
            BUFFER_LEN_REPLY_LEN,
            BUFFER_LEN_DELAY,
        )
        self._session.total_length = parse_buffer_length(reply)
        logger.info("Frame buffer holds %d bytes", self._session.total_length)
        self._advance(TransferState.LENGTH_KNOWN)

    def _transfer(self) -> bytes:
        session = self._session
        image = bytearray()
        self._advance(TransferState.TRANSFERRING)

        while session.cursor < session.total_length:
            length = session.next_chunk_length(self._chunk_size)
            try:
                chunk = self._read_chunk(session.cursor, length)
            except ProtocolError as e:
                session.retries_remaining -= 1
                logger.warning(
                    "Chunk at offset %d failed: %s (%d retries left)",
                    session.cursor,
                    e,
                    session.retries_remaining,
                )
                if session.retries_remaining <= 0:
                    raise TooManyRetriesError(session.cursor, self._max_attempts) from e
                # Leftover bytes from the bad reply would shift the next one
                discard_input(self._channel)
                continue
            image += chunk
            session.cursor += length

        return bytes(image)

    def _read_chunk(self, offset: int, length: int) -> bytes:
        reply = run_transaction(
            self._channel,
            build_read_buffer(offset, length),
            REPLY_HEADER_SIZE + length + REPLY_HEADER_SIZE,
            READ_BUFFER_DELAY,
        )
        return verify_chunk_frame(Opcode.READ_FBUF, reply.raw, length)


def take_photo(
    channel: Channel,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_attempts: int = DEFAULT_MAX_CHUNK_ATTEMPTS,
) -> bytes:
    """Capture a frame and download it from the camera's frame buffer."""
    return BufferTransfer(channel, chunk_size, max_attempts).run()
