"""Command and reply frame encoding for the VC0706 serial protocol.

Command layout::

    +------+--------+---------+--------+------------------+
    | Sync | Serial | Opcode  | Length |     Payload      |
    | 0x56 | 1 byte | 1 byte  | 1 byte | 0-16 bytes       |
    +------+--------+---------+--------+------------------+

Reply layout::

    +------+--------+---------+--------+--------+------------------+
    | Sync | Serial | Opcode  | Status | Length |     Payload      |
    | 0x76 | 1 byte | 1 byte  | 1 byte | 1 byte | 0-16 bytes       |
    +------+--------+---------+--------+--------+------------------+

Frame buffer reads are the exception: image data comes back sandwiched
between two empty success replies for the read opcode::

    [76 00 32 00 00] [image data ...] [76 00 32 00 00]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from ..exceptions import (
    DeviceStatusError,
    FrameIntegrityError,
    TruncatedReplyError,
    UnexpectedOpcodeError,
    WrongSerialNumberError,
    WrongSyncError,
)

SEND_SYNC = 0x56
REPLY_SYNC = 0x76
SERIAL_NUMBER = 0x00

COMMAND_HEADER_SIZE = 4
REPLY_HEADER_SIZE = 5
MAX_PAYLOAD = 0xFF  # length field is a single byte


class Status(IntEnum):
    """Reply status codes."""

    SUCCESS = 0x00
    NOT_RECEIVED = 0x01
    DATA_LEN_ERROR = 0x02
    DATA_FMT_ERROR = 0x03
    CMD_NOT_EXEC = 0x04
    CMD_EXEC_ERROR = 0x05


@dataclass(frozen=True)
class Reply:
    """A validated reply frame."""

    opcode: int
    status: int
    payload: bytes
    raw: bytes = field(default=b"", repr=False)

    def __repr__(self) -> str:
        return (
            f"Reply(opcode=0x{self.opcode:02X}, status=0x{self.status:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def _check_payload(payload: bytes) -> None:
    if len(payload) > MAX_PAYLOAD:
        raise ValueError(
            f"Payload must be at most {MAX_PAYLOAD} bytes, got {len(payload)}"
        )


def encode_command(opcode: int, payload: bytes = b"") -> bytes:
    """Build a command frame.

    Args:
        opcode: Single-byte command identifier.
        payload: Command-specific payload bytes.

    Raises:
        ValueError: If the payload does not fit the one-byte length field.
    """
    _check_payload(payload)
    return bytes([SEND_SYNC, SERIAL_NUMBER, opcode, len(payload)]) + bytes(payload)


def encode_simple_command(opcode: int) -> bytes:
    """Build a command frame with an empty payload."""
    return encode_command(opcode)


def encode_reply(opcode: int, status: int = Status.SUCCESS, payload: bytes = b"") -> bytes:
    """Build a reply frame as the camera would send it."""
    _check_payload(payload)
    return (
        bytes([REPLY_SYNC, SERIAL_NUMBER, opcode, status, len(payload)])
        + bytes(payload)
    )


def encode_simple_reply(opcode: int) -> bytes:
    """Build the empty success reply for ``opcode``."""
    return encode_reply(opcode)


def decode_and_check_reply(expected_opcode: int, data: bytes) -> Reply:
    """Validate a reply frame and extract its payload.

    Fields are checked in wire order and each check only runs if its byte
    arrived, so a short read reports the first bad field it contains.

    Raises:
        WrongSyncError: Byte 0 is not the reply marker.
        WrongSerialNumberError: Byte 1 is not this driver's serial number.
        UnexpectedOpcodeError: Byte 2 does not match ``expected_opcode``.
        DeviceStatusError: Byte 3 is not ``Status.SUCCESS``.
        TruncatedReplyError: All present bytes were fine but the header is
            incomplete.
    """
    data = bytes(data)
    n = len(data)
    if n > 0 and data[0] != REPLY_SYNC:
        raise WrongSyncError(data[0])
    if n > 1 and data[1] != SERIAL_NUMBER:
        raise WrongSerialNumberError(data[1])
    if n > 2 and data[2] != expected_opcode:
        raise UnexpectedOpcodeError(expected_opcode, data[2])
    if n > 3 and data[3] != Status.SUCCESS:
        raise DeviceStatusError(data[3])
    if n < REPLY_HEADER_SIZE:
        raise TruncatedReplyError(REPLY_HEADER_SIZE, n)

    length = data[4]
    payload = data[REPLY_HEADER_SIZE : REPLY_HEADER_SIZE + length]
    return Reply(opcode=data[2], status=data[3], payload=payload, raw=data)


def verify_chunk_frame(opcode: int, frame: bytes, length: int) -> bytes:
    """Check the framing around one frame buffer chunk and return its data.

    Args:
        opcode: The read opcode the chunk answers.
        frame: Raw bytes read from the channel.
        length: Number of image bytes requested.

    Raises:
        FrameIntegrityError: The frame is the wrong size, or its header or
            trailer differ from the empty success reply for ``opcode``.
    """
    expected_size = REPLY_HEADER_SIZE + length + REPLY_HEADER_SIZE
    if len(frame) != expected_size:
        raise FrameIntegrityError(
            f"Chunk is {len(frame)} bytes, expected {expected_size}"
        )
    marker = encode_simple_reply(opcode)
    header = bytes(frame[:REPLY_HEADER_SIZE])
    trailer = bytes(frame[-REPLY_HEADER_SIZE:])
    if header != marker or trailer != marker:
        raise FrameIntegrityError(
            f"Chunk framing is incorrect: header={header.hex(' ')} "
            f"trailer={trailer.hex(' ')}"
        )
    return bytes(frame[REPLY_HEADER_SIZE : REPLY_HEADER_SIZE + length])
