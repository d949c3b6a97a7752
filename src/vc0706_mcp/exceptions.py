"""Exception types raised by the driver."""

from __future__ import annotations


class CameraError(Exception):
    """Base class for all driver errors."""


class ChannelError(CameraError):
    """Reading from or writing to the serial channel failed."""


class ProtocolError(CameraError):
    """A reply from the camera failed validation."""


class WrongSyncError(ProtocolError):
    """First reply byte is not the reply marker."""

    def __init__(self, got: int) -> None:
        self.got = got
        super().__init__(f"0x{got:02X} is not a reply marker")


class WrongSerialNumberError(ProtocolError):
    """Reply carries a serial number other than the one this driver uses."""

    def __init__(self, got: int) -> None:
        self.got = got
        super().__init__(f"Unexpected serial number 0x{got:02X}")


class UnexpectedOpcodeError(ProtocolError):
    """Reply answers a different command than the one sent."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Expected opcode 0x{expected:02X}, got 0x{got:02X}")


class DeviceStatusError(ProtocolError):
    """Camera reported a non-success status code."""

    def __init__(self, status: int) -> None:
        self.status = status
        super().__init__(f"Device returned error status 0x{status:02X}")


class TruncatedReplyError(ProtocolError):
    """Fewer reply bytes arrived than the reply layout requires."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Reply truncated: expected {expected} bytes, got {got}")


class FrameIntegrityError(ProtocolError):
    """Header or trailer of a frame buffer chunk is corrupt."""


class TooManyRetriesError(CameraError):
    """Chunk transfer kept failing integrity checks and was abandoned.

    ``attempts`` counts failed chunk reads across the whole transfer;
    ``offset`` is where the last one happened.
    """

    def __init__(self, offset: int, attempts: int) -> None:
        self.offset = offset
        self.attempts = attempts
        super().__init__(
            f"Gave up reading frame buffer at offset {offset}: "
            f"{attempts} chunk reads failed in this transfer"
        )


__all__ = [
    "CameraError",
    "ChannelError",
    "ProtocolError",
    "WrongSyncError",
    "WrongSerialNumberError",
    "UnexpectedOpcodeError",
    "DeviceStatusError",
    "TruncatedReplyError",
    "FrameIntegrityError",
    "TooManyRetriesError",
]
