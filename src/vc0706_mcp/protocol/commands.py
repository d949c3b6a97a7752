"""Opcode table and high-level command builders.

Every command is identified by a single-byte opcode that the camera
echoes back in its reply.
"""

from __future__ import annotations

from enum import IntEnum

from .framing import encode_command, encode_simple_command


class Opcode(IntEnum):
    """Command opcodes."""

    GET_VERSION = 0x11
    SET_SERIAL_NUMBER = 0x21
    SET_PORT = 0x24
    SYSTEM_RESET = 0x26
    READ_DATA = 0x30
    WRITE_DATA = 0x31
    READ_FBUF = 0x32
    GET_FBUF_LEN = 0x34
    FBUF_CTRL = 0x36
    COMM_MOTION_CTRL = 0x37
    COMM_MOTION_STATUS = 0x38
    COMM_MOTION_DETECTED = 0x39
    COLOR_CTRL = 0x3C
    COLOR_STATUS = 0x3D
    MOTION_CTRL = 0x42
    MOTION_STATUS = 0x43
    TVOUT_CTRL = 0x44
    OSD_ADD_CHAR = 0x45
    SET_ZOOM = 0x52
    GET_ZOOM = 0x53
    DOWNSIZE_CTRL = 0x54
    DOWNSIZE_STATUS = 0x55


class FrameControl(IntEnum):
    """Control flag for FBUF_CTRL (also the first READ_FBUF byte)."""

    STOP_CURRENT_FRAME = 0x00
    STOP_NEXT_FRAME = 0x01
    RESUME_FRAME = 0x02
    STEP_FRAME = 0x03


class BufferType(IntEnum):
    """Frame buffer selector for GET_FBUF_LEN."""

    CURRENT_FRAME = 0x00
    NEXT_FRAME = 0x01


class TransferMode(IntEnum):
    """How READ_FBUF returns data."""

    MCU = 0x0A
    DMA = 0x0F


class ImageSize(IntEnum):
    """Capture resolution register values."""

    LARGE = 0x00   # 640x480
    MEDIUM = 0x11  # 320x240
    SMALL = 0x22   # 160x120


class ColorControlMode(IntEnum):
    GPIO = 0x00
    UART = 0x01


class ColorShowMode(IntEnum):
    AUTO = 0x00
    COLOR = 0x01
    BLACK_WHITE = 0x02


class DeviceType(IntEnum):
    """Register space addressed by READ_DATA / WRITE_DATA."""

    CHIP_REGISTER = 0x00
    SENSOR_REGISTER = 0x01
    CCIR656_REGISTER = 0x02
    I2C_EEPROM = 0x03
    SPI_EEPROM = 0x04
    SPI_FLASH = 0x05


# Accepted names for set_photo_size
IMAGE_SIZE_NAMES: dict[str, ImageSize] = {
    "l": ImageSize.LARGE,
    "large": ImageSize.LARGE,
    "m": ImageSize.MEDIUM,
    "medium": ImageSize.MEDIUM,
    "s": ImageSize.SMALL,
    "small": ImageSize.SMALL,
}

# Image size register lives in the SPI EEPROM at 0x0019
IMAGE_SIZE_REGISTER = (DeviceType.SPI_EEPROM, 0x0019)
# Compression ratio register lives in chip register space at 0x1204
COMPRESSION_REGISTER = (DeviceType.CHIP_REGISTER, 0x1204)

# READ_FBUF delay field, in units of 0.01 ms
READ_FBUF_DELAY = b"\x01\x00"


def resolve_image_size(size: ImageSize | int | str | None) -> ImageSize:
    """Map a user-supplied size onto an ``ImageSize``.

    Unknown values fall back to ``ImageSize.MEDIUM``.
    """
    if isinstance(size, str):
        return IMAGE_SIZE_NAMES.get(size.strip().lower(), ImageSize.MEDIUM)
    try:
        return ImageSize(size)
    except ValueError:
        return ImageSize.MEDIUM


def build_command(opcode: Opcode, payload: bytes = b"") -> bytes:
    """Build a command frame for ``opcode``."""
    return encode_command(opcode.value, payload)


def build_write_register(device: DeviceType, address: int, data: bytes) -> bytes:
    """Build a WRITE_DATA command writing ``data`` at a register address.

    Args:
        device: Register space.
        address: 16-bit register address.
        data: Bytes to write.
    """
    if not 0 <= address <= 0xFFFF:
        raise ValueError(f"Register address must be 0-0xFFFF, got {address:#x}")
    payload = (
        bytes([device, len(data)]) + address.to_bytes(2, "big") + bytes(data)
    )
    return build_command(Opcode.WRITE_DATA, payload)


def build_get_version() -> bytes:
    """Build a GET_VERSION command."""
    return encode_simple_command(Opcode.GET_VERSION)


def build_reset() -> bytes:
    """Build a SYSTEM_RESET command."""
    return encode_simple_command(Opcode.SYSTEM_RESET)


def build_set_photo_size(size: ImageSize) -> bytes:
    """Build the register write selecting the capture resolution.

    Wire form: ``56 00 31 05 04 01 00 19 <size>``.
    """
    device, address = IMAGE_SIZE_REGISTER
    return build_write_register(device, address, bytes([size]))


def build_set_compression(rate: int) -> bytes:
    """Build the register write setting the JPEG compression ratio.

    Args:
        rate: Compression ratio 0-255.
    """
    if not 0 <= rate <= 0xFF:
        raise ValueError(f"Compression rate must be 0-255, got {rate}")
    device, address = COMPRESSION_REGISTER
    return build_write_register(device, address, bytes([rate]))


def build_set_color_mode(
    ctrl_mode: ColorControlMode | int, show_mode: ColorShowMode | int
) -> bytes:
    """Build a COLOR_CTRL command."""
    return build_command(Opcode.COLOR_CTRL, bytes([ctrl_mode, show_mode]))


def build_frame_control(flag: FrameControl) -> bytes:
    """Build an FBUF_CTRL command (stop, resume or step the frame buffer)."""
    return build_command(Opcode.FBUF_CTRL, bytes([flag]))


def build_take_photo() -> bytes:
    """Build the FBUF_CTRL command that freezes the current frame."""
    return build_frame_control(FrameControl.STOP_CURRENT_FRAME)


def build_resume_frame() -> bytes:
    """Build the FBUF_CTRL command that resumes live capture."""
    return build_frame_control(FrameControl.RESUME_FRAME)


def build_get_buffer_length(buffer: BufferType = BufferType.CURRENT_FRAME) -> bytes:
    """Build a GET_FBUF_LEN command."""
    return build_command(Opcode.GET_FBUF_LEN, bytes([buffer]))


def build_read_buffer(offset: int, length: int) -> bytes:
    """Build a READ_FBUF command for one chunk of the frame buffer.

    Payload: stop-current-frame flag, MCU transfer mode, starting
    address (4 bytes BE), data length (4 bytes BE), delay (2 bytes).

    Args:
        offset: Starting address within the frame buffer.
        length: Number of bytes to read.
    """
    if not 0 <= offset <= 0xFFFFFFFF:
        raise ValueError(f"Offset out of range: {offset}")
    if not 0 <= length <= 0xFFFFFFFF:
        raise ValueError(f"Length out of range: {length}")
    payload = (
        bytes([FrameControl.STOP_CURRENT_FRAME, TransferMode.MCU])
        + offset.to_bytes(4, "big")
        + length.to_bytes(4, "big")
        + READ_FBUF_DELAY
    )
    return build_command(Opcode.READ_FBUF, payload)
