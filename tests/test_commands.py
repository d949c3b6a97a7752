"""Tests for the opcode table and command builders."""

import pytest

from vc0706_mcp.protocol.commands import (
    ColorControlMode,
    ColorShowMode,
    DeviceType,
    FrameControl,
    ImageSize,
    Opcode,
    TransferMode,
    build_get_buffer_length,
    build_get_version,
    build_read_buffer,
    build_reset,
    build_resume_frame,
    build_set_color_mode,
    build_set_compression,
    build_set_photo_size,
    build_take_photo,
    build_write_register,
    resolve_image_size,
)


def test_opcode_values():
    """Verify key opcodes match the camera's command table."""
    assert Opcode.GET_VERSION == 0x11
    assert Opcode.SYSTEM_RESET == 0x26
    assert Opcode.WRITE_DATA == 0x31
    assert Opcode.READ_FBUF == 0x32
    assert Opcode.GET_FBUF_LEN == 0x34
    assert Opcode.FBUF_CTRL == 0x36
    assert Opcode.COLOR_CTRL == 0x3C
    assert TransferMode.MCU == 0x0A
    assert ImageSize.MEDIUM == 0x11


def test_build_get_version():
    assert build_get_version() == bytes([0x56, 0x00, 0x11, 0x00])


def test_build_reset():
    assert build_reset() == bytes([0x56, 0x00, 0x26, 0x00])


def test_build_set_photo_size():
    """Photo size is a 5-byte write to register 0x0019."""
    frame = build_set_photo_size(ImageSize.SMALL)
    assert frame == bytes([0x56, 0x00, 0x31, 0x05, 0x04, 0x01, 0x00, 0x19, 0x22])


def test_build_set_compression():
    """Compression is a 5-byte write to chip register 0x1204."""
    frame = build_set_compression(0x36)
    assert frame == bytes([0x56, 0x00, 0x31, 0x05, 0x00, 0x01, 0x12, 0x04, 0x36])


def test_set_compression_is_repeatable():
    """The same rate always produces the same frame."""
    assert build_set_compression(0x80) == build_set_compression(0x80)


def test_compression_bounds():
    """Rates outside a byte should raise."""
    with pytest.raises(ValueError):
        build_set_compression(256)
    with pytest.raises(ValueError):
        build_set_compression(-1)


def test_build_set_color_mode():
    frame = build_set_color_mode(ColorControlMode.UART, ColorShowMode.BLACK_WHITE)
    assert frame == bytes([0x56, 0x00, 0x3C, 0x02, 0x01, 0x02])


def test_build_take_photo_and_resume():
    """Both use FBUF_CTRL with a one-byte control flag."""
    assert build_take_photo() == bytes([0x56, 0x00, 0x36, 0x01, FrameControl.STOP_CURRENT_FRAME])
    assert build_resume_frame() == bytes([0x56, 0x00, 0x36, 0x01, FrameControl.RESUME_FRAME])


def test_build_get_buffer_length():
    """Buffer length query selects the current frame."""
    assert build_get_buffer_length() == bytes([0x56, 0x00, 0x34, 0x01, 0x00])


def test_build_read_buffer():
    """READ_FBUF payload: flag, mode, offset, length, delay."""
    frame = build_read_buffer(0x100, 0x2C)
    assert frame[:4] == bytes([0x56, 0x00, 0x32, 0x0C])
    assert frame[4] == FrameControl.STOP_CURRENT_FRAME
    assert frame[5] == TransferMode.MCU
    assert frame[6:10] == b"\x00\x00\x01\x00"
    assert frame[10:14] == b"\x00\x00\x00\x2C"
    assert frame[14:16] == b"\x01\x00"
    assert len(frame) == 16


def test_read_buffer_bounds():
    with pytest.raises(ValueError):
        build_read_buffer(-1, 10)
    with pytest.raises(ValueError):
        build_read_buffer(0, 1 << 32)


def test_write_register_address_bounds():
    with pytest.raises(ValueError):
        build_write_register(DeviceType.CHIP_REGISTER, 0x10000, b"\x00")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("l", ImageSize.LARGE),
        ("Large", ImageSize.LARGE),
        ("s", ImageSize.SMALL),
        ("m", ImageSize.MEDIUM),
        (ImageSize.SMALL, ImageSize.SMALL),
        (0x00, ImageSize.LARGE),
        ("huge", ImageSize.MEDIUM),
        (0x33, ImageSize.MEDIUM),
        (None, ImageSize.MEDIUM),
    ],
)
def test_resolve_image_size(value, expected):
    """Unknown sizes fall back to medium instead of failing."""
    assert resolve_image_size(value) is expected
