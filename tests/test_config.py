"""Tests for camera configuration."""

import pytest

from vc0706_mcp.config import CameraConfig


def test_defaults():
    cfg = CameraConfig()
    assert cfg.port == "/dev/ttyAMA0"
    assert cfg.baudrate == 38400
    assert cfg.chunk_size == 256
    assert cfg.max_chunk_attempts == 5


def test_from_env():
    env = {
        "VC0706_PORT": "/dev/ttyUSB0",
        "VC0706_BAUDRATE": "115200",
        "VC0706_TIMEOUT": "2.5",
        "VC0706_CHUNK_SIZE": "64",
    }
    cfg = CameraConfig.from_env(env)
    assert cfg.port == "/dev/ttyUSB0"
    assert cfg.baudrate == 115200
    assert cfg.timeout == 2.5
    assert cfg.chunk_size == 64
    assert cfg.max_chunk_attempts == 5


def test_overrides_win_over_env():
    """Explicit values beat the environment; None means not given."""
    env = {"VC0706_PORT": "/dev/ttyUSB0", "VC0706_BAUDRATE": "115200"}
    cfg = CameraConfig.from_env(env, port="/dev/ttyS1", baudrate=None)
    assert cfg.port == "/dev/ttyS1"
    assert cfg.baudrate == 115200


def test_invalid_values():
    with pytest.raises(ValueError):
        CameraConfig(chunk_size=0)
    with pytest.raises(ValueError):
        CameraConfig(max_chunk_attempts=0)
    with pytest.raises(ValueError):
        CameraConfig.from_env({"VC0706_BAUDRATE": "fast"})
