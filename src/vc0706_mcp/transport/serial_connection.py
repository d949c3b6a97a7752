"""Serial (UART) connection to a VC0706 camera module.

The camera talks 8N1 at 38400 baud by default. This module only moves
bytes; framing and validation live in the protocol layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import serial

from ..config import CameraConfig
from ..exceptions import ChannelError

logger = logging.getLogger(__name__)


@dataclass
class PortInfo:
    """What was opened, for status reporting."""

    port: str = ""
    baudrate: int = 0


class SerialConnection:
    """Manages the serial port the camera is attached to.

    Usage::

        conn = SerialConnection(CameraConfig(port="/dev/ttyUSB0"))
        conn.open()
        conn.write(command_bytes)
        reply = conn.read(5)
        conn.close()
    """

    def __init__(
        self,
        config: CameraConfig | None = None,
        serial_cls: type | None = None,
    ) -> None:
        self._config = config or CameraConfig()
        self._serial_cls = serial_cls or serial.Serial
        self._port = None
        self._connected = False
        self._port_info = PortInfo()

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def port_info(self) -> PortInfo:
        return self._port_info

    @property
    def config(self) -> CameraConfig:
        return self._config

    def open(self) -> PortInfo:
        """Open the serial port.

        Raises:
            ChannelError: If the port cannot be opened.
        """
        if self._connected:
            return self._port_info

        cfg = self._config
        try:
            self._port = self._serial_cls(
                cfg.port,
                cfg.baudrate,
                timeout=cfg.timeout,
                write_timeout=cfg.write_timeout,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            raise ChannelError(
                f"Could not open serial port {cfg.port} at {cfg.baudrate} baud. "
                f"Ensure the camera is wired up and you have permissions. "
                f"Last error: {e}"
            ) from e

        self._connected = True
        self._port_info = PortInfo(port=cfg.port, baudrate=cfg.baudrate)
        logger.info("Opened %s at %d baud", cfg.port, cfg.baudrate)
        return self._port_info

    def close(self) -> None:
        """Close the serial port."""
        if not self._connected:
            return

        try:
            self._port.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing port: %s", e)
        finally:
            self._port = None
            self._connected = False
            logger.info("Disconnected")

    def write(self, data: bytes) -> int:
        """Write raw bytes to the camera.

        Returns:
            Number of bytes written.

        Raises:
            ConnectionError: If not connected.
        """
        if not self._connected:
            raise ConnectionError("Not connected to camera")
        written = self._port.write(data)
        self._port.flush()
        return len(data) if written is None else written

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes, returning early on timeout.

        Raises:
            ConnectionError: If not connected.
        """
        if not self._connected:
            raise ConnectionError("Not connected to camera")
        return bytes(self._port.read(size))

    def reset_input_buffer(self) -> None:
        """Drop any received bytes that have not been read yet.

        Raises:
            ConnectionError: If not connected.
        """
        if not self._connected:
            raise ConnectionError("Not connected to camera")
        self._port.reset_input_buffer()

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False
