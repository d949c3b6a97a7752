"""High-level camera operations built on single transactions."""

from __future__ import annotations

import logging

from .config import CameraConfig
from .exceptions import ProtocolError
from .models.image import CapturedImage
from .protocol.commands import (
    ColorControlMode,
    ColorShowMode,
    ImageSize,
    build_get_version,
    build_reset,
    build_resume_frame,
    build_set_color_mode,
    build_set_compression,
    build_set_photo_size,
    resolve_image_size,
)
from .protocol.parser import parse_version
from .transfer import BufferTransfer
from .transport.serial_connection import SerialConnection
from .transport.transaction import Channel, run_transaction

logger = logging.getLogger(__name__)

# (expected reply length, settle delay in seconds) per command
VERSION_TIMING = (16, 0.01)
RESET_TIMING = (80, 1.0)
PHOTO_SIZE_TIMING = (5, 0.1)
COMPRESSION_TIMING = (5, 0.01)
COLOR_MODE_TIMING = (5, 0.01)
RESUME_TIMING = (5, 0.01)


class Camera:
    """A VC0706 camera reachable over ``channel``.

    The camera handles one transaction at a time and this class does no
    locking; callers sharing a ``Camera`` between threads must serialise
    access themselves.
    """

    def __init__(self, channel: Channel, config: CameraConfig | None = None) -> None:
        self._channel = channel
        self._config = config or CameraConfig()

    @property
    def channel(self) -> Channel:
        return self._channel

    @property
    def config(self) -> CameraConfig:
        return self._config

    def get_version(self) -> str:
        """Return the firmware version string."""
        reply = run_transaction(self._channel, build_get_version(), *VERSION_TIMING)
        return parse_version(reply)

    def reset(self) -> None:
        """Reset the camera.

        The reset reply is unreliable, so only I/O failures are raised;
        a reply that fails validation is logged and ignored.
        """
        try:
            run_transaction(self._channel, build_reset(), *RESET_TIMING)
        except ProtocolError as e:
            logger.warning("Ignoring bad reset reply: %s", e)

    def set_photo_size(self, size: ImageSize | int | str) -> ImageSize:
        """Select the capture resolution.

        Unknown sizes select ``ImageSize.MEDIUM``.

        Returns:
            The size actually written.
        """
        resolved = resolve_image_size(size)
        logger.debug("Photo size %r -> %s", size, resolved.name)
        run_transaction(
            self._channel, build_set_photo_size(resolved), *PHOTO_SIZE_TIMING
        )
        return resolved

    def set_compression(self, rate: int) -> None:
        """Set the JPEG compression ratio (0-255)."""
        run_transaction(
            self._channel, build_set_compression(rate), *COMPRESSION_TIMING
        )

    def set_color_mode(
        self,
        ctrl_mode: ColorControlMode | int = ColorControlMode.UART,
        show_mode: ColorShowMode | int = ColorShowMode.AUTO,
    ) -> None:
        """Choose who controls colour (GPIO or UART) and the colour mode."""
        run_transaction(
            self._channel,
            build_set_color_mode(ctrl_mode, show_mode),
            *COLOR_MODE_TIMING,
        )

    def resume_frame(self) -> None:
        """Resume live capture after ``take_photo`` froze the frame buffer."""
        run_transaction(self._channel, build_resume_frame(), *RESUME_TIMING)

    def take_photo(self) -> bytes:
        """Freeze the current frame and download it.

        Raises:
            ChannelError: On I/O failure.
            ProtocolError: If the camera rejects the capture.
            TooManyRetriesError: If the chunk transfer keeps failing.
        """
        transfer = BufferTransfer(
            self._channel,
            chunk_size=self._config.chunk_size,
            max_attempts=self._config.max_chunk_attempts,
        )
        return transfer.run()

    def capture(self) -> CapturedImage:
        """Like :meth:`take_photo` but wraps the bytes in a ``CapturedImage``."""
        return CapturedImage(self.take_photo())


def open_camera(config: CameraConfig | None = None, serial_cls: type | None = None):
    """Open the serial port and reset the camera.

    Returns:
        ``(connection, camera)``; close the connection when done.

    Raises:
        ChannelError: If the port cannot be opened or the reset cannot be sent.
    """
    config = config or CameraConfig()
    conn = SerialConnection(config, serial_cls=serial_cls)
    conn.open()
    camera = Camera(conn, config)
    logger.info("Reset camera")
    try:
        camera.reset()
    except Exception:
        conn.close()
        raise
    return conn, camera
