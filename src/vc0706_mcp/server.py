"""MCP server entry point for VC0706 serial cameras.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Any

from mcp.server.fastmcp import FastMCP

from .camera import Camera, open_camera
from .config import CameraConfig
from .exceptions import CameraError
from .protocol.commands import (
    ColorControlMode,
    ColorShowMode,
    ImageSize,
    Opcode,
)
from .transport.serial_connection import SerialConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "vc0706",
    instructions="MCP server for VC0706 serial JPEG camera modules",
)

# Global connection state
_connection: SerialConnection | None = None
_camera: Camera | None = None
_last_capture: dict[str, Any] = {}
# The camera handles one transaction at a time
_lock = threading.Lock()


def _get_camera() -> Camera:
    """Get the active camera, raising if not connected."""
    if _camera is None or _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to camera. Use the 'connect' tool first."
        )
    return _camera


def _error(e: Exception) -> dict[str, Any]:
    logger.warning("Camera operation failed: %s", e)
    return {"error": str(e), "type": type(e).__name__}


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(port: str | None = None, baudrate: int | None = None) -> dict[str, Any]:
    """Open the serial port and reset the camera.

    Settings not given fall back to the VC0706_* environment variables,
    then to /dev/ttyAMA0 at 38400 baud.

    Args:
        port: Serial device path.
        baudrate: Serial baud rate.
    """
    global _connection, _camera
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "port": _connection.port_info.port,
        }

    try:
        config = CameraConfig.from_env(port=port, baudrate=baudrate)
    except ValueError as e:
        return _error(e)

    with _lock:
        try:
            _connection, _camera = open_camera(config)
            version = _camera.get_version()
        except CameraError as e:
            # Leave nothing half-open for the next connect attempt
            if _connection is not None:
                _connection.close()
            _connection = None
            _camera = None
            return _error(e)

    return {
        "connected": True,
        "port": config.port,
        "baudrate": config.baudrate,
        "version": version,
    }


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the serial connection to the camera."""
    global _connection, _camera
    if _connection is None:
        return {"disconnected": True}
    with _lock:
        _connection.close()
        _connection = None
        _camera = None
    return {"disconnected": True}


@mcp.tool()
def get_version() -> dict[str, Any]:
    """Read the camera firmware version string."""
    camera = _get_camera()
    with _lock:
        try:
            version = camera.get_version()
        except CameraError as e:
            return _error(e)
    return {"version": version}


@mcp.tool()
def reset() -> dict[str, Any]:
    """Reset the camera. Takes about a second."""
    camera = _get_camera()
    with _lock:
        try:
            camera.reset()
        except CameraError as e:
            return _error(e)
    return {"reset": True}


# ─── CONFIGURATION TOOLS ─────────────────────────────────────────────

@mcp.tool()
def set_photo_size(size: str = "medium") -> dict[str, Any]:
    """Select the capture resolution.

    Args:
        size: "large" (640x480), "medium" (320x240) or "small" (160x120).
              Unrecognised values select medium.
    """
    camera = _get_camera()
    with _lock:
        try:
            resolved = camera.set_photo_size(size)
        except CameraError as e:
            return _error(e)
    return {"size": resolved.name.lower()}


@mcp.tool()
def set_compression(rate: int) -> dict[str, Any]:
    """Set the JPEG compression ratio.

    Args:
        rate: Compression ratio 0-255; higher means smaller files.
    """
    if not 0 <= rate <= 255:
        return {"error": "Compression rate must be 0-255"}
    camera = _get_camera()
    with _lock:
        try:
            camera.set_compression(rate)
        except CameraError as e:
            return _error(e)
    return {"compression": rate}


@mcp.tool()
def set_color_mode(ctrl_mode: str = "uart", show_mode: str = "auto") -> dict[str, Any]:
    """Choose colour control and display mode.

    Args:
        ctrl_mode: "gpio" or "uart".
        show_mode: "auto", "color" or "black_white".
    """
    try:
        ctrl = ColorControlMode[ctrl_mode.upper()]
        show = ColorShowMode[show_mode.upper()]
    except KeyError as e:
        return {"error": f"Unknown colour mode {e}"}
    camera = _get_camera()
    with _lock:
        try:
            camera.set_color_mode(ctrl, show)
        except CameraError as e:
            return _error(e)
    return {"ctrl_mode": ctrl.name.lower(), "show_mode": show.name.lower()}


# ─── CAPTURE TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def take_photo(path: str, resume: bool = True) -> dict[str, Any]:
    """Capture a JPEG and save it to a file.

    Args:
        path: Output file path.
        resume: Resume live capture afterwards so the next photo is fresh.
    """
    global _last_capture
    camera = _get_camera()
    with _lock:
        try:
            image = camera.capture()
            if resume:
                camera.resume_frame()
        except CameraError as e:
            return _error(e)

    written = image.save(path)
    _last_capture = {"path": str(written), **image.to_dict()}
    return dict(_last_capture)


@mcp.tool()
def resume_frame() -> dict[str, Any]:
    """Resume live capture after a photo froze the frame buffer."""
    camera = _get_camera()
    with _lock:
        try:
            camera.resume_frame()
        except CameraError as e:
            return _error(e)
    return {"resumed": True}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("vc0706://device/status")
def resource_device_status() -> str:
    """Connection state and last capture."""
    if _connection is None or not _connection.connected:
        return json.dumps({"connected": False})

    info = _connection.port_info
    return json.dumps({
        "connected": True,
        "port": info.port,
        "baudrate": info.baudrate,
        "last_capture": _last_capture or None,
    })


@mcp.resource("vc0706://catalog/opcodes")
def resource_opcodes() -> str:
    """Protocol opcode table."""
    opcodes = [{"name": op.name, "opcode": f"0x{op.value:02X}"} for op in Opcode]
    return json.dumps({"opcodes": opcodes, "count": len(opcodes)})


@mcp.resource("vc0706://catalog/image-sizes")
def resource_image_sizes() -> str:
    """Supported capture resolutions."""
    resolutions = {
        ImageSize.LARGE: "640x480",
        ImageSize.MEDIUM: "320x240",
        ImageSize.SMALL: "160x120",
    }
    sizes = [
        {"name": size.name.lower(), "register": f"0x{size.value:02X}", "resolution": res}
        for size, res in resolutions.items()
    ]
    return json.dumps({"sizes": sizes})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
