"""Host-side driver and MCP server for VC0706 serial camera modules."""

from .camera import Camera, open_camera
from .config import CameraConfig
from .exceptions import (
    CameraError,
    ChannelError,
    ProtocolError,
    TooManyRetriesError,
)

__version__ = "0.1.0"
