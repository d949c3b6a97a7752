"""Captured image model and persistence.

The camera hands back a baseline JPEG: it starts with the SOI marker
``FF D8`` and ends with the EOI marker ``FF D9``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

JPEG_SOI = b"\xFF\xD8"
JPEG_EOI = b"\xFF\xD9"


@dataclass(frozen=True)
class CapturedImage:
    """Bytes downloaded from the camera's frame buffer."""

    data: bytes = b""

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_jpeg(self) -> bool:
        return self.data.startswith(JPEG_SOI) and self.data.endswith(JPEG_EOI)

    def to_dict(self) -> dict:
        return {
            "size": self.size,
            "is_jpeg": self.is_jpeg,
        }

    def save(self, path: str | Path) -> Path:
        return save_image(self.data, path)


def save_image(data: bytes, path: str | Path) -> Path:
    """Write image bytes to ``path``, creating parent directories.

    Returns:
        The path written to.
    """
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
