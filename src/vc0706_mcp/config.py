"""Connection and transfer settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

DEFAULT_PORT = "/dev/ttyAMA0"
DEFAULT_BAUDRATE = 38400
DEFAULT_TIMEOUT = 1.0  # seconds
DEFAULT_WRITE_TIMEOUT = 1.0  # seconds
DEFAULT_CHUNK_SIZE = 256  # bytes per READ_FBUF request
DEFAULT_MAX_CHUNK_ATTEMPTS = 5

ENV_PREFIX = "VC0706_"


@dataclass
class CameraConfig:
    """Settings for the serial link and the frame buffer transfer."""

    port: str = DEFAULT_PORT
    baudrate: int = DEFAULT_BAUDRATE
    timeout: float = DEFAULT_TIMEOUT
    write_timeout: float = DEFAULT_WRITE_TIMEOUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_chunk_attempts: int = DEFAULT_MAX_CHUNK_ATTEMPTS

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.max_chunk_attempts <= 0:
            raise ValueError(
                f"max_chunk_attempts must be positive, got {self.max_chunk_attempts}"
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> CameraConfig:
        """Build a config from ``VC0706_*`` environment variables.

        ``VC0706_PORT``, ``VC0706_BAUDRATE`` etc. map onto the field of the
        same name. Keyword overrides that are not None win over both the
        environment and the defaults.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            if f.name == "port":
                values[f.name] = raw
            elif f.name in ("timeout", "write_timeout"):
                values[f.name] = float(raw)
            else:
                values[f.name] = int(raw)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
