"""Configuration settings for the Posts Server."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

# Defaults
DEFAULT_PORT = 8080
DEFAULT_MAX_UPLOAD_BYTES = 1 * 1024 * 1024  # 1MB
DEFAULT_HOST = "0.0.0.0"

# Directory names, relative to the base directory
RESOURCES_DIR_NAME = "resources"
POSTS_DIR_NAME = "posts"

# Streaming
CHUNK_SIZE = 8192  # 8KB chunks

# Response header for rejected methods
ALLOWED_METHODS = "GET, POST, PUT"


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name) or str(default)
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class ServerConfig:
    port: int = DEFAULT_PORT
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    base_dir: Path = field(default_factory=Path.cwd)
    host: str = DEFAULT_HOST

    def __post_init__(self):
        if not 0 <= self.port <= 65535:
            raise ValueError(f"PORT must be between 0 and 65535, got {self.port}")
        if self.max_upload_bytes < 0:
            raise ValueError(f"MAX_UPLOAD_BYTES must not be negative, got {self.max_upload_bytes}")

    @property
    def resources_dir(self) -> Path:
        return Path(self.base_dir) / RESOURCES_DIR_NAME

    @property
    def posts_dir(self) -> Path:
        return Path(self.base_dir) / POSTS_DIR_NAME

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ServerConfig':
        """Create ServerConfig from the PORT and MAX_UPLOAD_BYTES environment variables."""
        if environ is None:
            environ = os.environ
        return cls(
            port=_read_int(environ, "PORT", DEFAULT_PORT),
            max_upload_bytes=_read_int(environ, "MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        )
