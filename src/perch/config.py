"""Server configuration.

ServerConfig is a frozen dataclass, immutable after creation, built
once at startup and shared read-only by every request.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from perch.errors import ConfigurationError
from perch.middleware.builtin import PERMISSIVE_CORS, CORSConfig

# Used when no content directories are configured at all: the process
# directory for logical pages, plus the three subtrees exposed as mounts.
# Every root is also a mount, so "." publishes the whole working
# directory at /static (pyproject.toml, .env and the like included).
# Point content_dirs at a dedicated site directory in production.
DEFAULT_CONTENT_DIRS: tuple[str, ...] = (".", "pages", "assets", "styles")

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
LOG_FORMATS = ("text", "json")

ENV_CONTENT_DIRS = "PERCH_CONTENT_DIRS"
ENV_CONTENT_DIR = "CONTENT_DIR"
ENV_HOST = "PERCH_HOST"
ENV_PORT = "PERCH_PORT"
ENV_LOG_LEVEL = "PERCH_LOG_LEVEL"
ENV_LOG_FORMAT = "PERCH_LOG_FORMAT"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(port=3000, content_dirs=("/srv/site", "/srv/site/assets"))
    """

    # Server
    host: str = "0.0.0.0"
    port: int = 8090

    # Content roots, in probe order. Empty means "the process directory".
    content_dirs: tuple[str, ...] = DEFAULT_CONTENT_DIRS

    # Logging
    log_level: str = "info"
    log_format: str = "text"
    access_log: bool = True

    # Compression (bytes)
    compression_min_size: int = 256

    # Cross-origin policy
    cors: CORSConfig = PERMISSIVE_CORS

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535, got {self.port}"
            raise ConfigurationError(msg)
        if self.log_level not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            raise ConfigurationError(msg)
        if self.log_format not in LOG_FORMATS:
            msg = f"log_format must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}"
            raise ConfigurationError(msg)
        if self.compression_min_size < 0:
            msg = "compression_min_size must not be negative"
            raise ConfigurationError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "ServerConfig":
        """Build a config from environment variables.

        ``PERCH_CONTENT_DIRS`` holds an ``os.pathsep``-separated list;
        ``CONTENT_DIR`` names a single root and is only read when the
        list is unset. Keyword *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        if ENV_CONTENT_DIRS in env:
            values["content_dirs"] = parse_content_dirs(env[ENV_CONTENT_DIRS])
        elif ENV_CONTENT_DIR in env:
            values["content_dirs"] = parse_content_dirs(env[ENV_CONTENT_DIR], sep=None)

        if ENV_HOST in env:
            values["host"] = env[ENV_HOST]
        if ENV_PORT in env:
            values["port"] = parse_port(env[ENV_PORT])
        if ENV_LOG_LEVEL in env:
            values["log_level"] = env[ENV_LOG_LEVEL].strip().lower()
        if ENV_LOG_FORMAT in env:
            values["log_format"] = env[ENV_LOG_FORMAT].strip().lower()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]


def parse_content_dirs(value: str, sep: str | None = os.pathsep) -> tuple[str, ...]:
    """Split a content-dirs setting, dropping blank entries."""
    parts = [value] if sep is None else value.split(sep)
    return tuple(part.strip() for part in parts if part.strip())


def parse_port(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        msg = f"port must be an integer, got {value!r}"
        raise ConfigurationError(msg) from exc
