"""Gzip response compression, negotiated through ``Accept-Encoding``.

Bodies are only replaced when compression actually pays off: small
bodies, already-encoded responses and formats that are compressed on
disk (images, video, archives) are sent untouched.
"""

import gzip
from dataclasses import dataclass

from perch.http.request import Request
from perch.middleware.protocol import AnyResponse, Next

# Media types that gain nothing from gzip
_INCOMPRESSIBLE_PREFIXES = ("image/", "video/", "audio/")
_INCOMPRESSIBLE_TYPES = frozenset(
    {
        "application/gzip",
        "application/zip",
        "application/x-7z-compressed",
        "application/x-bzip2",
        "application/pdf",
        "font/woff",
        "font/woff2",
    }
)
_COMPRESSIBLE_IMAGES = frozenset({"image/svg+xml", "image/x-icon", "image/bmp"})


@dataclass(frozen=True, slots=True)
class CompressionConfig:
    """Compression settings.

    ``min_size`` is in bytes. The compressed body is kept only when it
    is smaller than ``max_ratio`` times the original.
    """

    min_size: int = 256
    max_ratio: float = 0.9
    level: int = 6


def is_compressible(content_type: str) -> bool:
    """True if a body of *content_type* is worth gzipping."""
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type in _COMPRESSIBLE_IMAGES:
        return True
    if media_type in _INCOMPRESSIBLE_TYPES:
        return False
    return not media_type.startswith(_INCOMPRESSIBLE_PREFIXES)


class CompressionMiddleware:
    """Gzip responses for clients that accept it.

    Usage::

        CompressionMiddleware(CompressionConfig(min_size=1024))
    """

    __slots__ = ("config",)

    def __init__(self, config: CompressionConfig | None = None) -> None:
        self.config = config or CompressionConfig()

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        response = await next(request)

        if not request.headers.accepts_encoding("gzip"):
            return response
        if response.status in (204, 304) or response.status < 200:
            return response
        if response.header("content-encoding") is not None:
            return response
        if not is_compressible(response.content_type):
            return response

        body = response.body_bytes
        if len(body) < self.config.min_size:
            return response

        compressed = gzip.compress(body, compresslevel=self.config.level, mtime=0)
        if len(compressed) >= self.config.max_ratio * len(body):
            return response

        return (
            response.with_body(compressed)
            .with_header("Content-Encoding", "gzip")
            .with_header("Vary", "Accept-Encoding")
        )
