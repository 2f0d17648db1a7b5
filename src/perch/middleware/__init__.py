"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    AccessLogMiddleware -- One log line per request
    CompressionMiddleware -- Negotiated gzip response compression
    CORSMiddleware -- Cross-Origin Resource Sharing
    StaticFiles -- Serve one static mount's directory
"""

from perch.middleware.access_log import AccessLogMiddleware
from perch.middleware.builtin import PERMISSIVE_CORS, CORSConfig, CORSMiddleware
from perch.middleware.compression import CompressionConfig, CompressionMiddleware
from perch.middleware.protocol import Middleware, Next
from perch.middleware.static import StaticFiles

__all__ = [
    "PERMISSIVE_CORS",
    "AccessLogMiddleware",
    "CORSConfig",
    "CORSMiddleware",
    "CompressionConfig",
    "CompressionMiddleware",
    "Middleware",
    "Next",
    "StaticFiles",
]
