"""Immutable HTTP request.

Perch never reads request bodies: every route is a GET of fixed
content. The request is frozen metadata only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from perch.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request built once per ASGI ``http`` scope."""

    method: str
    path: str
    headers: Headers
    query_string: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    @property
    def is_head(self) -> bool:
        return self.method == "HEAD"

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI scope."""
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
