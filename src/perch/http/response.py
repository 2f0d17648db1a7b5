"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Middleware (CORS,
compression) layers headers on without mutating what the route
returned.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

HTML = "text/html; charset=utf-8"
PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    ``body`` is returned to the client as-is: file bytes are never
    decoded or re-encoded on the way out.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = HTML
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def without_header(self, name: str) -> Response:
        """Return a new Response with every *name* header removed."""
        lower = name.lower()
        return replace(self, headers=tuple(h for h in self.headers if h[0].lower() != lower))

    def header(self, name: str) -> str | None:
        """Return the first value of header *name*, case-insensitively."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return None

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
