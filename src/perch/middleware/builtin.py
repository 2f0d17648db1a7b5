"""Built-in middleware: CORS.

Handles preflight requests and adds CORS headers to all responses.
The server installs it with ``PERMISSIVE_CORS``: content is public, so
every origin, method and header is allowed.
"""

from dataclasses import dataclass

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import AnyResponse, Next


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    The defaults allow nothing. Override what you need::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


# Any origin, any method, any header
PERMISSIVE_CORS = CORSConfig(
    allow_origins=("*",),
    allow_methods=("*",),
    allow_headers=("*",),
)


class CORSMiddleware:
    """Standards-compliant CORS middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (returns 204 with CORS headers)
    - Simple and actual requests (adds CORS headers to response)
    - Wildcard origins (``"*"``) when credentials are disabled

    Usage::

        app = App(config)  # PERMISSIVE_CORS by default
        CORSMiddleware(CORSConfig(allow_origins=("https://example.com",)))
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _is_allowed_origin(self, origin: str) -> bool:
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins

    def _add_cors_headers(self, response: AnyResponse, origin: str) -> AnyResponse:
        cfg = self.config

        if "*" in cfg.allow_origins and not cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Origin", "*")
        else:
            response = response.with_header("Access-Control-Allow-Origin", origin)
            response = response.with_header("Vary", "Origin")

        if cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Credentials", "true")

        if cfg.expose_headers:
            response = response.with_header(
                "Access-Control-Expose-Headers",
                ", ".join(cfg.expose_headers),
            )

        return response

    def _preflight_response(
        self,
        origin: str,
        request_method: str | None,
        request_headers: str | None,
    ) -> AnyResponse:
        cfg = self.config
        response = Response(body="", status=204)
        response = self._add_cors_headers(response, origin)

        if request_method:
            response = response.with_header(
                "Access-Control-Allow-Methods",
                ", ".join(cfg.allow_methods),
            )

        if cfg.allow_headers:
            allowed = ", ".join(cfg.allow_headers)
            # Credentialed requests cannot use the "*" wildcard; echo instead
            if "*" in cfg.allow_headers and cfg.allow_credentials and request_headers:
                allowed = request_headers
            response = response.with_header("Access-Control-Allow-Headers", allowed)

        return response.with_header("Access-Control-Max-Age", str(cfg.max_age))

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        origin = request.headers.get("origin")

        # No Origin header, not a CORS request
        if origin is None:
            return await next(request)

        if not self._is_allowed_origin(origin):
            return await next(request)

        if request.method == "OPTIONS":
            return self._preflight_response(
                origin,
                request.headers.get("access-control-request-method"),
                request.headers.get("access-control-request-headers"),
            )

        response = await next(request)
        return self._add_cors_headers(response, origin)
