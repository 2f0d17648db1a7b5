"""Request/response access logging.

One INFO line per request on the ``perch.access`` logger::

    GET /about-us 200 1.42ms
"""

import logging
import time

from perch.http.request import Request
from perch.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("perch.access")


class AccessLogMiddleware:
    """Log method, path, status and handling time of every request.

    Requests that end in an exception are logged with status 500 before
    the exception continues to the handler.
    """

    __slots__ = ("_logger",)

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        start = time.perf_counter()
        try:
            response = await next(request)
        except Exception:
            self._log(request, 500, start)
            raise
        self._log(request, response.status, start)
        return response

    def _log(self, request: Request, status: int, start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000
        client = request.client[0] if request.client else "-"
        self._logger.info(
            "%s %s %d %.2fms",
            request.method,
            request.url,
            status,
            elapsed_ms,
            extra={"client": client, "status": status},
        )
