"""Error handling pipeline for perch requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
Every 404 carries the custom not-found page (or its literal fallback),
whether it came from an unknown path or from a logical page that is
missing from every content root.
"""

import logging

from perch.content.resolver import NotFoundResolver
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import HTML, PLAIN_TEXT, Response

logger = logging.getLogger("perch.server")


async def not_found_response(not_found: NotFoundResolver) -> Response:
    """The 404 response shared by the fallback and failed logical pages."""
    body = await not_found.resolve404()
    return Response(body=body, status=404, content_type=HTML)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    not_found: NotFoundResolver,
) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    if exc.status == 404:
        return await not_found_response(not_found)

    resp = Response(body=exc.detail or f"Error {exc.status}", content_type=PLAIN_TEXT)
    resp = resp.with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.error("500 %s %s", request.method, request.path, exc_info=exc)
    return Response(body="Internal Server Error", status=500, content_type=PLAIN_TEXT)
