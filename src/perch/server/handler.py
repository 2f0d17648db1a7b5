"""ASGI handler — the request pipeline.

The only component that touches raw ASGI ``http`` scopes. Converts the
scope to a typed Request, runs it through the composed pipeline and
sends the Response back through ASGI send().

Pipeline shape (outermost first)::

    access log -> compression -> CORS -> [route table -> static mounts -> fallback]

The bracketed dispatch chain converts errors to responses itself, so
every middleware sees a real 404 / 405 / 500 response rather than an
exception.
"""

from collections.abc import Callable, Sequence
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch.content.resolver import NotFoundResolver
from perch.errors import HTTPError, NotFound
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import AnyResponse, Next
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.sender import send_response


async def fallback(request: Request) -> AnyResponse:
    """End of the dispatch chain: nothing claimed the path."""
    raise NotFound(f"No route or mount matches {request.method} {request.path!r}")


def chain(handlers: Sequence[Callable[..., Any]], terminal: Next) -> Next:
    """Wrap *handlers* around *terminal*; the first handler runs first."""
    handler = terminal
    for mw in reversed(handlers):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        handler = make_next
    return handler


def compose_pipeline(
    middleware: Sequence[Callable[..., Any]],
    dispatchers: Sequence[Callable[..., Any]],
    not_found: NotFoundResolver,
) -> Next:
    """Build the full request pipeline once, at startup.

    *dispatchers* are tried in order (route table first, then static
    mounts); when none answers, ``fallback`` raises ``NotFound``.
    """
    dispatch_chain = chain(dispatchers, fallback)

    async def dispatch(request: Request) -> AnyResponse:
        try:
            return await dispatch_chain(request)
        except HTTPError as exc:
            return await handle_http_error(exc, request, not_found)
        except Exception as exc:
            return handle_internal_error(exc, request)

    return chain(middleware, dispatch)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    pipeline: Next,
) -> None:
    """Process a single HTTP request through the composed pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await pipeline(request)
    except Exception as exc:
        # Only reachable when a middleware itself fails
        response = handle_internal_error(exc, request)

    await send_response(response, send, head=request.is_head)
