"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> AnyResponse: ...

No base class required. The same shape is used for the dispatch chain
behind the middleware (route table, static mounts), so a handler that
cannot answer a request just calls ``next``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from perch.http.request import Request
from perch.http.response import Response

# Any response type the pipeline can produce
AnyResponse: TypeAlias = Response

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """Protocol for perch middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def server_header(request: Request, next: Next) -> AnyResponse:
            response = await next(request)
            return response.with_header("Server", "perch")

        # Class middleware
        class Blocker:
            async def __call__(self, request: Request, next: Next) -> AnyResponse:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
