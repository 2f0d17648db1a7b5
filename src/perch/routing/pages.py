"""Logical pages and the route table that serves them.

The table is closed: five exact paths, each bound to one file relative
to the content roots. No parameters, no patterns, nothing registered at
runtime.
"""

from dataclasses import dataclass

from perch.content.resolver import FileResolver
from perch.errors import ConfigurationError, MethodNotAllowed
from perch.http.request import Request
from perch.http.response import HTML, Response
from perch.middleware.protocol import AnyResponse, Next


@dataclass(frozen=True, slots=True)
class LogicalPage:
    """An exact route bound to a file relative to the content roots."""

    route: str
    file: str


LOGICAL_PAGES: tuple[LogicalPage, ...] = (
    LogicalPage("/", "index.html"),
    LogicalPage("/index", "pages/home.html"),
    LogicalPage("/services", "pages/services.html"),
    LogicalPage("/contact-us", "pages/contact-us.html"),
    LogicalPage("/about-us", "pages/about-us.html"),
)

ROUTE_METHODS: frozenset[str] = frozenset({"GET", "HEAD"})


class RouteTable:
    """Exact-match dispatch for logical pages.

    Sits first in the dispatch chain: paths outside the table are
    handed to ``next`` (static mounts, then the not-found fallback).
    A page whose file is missing from every root raises ``NotFound``,
    which the handler turns into the custom 404 page.
    """

    __slots__ = ("_pages", "_resolver")

    def __init__(
        self,
        resolver: FileResolver,
        pages: tuple[LogicalPage, ...] = LOGICAL_PAGES,
    ) -> None:
        table: dict[str, LogicalPage] = {}
        for page in pages:
            if page.route in table:
                msg = f"Duplicate logical route {page.route!r}"
                raise ConfigurationError(msg)
            table[page.route] = page
        self._pages = table
        self._resolver = resolver

    def __contains__(self, path: object) -> bool:
        return path in self._pages

    def __len__(self) -> int:
        return len(self._pages)

    @property
    def pages(self) -> tuple[LogicalPage, ...]:
        return tuple(self._pages.values())

    def lookup(self, method: str, path: str) -> LogicalPage | None:
        """Return the page for *path*, None if the path is not a logical route.

        Raises ``MethodNotAllowed`` for a known path with a non-GET method.
        """
        page = self._pages.get(path)
        if page is None:
            return None
        if method not in ROUTE_METHODS:
            raise MethodNotAllowed(ROUTE_METHODS)
        return page

    async def render(self, page: LogicalPage) -> Response:
        body = await self._resolver.resolve(page.file)
        return Response(body=body, content_type=HTML)

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        page = self.lookup(request.method, request.path)
        if page is None:
            return await next(request)
        return await self.render(page)
