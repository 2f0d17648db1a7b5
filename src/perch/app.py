"""Perch application class.

Everything a request needs (content roots, resolvers, route table,
static mounts, middleware) is built once and then only read. The
request pipeline is compiled on first use and never changes after.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch.config import ServerConfig
from perch.content.mounts import MountComposer, StaticMount
from perch.content.resolver import FileResolver, NotFoundResolver
from perch.content.roots import ContentRootSet
from perch.middleware.access_log import AccessLogMiddleware
from perch.middleware.builtin import CORSMiddleware
from perch.middleware.compression import CompressionConfig, CompressionMiddleware
from perch.middleware.protocol import Middleware, Next
from perch.middleware.static import StaticFiles
from perch.routing.pages import RouteTable
from perch.server.handler import compose_pipeline, handle_request

logger = logging.getLogger("perch.server")


class App:
    """The perch static content server.

    Usage::

        from perch import App, ServerConfig

        app = App(ServerConfig(content_dirs=("/srv/site", "/srv/site/assets")))
        app.run()

    Thread safety:
        Extra middleware may only be added before the first request.
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the pipeline.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_middleware_list",
        "_mounts",
        "_not_found",
        "_pipeline",
        "_resolver",
        "_roots",
        "_routes",
        "config",
    )

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        roots: ContentRootSet | None = None,
    ) -> None:
        self.config: ServerConfig = config or ServerConfig()
        self._roots: ContentRootSet = roots or ContentRootSet(self.config.content_dirs)
        self._resolver = FileResolver(self._roots)
        self._not_found = NotFoundResolver(self._resolver)
        self._routes = RouteTable(self._resolver)
        self._mounts = MountComposer(self._roots)
        self._middleware_list: list[Middleware] = []
        self._pipeline: Next | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Read-only state --

    @property
    def roots(self) -> ContentRootSet:
        return self._roots

    @property
    def resolver(self) -> FileResolver:
        return self._resolver

    @property
    def not_found(self) -> NotFoundResolver:
        return self._not_found

    @property
    def routes(self) -> RouteTable:
        return self._routes

    @property
    def mounts(self) -> tuple[StaticMount, ...]:
        return self._mounts.mounts()

    # -- Setup --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add middleware inside the built-in stack (runs after CORS)."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start serving with uvicorn. Blocks until interrupted."""
        from perch.logs import configure_logging
        from perch.server.run import run_server

        configure_logging(self.config.log_level, self.config.log_format)
        self._ensure_frozen()

        bind_host = host or self.config.host
        bind_port = port if port is not None else self.config.port
        logger.info("Listening on %s:%d", bind_host, bind_port)
        run_server(self, bind_host, bind_port, log_level=self.config.log_level)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._pipeline is not None
        await handle_request(scope, receive, send, pipeline=self._pipeline)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            msg_type = message["type"]
            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the request pipeline.

        MUST only be called while holding _freeze_lock.
        """
        middleware: list[Callable[..., Any]] = []
        if self.config.access_log:
            middleware.append(AccessLogMiddleware())
        middleware.append(
            CompressionMiddleware(CompressionConfig(min_size=self.config.compression_min_size))
        )
        middleware.append(CORSMiddleware(self.config.cors))
        middleware.extend(self._middleware_list)

        # Exact logical routes first, then static mounts, then the 404 fallback
        dispatchers: list[Callable[..., Any]] = [self._routes]
        dispatchers.extend(StaticFiles(mount) for mount in self._mounts.mounts())

        self._pipeline = compose_pipeline(middleware, dispatchers, self._not_found)
        self._frozen = True

        for index, root in enumerate(self._roots, start=1):
            logger.info("Content root %d: %s", index, root)
        for mount in self._mounts.mounts():
            logger.info("Mounted %s -> %s", mount.prefix, mount.directory)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Add middleware before calling app.run()."
            )
            raise RuntimeError(msg)
