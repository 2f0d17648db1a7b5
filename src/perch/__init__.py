"""Perch — a static content server.

Maps a closed set of page routes to HTML files found by probing an
ordered list of content directories, exposes each directory as a
static mount named after its basename, and answers everything else
with a custom 404 page.

Basic usage::

    from perch import App, ServerConfig

    app = App(ServerConfig(content_dirs=("./site", "./site/assets")))
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "ContentRootSet",
    "FileResolver",
    "HTTPError",
    "MethodNotAllowed",
    "MountComposer",
    "NotFound",
    "NotFoundResolver",
    "PerchError",
    "Request",
    "Response",
    "RouteTable",
    "ServerConfig",
    "StaticMount",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "ServerConfig":
        from perch.config import ServerConfig

        return ServerConfig

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name == "Response":
        from perch.http.response import Response

        return Response

    if name == "RouteTable":
        from perch.routing.pages import RouteTable

        return RouteTable

    if name in ("ContentRootSet", "FileResolver", "MountComposer", "NotFoundResolver", "StaticMount"):
        from perch import content as _content

        return getattr(_content, name)

    if name in ("ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound", "PerchError"):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
