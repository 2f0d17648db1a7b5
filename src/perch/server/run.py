"""Start the ASGI server for a perch App.

uvicorn owns the listening socket, HTTP parsing and connection
handling; perch only hands it the live App object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perch.app import App


def run_server(app: App, host: str, port: int, *, log_level: str = "info") -> None:
    """Bind *host*:*port* and serve *app* until interrupted.

    uvicorn's own access log stays off: ``AccessLogMiddleware`` already
    logs every request.
    """
    import uvicorn

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
        access_log=False,
        lifespan="on",
    )
