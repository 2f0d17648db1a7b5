"""Static file serving for one mount.

Serves any file under the mount's directory at ``{prefix}/{sub/path}``.
Paths outside the prefix fall through to the next handler. A miss
inside the prefix is answered right here with a plain ``Not Found``;
it does not fall through to the custom 404 page.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path

from anyio import to_thread

from perch.content.mounts import StaticMount
from perch.http.request import Request
from perch.http.response import PLAIN_TEXT, Response
from perch.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("perch.content")


@dataclass(frozen=True, slots=True)
class _FileHit:
    path: Path
    body: bytes
    gzipped: bool = False


class StaticFiles:
    """Serve the files of one ``StaticMount``.

    Security: resolves symlinks and verifies the final path is within
    the mount directory to prevent path traversal.

    Behaviour:
    - ``GET`` and ``HEAD`` only; other methods fall through
    - a directory serves its ``index.html`` when it has one (no listings)
    - ``<file>.gz`` is sent instead of ``<file>`` when the client accepts gzip

    Usage::

        StaticFiles(StaticMount(name="assets", directory=Path("./assets")))
    """

    __slots__ = ("_directory", "_index", "_mount", "_precompressed")

    def __init__(
        self,
        mount: StaticMount,
        *,
        index: str = "index.html",
        precompressed_gzip: bool = True,
    ) -> None:
        self._mount = mount
        self._directory = mount.directory
        self._index = index
        self._precompressed = precompressed_gzip

    @property
    def mount(self) -> StaticMount:
        return self._mount

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        relative = self._mount.relative_path(request.path)
        if relative is None:
            return await next(request)

        accepts_gzip = self._precompressed and request.headers.accepts_encoding("gzip")
        hit = await to_thread.run_sync(self._lookup, relative, accepts_gzip)
        if hit is None:
            return self._not_found()
        if hit is False:
            return Response(body="Forbidden", status=403, content_type=PLAIN_TEXT)
        return self._serve(hit)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lookup(self, relative: str, accepts_gzip: bool) -> _FileHit | bool | None:
        """Blocking lookup. ``None`` = miss, ``False`` = outside the mount."""
        try:
            return self._find(relative, accepts_gzip)
        except ValueError:
            # Paths the OS cannot represent (embedded NUL)
            logger.debug("Rejected unrepresentable path %r under %s", relative, self._mount.prefix)
            return None
        except OSError as exc:
            logger.warning("Cannot look up %r under %s: %s", relative, self._mount.prefix, exc)
            return None

    def _find(self, relative: str, accepts_gzip: bool) -> _FileHit | bool | None:
        directory = self._directory.resolve()
        file_path = (directory / relative).resolve() if relative else directory
        if not file_path.is_relative_to(directory):
            return False

        if file_path.is_dir():
            file_path = file_path / self._index

        if not file_path.is_file():
            return None

        if accepts_gzip:
            gz_path = file_path.with_name(file_path.name + ".gz")
            if gz_path.is_file():
                body = _read(gz_path)
                if body is not None:
                    return _FileHit(path=file_path, body=body, gzipped=True)

        body = _read(file_path)
        if body is None:
            return None
        return _FileHit(path=file_path, body=body)

    def _serve(self, hit: _FileHit) -> Response:
        content_type, _ = mimetypes.guess_type(hit.path.name)
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/") or content_type in (
            "application/javascript",
            "application/json",
            "image/svg+xml",
        ):
            content_type = f"{content_type}; charset=utf-8"

        response = Response(body=hit.body, content_type=content_type)
        if hit.gzipped:
            response = response.with_header("Content-Encoding", "gzip").with_header(
                "Vary", "Accept-Encoding"
            )
        return response

    def _not_found(self) -> Response:
        return Response(body="Not Found", status=404, content_type=PLAIN_TEXT)


def _read(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as exc:
        logger.warning("Skipping unreadable static file %s: %s", path, exc)
        return None
