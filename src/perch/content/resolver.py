"""File resolution across the ordered content roots.

Every call re-probes the filesystem; nothing is cached, so an edited or
deleted page is visible on the very next request. Blocking reads run in
an anyio worker thread so one slow disk read never stalls other
requests.
"""

import logging
from collections.abc import Callable
from pathlib import Path, PurePosixPath
from typing import Any

from anyio import to_thread

from perch.content.roots import ContentRootSet
from perch.errors import NotFound

logger = logging.getLogger("perch.content")

NOT_FOUND_PAGE = "pages/404.html"
FALLBACK_NOT_FOUND_BODY = "Page not found"


def _run_sync(func: Callable[..., Any], *args: Any) -> Any:
    """Run blocking call in anyio worker thread."""
    return to_thread.run_sync(func, *args)


def _relative(relative_path: str) -> PurePosixPath:
    rel = PurePosixPath(relative_path)
    if rel.is_absolute() or ".." in rel.parts:
        msg = f"Content paths must stay inside their root, got {relative_path!r}"
        raise ValueError(msg)
    return rel


class FileResolver:
    """Resolve a relative path to file bytes, first root wins.

    A root is skipped when the file is missing, is not a regular file,
    or cannot be read (permissions, deleted between check and read).
    Only after every root has been tried does resolution fail.

    Usage::

        resolver = FileResolver(ContentRootSet(["/srv/site", "/srv/shared"]))
        body = await resolver.resolve("pages/about-us.html")
    """

    __slots__ = ("_roots",)

    def __init__(self, roots: ContentRootSet) -> None:
        self._roots = roots

    @property
    def roots(self) -> ContentRootSet:
        return self._roots

    def probe(self, relative_path: str) -> bytes | None:
        """Blocking probe. Returns the first readable match, or None."""
        rel = _relative(relative_path)
        for root in self._roots:
            candidate = root / rel
            data = _read_file(candidate)
            if data is not None:
                return data
        logger.debug("%s not found in any of %d content roots", relative_path, len(self._roots))
        return None

    def resolve_sync(self, relative_path: str) -> bytes:
        """Blocking resolve. Raises ``NotFound`` when no root has the file."""
        data = self.probe(relative_path)
        if data is None:
            raise NotFound(f"{relative_path} is not in any content root")
        return data

    async def resolve(self, relative_path: str) -> bytes:
        """Resolve *relative_path* without blocking the event loop."""
        return await _run_sync(self.resolve_sync, relative_path)


def _read_file(path: Path) -> bytes | None:
    """Read a regular file, or return None if it is absent or unreadable.

    ``is_file()`` raises ``PermissionError`` when a parent directory
    cannot be entered, so the check sits inside the same guard as the read.
    """
    try:
        if not path.is_file():
            return None
        return path.read_bytes()
    except FileNotFoundError:
        # Removed between the is_file() check and the read
        logger.debug("%s disappeared before it could be read", path)
        return None
    except OSError as exc:
        logger.warning("Skipping unreadable content file %s: %s", path, exc)
        return None


class NotFoundResolver:
    """Produce the body for every 404 the server sends.

    Probes the content roots for ``pages/404.html``; when no root has
    one, the literal ``"Page not found"`` is used. Never fails.
    """

    __slots__ = ("_fallback", "_page", "_resolver")

    def __init__(
        self,
        resolver: FileResolver,
        *,
        page: str = NOT_FOUND_PAGE,
        fallback: str = FALLBACK_NOT_FOUND_BODY,
    ) -> None:
        self._resolver = resolver
        self._page = page
        self._fallback = fallback

    def body_sync(self) -> bytes | str:
        data = self._resolver.probe(self._page)
        if data is None:
            return self._fallback
        return data

    async def resolve404(self) -> bytes | str:
        """Return the custom 404 page bytes, or the literal fallback."""
        return await _run_sync(self.body_sync)
