"""Ordered set of content roots.

Order is significant everywhere a root set is consulted: the first
root that has a file wins. Construction never touches the filesystem,
so roots that do not exist yet are accepted and simply miss at
resolution time.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger("perch.content")

# Mount name for roots whose last path component is empty or relative ("/", ".", "..")
DEFAULT_MOUNT_NAME = "static"

_UNNAMEABLE = frozenset({"", ".", ".."})


class ContentRootSet:
    """Immutable, ordered sequence of content directories.

    An empty input is replaced by the current process directory so
    there is always at least one root::

        roots = ContentRootSet(["./site", "/srv/shared"])
        list(roots)  # [PosixPath('site'), PosixPath('/srv/shared')]
    """

    __slots__ = ("_roots",)

    def __init__(self, roots: Iterable[str | os.PathLike[str]] = ()) -> None:
        paths = tuple(Path(root) for root in roots if str(root).strip())
        if not paths:
            paths = (Path.cwd(),)
        object.__setattr__(self, "_roots", paths)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "ContentRootSet is immutable"
        raise AttributeError(msg)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def __getitem__(self, index: int) -> Path:
        return self._roots[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentRootSet):
            return NotImplemented
        return self._roots == other._roots

    def __hash__(self) -> int:
        return hash(self._roots)

    def __repr__(self) -> str:
        return f"ContentRootSet({[str(root) for root in self._roots]!r})"

    @property
    def roots(self) -> tuple[Path, ...]:
        return self._roots

    def mount_names(self) -> list[tuple[str, Path]]:
        """Return ``(mount_name, root)`` pairs in root order.

        The mount name is the root's final path component. Roots where
        that is undeterminable get ``DEFAULT_MOUNT_NAME`` and a warning.
        """
        pairs: list[tuple[str, Path]] = []
        for root in self._roots:
            name = root.name
            if name in _UNNAMEABLE:
                logger.warning(
                    "Cannot derive a mount name from content root %r; mounting it as /%s",
                    str(root),
                    DEFAULT_MOUNT_NAME,
                )
                name = DEFAULT_MOUNT_NAME
            pairs.append((name, root))
        return pairs
