"""Static mounts derived from content root basenames.

``/srv/site/assets`` becomes the mount ``/assets``. Two roots with the
same basename collide; the later root in the configured order replaces
the earlier registration entirely (last-wins), so nothing under the
earlier directory is reachable through that prefix.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from perch.content.roots import ContentRootSet

logger = logging.getLogger("perch.content")


@dataclass(frozen=True, slots=True)
class StaticMount:
    """A URL prefix exposing one directory subtree."""

    name: str
    directory: Path

    @property
    def prefix(self) -> str:
        return f"/{self.name}"

    def relative_path(self, path: str) -> str | None:
        """Return the part of *path* under this mount, or None if outside it."""
        if path == self.prefix:
            return ""
        if path.startswith(self.prefix + "/"):
            return path[len(self.prefix) + 1 :]
        return None


def compose_mounts(roots: ContentRootSet) -> tuple[StaticMount, ...]:
    """Derive the mount table from *roots*. Pure apart from warning logs.

    Result order follows the winning root of each mount name.
    """
    table: dict[str, StaticMount] = {}
    for name, root in roots.mount_names():
        previous = table.pop(name, None)
        if previous is not None:
            logger.warning(
                "Mount /%s: %s replaces earlier content root %s",
                name,
                root,
                previous.directory,
            )
        table[name] = StaticMount(name=name, directory=root)
    return tuple(table.values())


class MountComposer:
    """Holds the mount table computed once from a ``ContentRootSet``."""

    __slots__ = ("_mounts",)

    def __init__(self, roots: ContentRootSet) -> None:
        self._mounts = compose_mounts(roots)

    def mounts(self) -> tuple[StaticMount, ...]:
        return self._mounts
