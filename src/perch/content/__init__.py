"""Content resolution — ordered roots, file probing, and static mounts.

All three pieces are built once at startup and only read afterwards:

    ContentRootSet -- Ordered, immutable list of content directories
    FileResolver -- First-match-wins lookup of a relative path across the roots
    NotFoundResolver -- Custom ``pages/404.html`` lookup with a literal fallback
    MountComposer -- ``/<basename>`` static mounts derived from the roots
"""

from perch.content.mounts import MountComposer, StaticMount, compose_mounts
from perch.content.resolver import (
    FALLBACK_NOT_FOUND_BODY,
    NOT_FOUND_PAGE,
    FileResolver,
    NotFoundResolver,
)
from perch.content.roots import DEFAULT_MOUNT_NAME, ContentRootSet

__all__ = [
    "DEFAULT_MOUNT_NAME",
    "FALLBACK_NOT_FOUND_BODY",
    "NOT_FOUND_PAGE",
    "ContentRootSet",
    "FileResolver",
    "MountComposer",
    "NotFoundResolver",
    "StaticMount",
    "compose_mounts",
]
