"""Shared fixtures: throwaway content trees on disk."""

from pathlib import Path

import pytest

from perch.app import App
from perch.config import ServerConfig

PAGES = {
    "index.html": "<h1>Index</h1>",
    "pages/home.html": "<h1>Home</h1>",
    "pages/services.html": "<h1>Services</h1>",
    "pages/contact-us.html": "<h1>Contact</h1>",
    "pages/about-us.html": "<h1>About</h1>",
}


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A complete site: every logical page, a custom 404, assets and styles."""
    return write_tree(
        tmp_path / "site",
        {
            **PAGES,
            "pages/404.html": "<h1>Custom 404</h1>",
            "assets/logo.svg": "<svg></svg>",
            "assets/img/photo.png": b"\x89PNG\r\n\x1a\n",
            "styles/main.css": "body { color: red; }",
        },
    )


@pytest.fixture
def make_app():
    """Build an App over the given content directories."""

    def factory(*content_dirs: Path | str, **overrides: object) -> App:
        config = ServerConfig(content_dirs=tuple(str(d) for d in content_dirs), **overrides)  # type: ignore[arg-type]
        return App(config)

    return factory


@pytest.fixture(name="write_tree")
def write_tree_fixture():
    """Expose ``write_tree`` to tests that build their own layouts."""
    return write_tree


@pytest.fixture
def deny_under(monkeypatch: pytest.MonkeyPatch):
    """Make ``Path.<method>`` raise PermissionError for paths under a directory.

    Stands in for ``chmod 0``, which has no effect when tests run as root.
    """

    def deny(root: Path, method: str) -> None:
        original = getattr(Path, method)

        def guarded(self, *args, **kwargs):
            if self.is_relative_to(root):
                raise PermissionError(13, "Permission denied", str(self))
            return original(self, *args, **kwargs)

        monkeypatch.setattr(Path, method, guarded)

    return deny
