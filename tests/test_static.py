"""Tests for per-mount static file serving."""

import gzip
import logging
from pathlib import Path

import pytest

from perch.content.mounts import StaticMount
from perch.http.headers import Headers
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.static import StaticFiles


@pytest.fixture
def assets(tmp_path: Path, write_tree) -> Path:
    return write_tree(
        tmp_path / "assets",
        {
            "style.css": "body { color: red; }",
            "app.js": "console.log('hello');",
            "image.png": b"\x89PNG\r\n\x1a\n",
            "data.bin": b"\x00\x01\x02\x03",
            "docs/index.html": "<h1>Docs</h1>",
            "empty/.keep": "",
            "bundle.js": "var a = 1;",
            "bundle.js.gz": gzip.compress(b"var a = 1;"),
        },
    )


def _request(path: str, method: str = "GET", **headers: str) -> Request:
    raw = tuple((k.replace("_", "-").encode(), v.encode()) for k, v in headers.items())
    return Request(method=method, path=path, headers=Headers(raw))


async def _next(request: Request) -> Response:
    return Response(body="fell through", status=418)


def _static(directory: Path) -> StaticFiles:
    return StaticFiles(StaticMount(name=directory.name, directory=directory))


class TestStaticFileServing:
    async def test_serves_css(self, assets) -> None:
        response = await _static(assets)(_request("/assets/style.css"), _next)
        assert response.status == 200
        assert response.content_type == "text/css; charset=utf-8"
        assert response.body == b"body { color: red; }"

    async def test_serves_binary(self, assets) -> None:
        response = await _static(assets)(_request("/assets/image.png"), _next)
        assert response.content_type == "image/png"
        assert response.body == b"\x89PNG\r\n\x1a\n"

    async def test_unknown_extension_gets_octet_stream(self, assets) -> None:
        response = await _static(assets)(_request("/assets/data.bin"), _next)
        assert response.content_type == "application/octet-stream"

    async def test_directory_serves_index(self, assets) -> None:
        response = await _static(assets)(_request("/assets/docs/"), _next)
        assert response.status == 200
        assert response.body == b"<h1>Docs</h1>"

    async def test_directory_without_index_is_not_listed(self, assets) -> None:
        response = await _static(assets)(_request("/assets/empty/"), _next)
        assert response.status == 404
        assert response.body == "Not Found"

    async def test_head_is_served(self, assets) -> None:
        response = await _static(assets)(_request("/assets/app.js", method="HEAD"), _next)
        assert response.status == 200


class TestStaticFallthrough:
    async def test_other_prefix_falls_through(self, assets) -> None:
        response = await _static(assets)(_request("/styles/main.css"), _next)
        assert response.status == 418

    async def test_similar_prefix_falls_through(self, assets) -> None:
        response = await _static(assets)(_request("/assets2/style.css"), _next)
        assert response.status == 418

    async def test_post_falls_through(self, assets) -> None:
        response = await _static(assets)(_request("/assets/style.css", method="POST"), _next)
        assert response.status == 418

    async def test_miss_inside_mount_does_not_fall_through(self, assets) -> None:
        response = await _static(assets)(_request("/assets/nope.css"), _next)
        assert response.status == 404
        assert response.content_type.startswith("text/plain")

    async def test_missing_mount_directory(self, tmp_path) -> None:
        response = await _static(tmp_path / "gone")(_request("/gone/a.txt"), _next)
        assert response.status == 404

    async def test_null_byte_is_not_found(self, assets) -> None:
        response = await _static(assets)(_request("/assets/bad\x00name.css"), _next)
        assert response.status == 404
        assert response.text == "Not Found"

    async def test_unreadable_mount_directory(self, assets, deny_under, caplog) -> None:
        deny_under(assets.resolve(), "is_file")
        with caplog.at_level(logging.WARNING, logger="perch.content"):
            response = await _static(assets)(_request("/assets/style.css"), _next)
        assert response.status == 404
        assert "Cannot look up" in caplog.text


class TestStaticPathTraversal:
    async def test_dotdot_is_forbidden(self, assets) -> None:
        (assets.parent / "secret.txt").write_text("secret")
        response = await _static(assets)(_request("/assets/../secret.txt"), _next)
        assert response.status == 403

    async def test_symlink_escape_is_forbidden(self, assets) -> None:
        outside = assets.parent / "outside.txt"
        outside.write_text("outside")
        (assets / "link.txt").symlink_to(outside)
        response = await _static(assets)(_request("/assets/link.txt"), _next)
        assert response.status == 403


class TestPrecompressed:
    async def test_gz_sibling_served_when_accepted(self, assets) -> None:
        request = _request("/assets/bundle.js", accept_encoding="gzip, deflate")
        response = await _static(assets)(request, _next)
        assert response.header("Content-Encoding") == "gzip"
        assert response.header("Vary") == "Accept-Encoding"
        assert gzip.decompress(response.body_bytes) == b"var a = 1;"
        assert "javascript" in response.content_type

    async def test_plain_file_without_accept_encoding(self, assets) -> None:
        response = await _static(assets)(_request("/assets/bundle.js"), _next)
        assert response.header("Content-Encoding") is None
        assert response.body == b"var a = 1;"

    async def test_gzip_refused_with_q_zero(self, assets) -> None:
        request = _request("/assets/bundle.js", accept_encoding="gzip;q=0")
        response = await _static(assets)(request, _next)
        assert response.header("Content-Encoding") is None

    async def test_disabled(self, assets) -> None:
        static = StaticFiles(
            StaticMount(name="assets", directory=assets),
            precompressed_gzip=False,
        )
        response = await static(_request("/assets/bundle.js", accept_encoding="gzip"), _next)
        assert response.header("Content-Encoding") is None
