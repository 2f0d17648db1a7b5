"""Tests for the static site example."""

import gzip

import pytest

from perch.testing import TestClient


class TestStaticSitePages:
    """Logical pages are served from public/."""

    async def test_index_page(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.content_type == "text/html; charset=utf-8"
            assert "<h1>Perch Coffee</h1>" in response.text

    @pytest.mark.parametrize(
        ("path", "heading"),
        [
            ("/index", "<h1>Home</h1>"),
            ("/services", "<h1>Services</h1>"),
            ("/about-us", "<h1>About us</h1>"),
            ("/contact-us", "<h1>Contact us</h1>"),
        ],
    )
    async def test_section_pages(self, example_app, path: str, heading: str) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(path)
            assert response.status == 200
            assert heading in response.text

    async def test_custom_404(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/menu")
            assert response.status == 404
            assert "That page has flown off." in response.text


class TestStaticSiteMounts:
    """Each content root is exposed under its directory name."""

    async def test_stylesheet(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/styles/site.css")
            assert response.status == 200
            assert response.content_type.startswith("text/css")
            assert "--brand" in response.text

    async def test_logo(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/assets/logo.svg")
            assert response.status == 200
            assert response.content_type.startswith("image/svg+xml")

    async def test_public_root_mount(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/public/pages/services.html")
            assert response.status == 200
            assert "<h1>Services</h1>" in response.text

    async def test_mount_table(self, example_app) -> None:
        assert [m.name for m in example_app.mounts] == ["public", "assets", "styles"]


class TestStaticSiteHeaders:
    """Compression and CORS apply to every response."""

    async def test_stylesheet_is_gzipped(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get(
                "/styles/site.css", headers={"Accept-Encoding": "gzip"}
            )
            assert response.header("content-encoding") == "gzip"
            assert b"--brand" in gzip.decompress(response.body)

    async def test_cors_allows_any_origin(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/", headers={"Origin": "https://example.org"})
            assert response.header("access-control-allow-origin") == "*"
