"""Tests for the access log middleware."""

import logging

import pytest

from perch.http.headers import Headers
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.access_log import AccessLogMiddleware


def _request(path: str = "/about-us") -> Request:
    return Request(method="GET", path=path, headers=Headers(), client=("10.0.0.1", 5000))


class TestAccessLog:
    async def test_logs_one_line(self, caplog) -> None:
        async def handler(request: Request) -> Response:
            return Response("ok")

        with caplog.at_level(logging.INFO, logger="perch.access"):
            response = await AccessLogMiddleware()(_request(), handler)

        assert response.body == "ok"
        [record] = [r for r in caplog.records if r.name == "perch.access"]
        assert record.getMessage().startswith("GET /about-us 200 ")
        assert record.getMessage().endswith("ms")
        assert record.client == "10.0.0.1"

    async def test_logs_not_found_status(self, caplog) -> None:
        async def handler(request: Request) -> Response:
            return Response("missing", status=404)

        with caplog.at_level(logging.INFO, logger="perch.access"):
            await AccessLogMiddleware()(_request("/nope"), handler)
        assert "GET /nope 404" in caplog.text

    async def test_exception_logged_as_500_and_reraised(self, caplog) -> None:
        async def handler(request: Request) -> Response:
            raise RuntimeError("boom")

        with caplog.at_level(logging.INFO, logger="perch.access"), pytest.raises(RuntimeError):
            await AccessLogMiddleware()(_request(), handler)
        assert "GET /about-us 500" in caplog.text
