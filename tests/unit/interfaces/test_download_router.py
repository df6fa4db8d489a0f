"""Tests for the image download proxy endpoint."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import respx
from fastapi import FastAPI
from fastapi.testclient import TestClient

from trendscope.interfaces.api.download import router

_PREFIX = "/api/v1"
_IMG = "https://img.example.com/gallery/vase.png"


def _make_app(http_client: httpx.AsyncClient | None = None) -> FastAPI:
    app = FastAPI()
    app.include_router(router, prefix=_PREFIX)

    config = MagicMock()
    config.environment = "dev"

    app.state.config = config
    app.state.http_client = http_client or httpx.AsyncClient()
    return app


class TestValidation:
    def test_missing_url_is_400(self) -> None:
        client = TestClient(_make_app())
        resp = client.get(f"{_PREFIX}/download")
        assert resp.status_code == 400
        assert resp.json()["error"] == "缺少图片链接"

    def test_relative_url_is_400(self) -> None:
        client = TestClient(_make_app())
        resp = client.get(f"{_PREFIX}/download", params={"url": "/etc/passwd"})
        assert resp.status_code == 400


class TestProxy:
    @respx.mock
    def test_streams_attachment(self) -> None:
        respx.get(_IMG).mock(
            return_value=httpx.Response(
                200, content=b"PNGDATA", headers={"content-type": "image/png"}
            )
        )
        client = TestClient(_make_app())

        resp = client.get(f"{_PREFIX}/download", params={"url": _IMG})

        assert resp.status_code == 200
        assert resp.content == b"PNGDATA"
        assert resp.headers["content-type"] == "image/png"
        assert (
            resp.headers["content-disposition"] == 'attachment; filename="vase.png"'
        )

    @respx.mock
    def test_default_content_type(self) -> None:
        url = "https://img.example.com/render?id=7"
        respx.get(url).mock(return_value=httpx.Response(200, content=b"JPEG"))
        client = TestClient(_make_app())

        resp = client.get(f"{_PREFIX}/download", params={"url": url})

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/jpeg"
        assert 'filename="trendscope-image.jpg"' in resp.headers["content-disposition"]

    @respx.mock
    def test_upstream_404_is_500(self) -> None:
        respx.get(_IMG).mock(return_value=httpx.Response(404))
        client = TestClient(_make_app())

        resp = client.get(f"{_PREFIX}/download", params={"url": _IMG})

        assert resp.status_code == 500
        assert resp.json()["error"] == "下载失败，原图可能已失效"

    @respx.mock
    def test_network_failure_is_500(self) -> None:
        respx.get(_IMG).mock(side_effect=httpx.ConnectError("refused"))
        client = TestClient(_make_app())

        resp = client.get(f"{_PREFIX}/download", params={"url": _IMG})

        assert resp.status_code == 500
        assert resp.json()["error"] == "下载失败，原图可能已失效"
