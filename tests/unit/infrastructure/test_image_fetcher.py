"""Tests for the download-proxy image fetcher."""

from __future__ import annotations

import httpx
import pytest
import respx

from trendscope.infrastructure.proxy.image_fetcher import (
    DEFAULT_FILENAME,
    download_filename,
    is_absolute_http_url,
    stream_image,
)

_IMG = "https://img.example.com/photos/blue-white.png"


class TestUrlValidation:
    @pytest.mark.parametrize(
        ("url", "ok"),
        [
            (_IMG, True),
            ("http://img.example.com/a.jpg", True),
            ("/relative/a.jpg", False),
            ("ftp://img.example.com/a.jpg", False),
            ("javascript:alert(1)", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_absolute_http_url(self, url: str | None, ok: bool) -> None:
        assert is_absolute_http_url(url) is ok


class TestFilename:
    def test_uses_url_basename(self) -> None:
        assert download_filename(_IMG) == "blue-white.png"

    def test_non_ascii_is_replaced(self) -> None:
        name = download_filename("https://x.cn/%E9%9D%92%E8%8A%B1.JPG")
        assert name.endswith(".jpg")
        assert name.isascii()

    @pytest.mark.parametrize(
        "url",
        [
            "https://x.cn/image?id=1",
            "https://x.cn/",
            "https://x.cn/download.php",
        ],
    )
    def test_default_when_not_an_image_path(self, url: str) -> None:
        assert download_filename(url) == DEFAULT_FILENAME


class TestStreamImage:
    @respx.mock
    async def test_streams_body_and_content_type(self) -> None:
        respx.get(_IMG).mock(
            return_value=httpx.Response(
                200, content=b"\x89PNG-data", headers={"content-type": "image/png"}
            )
        )
        async with httpx.AsyncClient() as client:
            body, content_type = await stream_image(client, _IMG)
            chunks = [chunk async for chunk in body]
        assert b"".join(chunks) == b"\x89PNG-data"
        assert content_type == "image/png"

    @respx.mock
    async def test_default_content_type(self) -> None:
        respx.get(_IMG).mock(return_value=httpx.Response(200, content=b"x"))
        async with httpx.AsyncClient() as client:
            body, content_type = await stream_image(client, _IMG)
            _ = [chunk async for chunk in body]
        assert content_type == "image/jpeg"

    @respx.mock
    async def test_non_2xx_raises(self) -> None:
        respx.get(_IMG).mock(return_value=httpx.Response(404))
        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError):
                await stream_image(client, _IMG)
