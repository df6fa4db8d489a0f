"""Server-side image fetch for the download proxy.

The browser cannot save cross-origin images directly, so the API fetches
the original and streams it back as an attachment.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import AsyncIterator
from urllib.parse import unquote, urlsplit

import httpx

DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_FILENAME = "trendscope-image.jpg"

_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".avif"}
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def is_absolute_http_url(url: str | None) -> bool:
    if not url:
        return False
    parts = urlsplit(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def download_filename(url: str) -> str:
    """ASCII-safe attachment name from the URL path, else a generic default."""
    name = posixpath.basename(unquote(urlsplit(url).path))
    stem, ext = posixpath.splitext(name)
    if ext.lower() not in _IMAGE_EXTENSIONS:
        return DEFAULT_FILENAME
    stem = _UNSAFE_CHARS.sub("_", stem).strip("._")
    if not stem:
        return DEFAULT_FILENAME
    return f"{stem[:80]}{ext.lower()}"


async def stream_image(
    http_client: httpx.AsyncClient,
    url: str,
) -> tuple[AsyncIterator[bytes], str]:
    """Stream an image without buffering the full body.

    Returns ``(byte_iterator, content_type)``.
    Raises ``httpx.HTTPStatusError`` on non-2xx responses.
    """
    resp = await http_client.send(
        http_client.build_request("GET", url),
        stream=True,
        follow_redirects=True,
    )
    try:
        resp.raise_for_status()
    except httpx.HTTPStatusError:
        await resp.aclose()
        raise

    ct = resp.headers.get("content-type") or DEFAULT_CONTENT_TYPE

    async def _iter() -> AsyncIterator[bytes]:
        try:
            async for chunk in resp.aiter_bytes(chunk_size=65536):
                yield chunk
        finally:
            await resp.aclose()

    return _iter(), ct
