"""Download proxy: fetch a remote image server-side and return it as attachment."""

from __future__ import annotations

from typing import cast

import httpx
import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import Response, StreamingResponse

from trendscope.infrastructure.proxy.image_fetcher import (
    download_filename,
    is_absolute_http_url,
    stream_image,
)
from trendscope.interfaces.api.errors import error_json
from trendscope.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["download"])

MISSING_URL_MESSAGE = "缺少图片链接"
DOWNLOAD_FAILED_MESSAGE = "下载失败，原图可能已失效"


@router.get("/download")
async def download_image(
    request: Request,
    url: str | None = Query(default=None, description="Absolute image URL"),
) -> Response:
    """Stream a remote image back with ``Content-Disposition: attachment``.

    Flow:
        1. Validate ``url`` (absolute http/https)
        2. Fetch upstream via the shared HTTP client (streamed, not buffered)
        3. Mirror upstream Content-Type (default image/jpeg)

    Returns 400 for a missing/invalid URL and 500 when the fetch fails or
    the upstream status is not 2xx.
    """
    state = cast(AppState, request.app.state)

    if url is None or not is_absolute_http_url(url):
        log.info("download_rejected", reason="missing_url" if not url else "invalid_url")
        return error_json(MISSING_URL_MESSAGE, "invalid_input", 400)

    try:
        body, content_type = await stream_image(state.http_client, url)
    except httpx.HTTPStatusError as e:
        log.warning(
            "download_upstream_status",
            url=url,
            status=e.response.status_code,
        )
        return error_json(DOWNLOAD_FAILED_MESSAGE, "server_error", 500)
    except httpx.HTTPError:
        log.warning("download_failed", url=url, exc_info=True)
        return error_json(DOWNLOAD_FAILED_MESSAGE, "server_error", 500)

    filename = download_filename(url)
    log.info("download_proxied", url=url, filename=filename, content_type=content_type)

    return StreamingResponse(
        body,
        media_type=content_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
