"""HTTP client for a running Trendscope server (used by the CLI)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from trendscope.domain.entities import (
    ConfigError,
    InputError,
    NetworkError,
    TrendscopeError,
    UpstreamError,
    VideoPage,
    VideoResult,
)

log = structlog.get_logger(__name__)

_ERRORS_BY_CODE: dict[str, type[TrendscopeError]] = {
    InputError.code: InputError,
    ConfigError.code: ConfigError,
    UpstreamError.code: UpstreamError,
}


class TrendscopeApiClient:
    """Fetches ranked pages from ``GET /api/v1/videos``.

    Error bodies (``{"error", "code"}``) are mapped back to the domain
    exceptions so callers handle local and remote search the same way.
    """

    def __init__(self, *, base_url: str, http_client: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_client

    @staticmethod
    def _error_from(resp: httpx.Response) -> TrendscopeError:
        try:
            body: Any = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            return NetworkError(f"unexpected response status {resp.status_code}")

        message = str(body.get("error") or f"status {resp.status_code}")
        error_type = _ERRORS_BY_CODE.get(str(body.get("code")))
        if error_type is None:
            if resp.status_code == 400:
                error_type = InputError
            else:
                error_type = NetworkError
        return error_type(message)

    async def fetch_page(self, term: str, page: int) -> VideoPage:
        try:
            resp = await self._http.get(
                f"{self._base_url}/api/v1/videos",
                params={"q": term, "page": page},
            )
        except httpx.HTTPError as e:
            log.warning("api_client_network_error", page=page, exc_info=True)
            raise NetworkError(f"request failed: {e}") from e

        if not resp.is_success:
            raise self._error_from(resp)

        try:
            data = resp.json()
            videos = [VideoResult.from_dict(item) for item in data.get("videos", [])]
            has_more = bool(data.get("hasMore", False))
        except (ValueError, AttributeError, KeyError, TypeError) as e:
            raise NetworkError("invalid response body") from e

        return VideoPage(results=videos, has_more=has_more)
