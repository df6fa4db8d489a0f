"""SerpApi client: async httpx implementation with raw-response caching."""

from __future__ import annotations

import hashlib
import json
from typing import Any

import httpx
import structlog

from trendscope.domain.entities.errors import ConfigError, NetworkError, UpstreamError
from trendscope.domain.ports.cache import CachePort
from trendscope.domain.ports.search_provider import RawRecord
from trendscope.infrastructure.ranking.platforms import site_scoped_query

log = structlog.get_logger(__name__)

_BASE_URL = "https://serpapi.com/search.json"

# Payload keys holding video records, in fallback order.
_VIDEO_RESULT_KEYS = ("video_results", "organic_results", "inline_videos")
_IMAGE_RESULT_KEY = "images_results"

MISSING_KEY_MESSAGE = "后端未读取到 SerpApi Key，请检查环境变量 SERPAPI_KEY 并重启服务"


class HttpxSerpApiClient:
    """Async SerpApi client using httpx + optional CachePort.

    Implements ``SearchProviderPort`` from domain.ports.search_provider.
    Never retries; every failure is classified into a domain error.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        http_client: httpx.AsyncClient,
        base_url: str = _BASE_URL,
        language: str = "zh-cn",
        image_region: str = "cn",
        page_size: int = 10,
        cache: CachePort | None = None,
        search_ttl: int = 300,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url
        self._language = language
        self._image_region = image_region
        self._page_size = page_size
        self._cache = cache
        self._search_ttl = search_ttl

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _require_key(self) -> str:
        if not self._api_key:
            log.error("serpapi_key_missing")
            raise ConfigError(MISSING_KEY_MESSAGE)
        return self._api_key

    def video_params(self, term: str, page: int) -> dict[str, Any]:
        """Query params for one page of the platform-scoped video search."""
        return {
            "engine": "google",
            "q": site_scoped_query(term),
            "tbm": "vid",
            "hl": self._language,
            "start": (page - 1) * self._page_size,
            "num": self._page_size,
        }

    def image_params(self, term: str) -> dict[str, Any]:
        return {
            "engine": "google_images",
            "q": term,
            "gl": self._image_region,
            "hl": self._language,
        }

    @staticmethod
    def _cache_key(params: dict[str, Any]) -> str:
        raw = json.dumps(params, sort_keys=True, ensure_ascii=False)
        digest = hashlib.sha256(raw.encode()).hexdigest()[:16]
        return f"serpapi:{params['engine']}:{digest}"

    async def _cache_get(self, key: str) -> list[RawRecord] | None:
        if self._cache is None or self._search_ttl <= 0:
            return None
        try:
            cached = await self._cache.get(key)
        except Exception:
            log.warning("serpapi_cache_read_failed", cache_key=key, exc_info=True)
            return None
        if isinstance(cached, list):
            log.debug("serpapi_cache_hit", cache_key=key, count=len(cached))
            return cached
        return None

    async def _cache_set(self, key: str, records: list[RawRecord]) -> None:
        if self._cache is None or self._search_ttl <= 0:
            return
        try:
            await self._cache.set(key, records, ttl=self._search_ttl)
        except Exception:
            log.warning("serpapi_cache_write_failed", cache_key=key, exc_info=True)

    async def _get(self, params: dict[str, Any]) -> dict[str, Any]:
        """GET with error classification. Returns the parsed JSON object."""
        api_key = self._require_key()
        engine = params.get("engine")
        try:
            resp = await self._http.get(
                self._base_url, params={**params, "api_key": api_key}
            )
        except httpx.TimeoutException as e:
            log.warning("serpapi_timeout", engine=engine)
            raise NetworkError("搜索服务请求超时") from e
        except httpx.HTTPError as e:
            log.warning("serpapi_network_error", engine=engine, exc_info=True)
            raise NetworkError("搜索服务网络异常") from e

        try:
            data = resp.json()
        except ValueError as e:
            log.warning(
                "serpapi_invalid_json", engine=engine, status=resp.status_code
            )
            raise NetworkError("搜索服务返回了无法解析的响应") from e

        # SerpApi reports bad keys/quotas as an error payload, often with 4xx.
        if isinstance(data, dict) and data.get("error"):
            log.error(
                "serpapi_error",
                engine=engine,
                status=resp.status_code,
                error=data["error"],
            )
            raise UpstreamError(f"SerpApi 报错: {data['error']}")

        if not resp.is_success:
            log.warning("serpapi_http_error", engine=engine, status=resp.status_code)
            raise NetworkError(f"搜索服务返回异常状态 {resp.status_code}")

        if not isinstance(data, dict):
            log.warning("serpapi_unexpected_payload", engine=engine)
            raise NetworkError("搜索服务返回了无法解析的响应")
        return data

    @staticmethod
    def pick_video_records(data: dict[str, Any]) -> list[RawRecord]:
        """First non-empty list among the known video result keys."""
        for key in _VIDEO_RESULT_KEYS:
            records = data.get(key)
            if isinstance(records, list) and records:
                return records
        return []

    # ------------------------------------------------------------------
    # Public API (SearchProviderPort)
    # ------------------------------------------------------------------

    async def search_videos(self, term: str, page: int = 1) -> list[RawRecord]:
        """Raw video records for one page, in upstream order."""
        self._require_key()
        params = self.video_params(term, page)
        cache_key = self._cache_key(params)
        cached = await self._cache_get(cache_key)
        if cached is not None:
            return cached

        data = await self._get(params)
        records = self.pick_video_records(data)
        log.info("serpapi_videos_fetched", page=page, count=len(records))
        await self._cache_set(cache_key, records)
        return records

    async def search_images(self, term: str) -> list[RawRecord]:
        self._require_key()
        params = self.image_params(term)
        cache_key = self._cache_key(params)
        cached = await self._cache_get(cache_key)
        if cached is not None:
            return cached

        data = await self._get(params)
        records = data.get(_IMAGE_RESULT_KEY) or []
        if not isinstance(records, list):
            records = []
        log.info("serpapi_images_fetched", count=len(records))
        await self._cache_set(cache_key, records)
        return records
