"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from trendscope.application.use_cases import ImageSearchUseCase, VideoSearchUseCase
from trendscope.domain.ports import CachePort
from trendscope.infrastructure.cache import DiskcacheAdapter
from trendscope.infrastructure.config import AppConfig
from trendscope.infrastructure.ranking import (
    MetricEstimator,
    RankingAggregator,
    ResultNormalizer,
    SystemRandomSource,
)
from trendscope.infrastructure.serpapi import HttpxSerpApiClient
from trendscope.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_search_provider(
    config: AppConfig,
    http_client: httpx.AsyncClient,
    cache: CachePort | None = None,
) -> HttpxSerpApiClient:
    return HttpxSerpApiClient(
        api_key=config.serpapi_api_key,
        http_client=http_client,
        base_url=config.serpapi_base_url,
        language=config.search_language,
        image_region=config.image_region,
        page_size=config.ranking.page_size,
        cache=cache,
        search_ttl=config.cache.search_ttl_seconds,
    )


def build_aggregator(config: AppConfig) -> RankingAggregator:
    """Estimator -> normalizer -> aggregator, all sharing ``config.ranking``."""
    estimator = MetricEstimator(config.ranking, SystemRandomSource())
    normalizer = ResultNormalizer(estimator, config.ranking)
    return RankingAggregator(normalizer, config.ranking)


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    # No retry transport: failures surface per request.
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Cache (raw upstream responses)
        2. HTTP Client (shared by provider client and download proxy)
        3. SerpApi client (uses HTTP client + cache)
        4. Ranking pipeline (estimator -> normalizer -> aggregator)
        5. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    cache = DiskcacheAdapter(
        directory=config.cache.directory,
        ttl_seconds=config.cache.ttl_seconds,
        max_concurrent=config.cache.max_concurrent,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", directory=str(config.cache.directory))

    # 2) HTTP client
    state.http_client = build_http_client(config)
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 3) Search provider
    state.search_provider = build_search_provider(
        config, state.http_client, state.cache
    )
    if not config.serpapi_api_key:
        # Not fatal: search requests answer 401 config_missing until it is set.
        log.warning("serpapi_key_not_configured")
    log.info("search_provider_initialized", base_url=config.serpapi_base_url)

    # 4) + 5) Ranking pipeline and use cases (stateless, shared between requests)
    state.video_search = VideoSearchUseCase(
        provider=state.search_provider,
        aggregator=build_aggregator(config),
    )
    state.image_search = ImageSearchUseCase(provider=state.search_provider)
    log.info("use_cases_initialized")

    try:
        yield
    finally:
        log.info("app_shutdown_started")

        http_client = getattr(state, "http_client", None)
        if http_client is not None:
            await http_client.aclose()
            log.info("http_client_closed")

        cache = getattr(state, "cache", None)
        if cache is not None:
            await cache.aclose()

        log.info("app_shutdown_complete")
