"""Video search use case: one ranked page per request."""

from __future__ import annotations

import time

import structlog

from trendscope.domain.entities import InputError, VideoPage, VideoQuery
from trendscope.domain.ports.search_provider import SearchProviderPort
from trendscope.infrastructure.ranking.aggregator import RankingAggregator

log = structlog.get_logger(__name__)


class VideoSearchUseCase:
    """Fetches one page of raw records and ranks it.

    Flow:
        1. Validate term and page
        2. Fetch raw records via the provider (ConfigError / UpstreamError /
           NetworkError propagate unchanged)
        3. Normalize + estimate + sort via the aggregator

    Stateless: safe to share between concurrent requests.
    """

    def __init__(
        self,
        provider: SearchProviderPort,
        aggregator: RankingAggregator,
    ) -> None:
        self.provider = provider
        self.aggregator = aggregator

    async def execute(self, q: VideoQuery) -> VideoPage:
        """Return the ranked page for ``q``.

        Raises:
            InputError: Empty term or page < 1 (before any network call).
        """
        term = (q.term or "").strip()
        if not term:
            raise InputError("关键词不能为空")
        if q.page < 1:
            raise InputError("页码必须大于等于 1")

        start = time.perf_counter()
        raw = await self.provider.search_videos(term, q.page)
        page = self.aggregator.aggregate(raw, q.page, query=term)

        log.info(
            "video_search_completed",
            query=term,
            page=q.page,
            raw_count=len(raw),
            result_count=len(page.results),
            has_more=page.has_more,
            duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
        )
        return page

    async def fetch_page(self, term: str, page: int) -> VideoPage:
        """``(term, page) -> VideoPage`` adapter for PaginationController."""
        return await self.execute(VideoQuery(term=term, page=page))
