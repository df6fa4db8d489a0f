"""Per-page ranking: normalize, drop unusable records, sort by score."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from trendscope.domain.entities.video import VideoPage, VideoResult
from trendscope.infrastructure.config.schema import RankingConfig
from trendscope.infrastructure.ranking.normalizer import ResultNormalizer

log = structlog.get_logger(__name__)


class RankingAggregator:
    """Turns one page of raw provider records into a ranked VideoPage.

    ``has_more`` is a heuristic on the *raw* record count: pages are requested
    in batches of ``page_size`` and a short page is taken as exhaustion.
    """

    def __init__(
        self,
        normalizer: ResultNormalizer | None = None,
        config: RankingConfig | None = None,
    ) -> None:
        self._config = config or RankingConfig()
        self._normalizer = normalizer or ResultNormalizer(config=self._config)

    def has_more_pages(self, raw_count: int) -> bool:
        return raw_count >= self._config.has_more_threshold

    def rank(self, results: list[VideoResult]) -> list[VideoResult]:
        """Score descending; sorted() is stable so ties keep upstream order."""
        return sorted(results, key=lambda v: v.score, reverse=True)

    def aggregate(
        self,
        raw_records: Sequence[Mapping[str, Any]],
        page_index: int,
        *,
        query: str = "",
    ) -> VideoPage:
        normalized: list[VideoResult] = []
        for rank, record in enumerate(raw_records):
            video = self._normalizer.normalize(record, page_index, rank, query=query)
            if video is not None:
                normalized.append(video)

        page = VideoPage(
            results=self.rank(normalized),
            has_more=self.has_more_pages(len(raw_records)),
        )
        log.debug(
            "video_page_aggregated",
            page=page_index,
            raw_count=len(raw_records),
            kept=len(page.results),
            dropped=len(raw_records) - len(page.results),
            has_more=page.has_more,
        )
        return page
