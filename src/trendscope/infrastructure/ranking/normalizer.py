"""Raw provider record -> canonical VideoResult."""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from typing import Any

import structlog

from trendscope.domain.entities.video import VideoResult
from trendscope.infrastructure.config.schema import RankingConfig
from trendscope.infrastructure.ranking.estimator import MetricEstimator
from trendscope.infrastructure.ranking.platforms import classify
from trendscope.infrastructure.ranking.records import text_field

log = structlog.get_logger(__name__)


def video_id(query: str, page_index: int, rank: int, link: str) -> str:
    """Key that is stable for one render pass and distinct per page/position."""
    raw = f"{query}:{page_index}:{rank}:{link}"
    digest = hashlib.sha256(raw.encode()).hexdigest()[:12]
    return f"vid-{page_index}-{rank}-{digest}"


class ResultNormalizer:
    """Validates and enriches one raw record.

    Records without title or link are unusable: they are dropped (None) and
    never reported as errors.
    """

    def __init__(
        self,
        estimator: MetricEstimator | None = None,
        config: RankingConfig | None = None,
    ) -> None:
        self._config = config or RankingConfig()
        self._estimator = estimator or MetricEstimator(self._config)

    def normalize(
        self,
        record: Mapping[str, Any],
        page_index: int,
        rank: int,
        *,
        query: str = "",
    ) -> VideoResult | None:
        if not isinstance(record, Mapping):
            log.debug("video_record_dropped", reason="not_a_mapping", rank=rank)
            return None

        title = text_field(record, "title")
        link = text_field(record, "link")
        if not title or not link:
            log.debug(
                "video_record_dropped",
                reason="missing_title" if not title else "missing_link",
                page=page_index,
                rank=rank,
            )
            return None

        platform = classify(link)
        metrics = self._estimator.estimate(record, page_index, rank)
        cfg = self._config

        return VideoResult(
            id=video_id(query, page_index, rank, link),
            title=title,
            thumbnail=text_field(record, "thumbnail") or cfg.placeholder_thumbnail,
            link=link,
            platform=platform,
            channel=(
                text_field(record, "channel")
                or text_field(record, "source")
                or platform.value
            ),
            published=text_field(record, "date") or cfg.default_published,
            duration=text_field(record, "duration") or cfg.default_duration,
            views=metrics.views,
            likes=metrics.likes,
            comments=metrics.comments,
            shares=metrics.shares,
            score=metrics.score,
        )
