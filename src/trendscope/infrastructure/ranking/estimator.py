"""Engagement estimation for results with missing or untrusted counters.

Views are resolved in order (first positive value wins):
    1. the provider's reported ``views`` field
    2. a view count mined from title/snippet/source description
    3. a synthetic positional weight plus random jitter

Likes, comments and shares are derived from views with the conversion
rates in RankingConfig plus uniform noise, and combined into the score.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from trendscope.domain.entities.video import EngagementMetrics
from trendscope.domain.ports.random_source import RandomSource
from trendscope.infrastructure.config.schema import RankingConfig
from trendscope.infrastructure.ranking.jitter import SystemRandomSource
from trendscope.infrastructure.ranking.records import searchable_text
from trendscope.infrastructure.ranking.view_parser import (
    mine_views,
    parse_reported_views,
)


class MetricEstimator:
    def __init__(
        self,
        config: RankingConfig | None = None,
        random_source: RandomSource | None = None,
    ) -> None:
        self._config = config or RankingConfig()
        self._random: RandomSource = random_source or SystemRandomSource()

    def synthetic_views(self, page_index: int, rank: int) -> int:
        """Rank-decaying baseline for records that disclose nothing.

        ``page_index`` is the 1-based page number, so the first page already
        sits ``page_size`` positions below ``synthetic_base``.
        """
        cfg = self._config
        position = page_index * cfg.page_size + rank
        base = max(cfg.synthetic_base - position * cfg.synthetic_decay, cfg.synthetic_floor)
        jitter = int(self._random.uniform(0, cfg.synthetic_jitter))
        return base + min(max(jitter, 0), cfg.synthetic_jitter - 1)

    def resolve_views(
        self, record: Mapping[str, Any], page_index: int, rank: int
    ) -> int:
        views = parse_reported_views(record.get("views"))
        if views > 0:
            return views
        views = mine_views(searchable_text(record))
        if views > 0:
            return views
        return self.synthetic_views(page_index, rank)

    def _derive(self, views: int, rate: float, jitter: float) -> int:
        value = views * rate + self._random.uniform(0, views * jitter)
        if not math.isfinite(value) or value <= 0:
            return 0
        return math.floor(value)

    def score(self, likes: int, comments: int, shares: int) -> int:
        cfg = self._config
        return (
            likes * cfg.like_weight
            + comments * cfg.comment_weight
            + shares * cfg.share_weight
        )

    def estimate(
        self, record: Mapping[str, Any], page_index: int, rank: int
    ) -> EngagementMetrics:
        cfg = self._config
        views = self.resolve_views(record, page_index, rank)
        likes = self._derive(views, cfg.like_rate, cfg.like_jitter)
        comments = self._derive(views, cfg.comment_rate, cfg.comment_jitter)
        shares = self._derive(views, cfg.share_rate, cfg.share_jitter)
        return EngagementMetrics(
            views=views,
            likes=likes,
            comments=comments,
            shares=shares,
            score=self.score(likes, comments, shares),
        )
