"""Tests for MetricEstimator (view resolution, derived metrics, score)."""

from __future__ import annotations

import math
from typing import Any

import pytest

from trendscope.infrastructure.config.schema import RankingConfig
from trendscope.infrastructure.ranking.estimator import MetricEstimator
from trendscope.infrastructure.ranking.jitter import SystemRandomSource


class _FixedRandomSource:
    def __init__(self, value: float) -> None:
        self.value = value

    def uniform(self, low: float, high: float) -> float:
        return min(max(self.value, low), high)


class _UpperBoundRandomSource:
    def uniform(self, low: float, high: float) -> float:
        return high


# ---------------------------------------------------------------------------
# View resolution
# ---------------------------------------------------------------------------


class TestResolveViews:
    def test_reported_views_win(self, estimator: MetricEstimator) -> None:
        record = {"views": "3.5万", "title": "2.1亿次播放"}
        assert estimator.resolve_views(record, 1, 0) == 35_000

    def test_mined_from_title(self, estimator: MetricEstimator) -> None:
        record = {"title": "爆款视频 2.1亿次播放"}
        assert estimator.resolve_views(record, 1, 0) == 210_000_000

    def test_mined_from_snippet(self, estimator: MetricEstimator) -> None:
        record = {"title": "青花瓷", "snippet": "1.5万次观看"}
        assert estimator.resolve_views(record, 1, 0) == 15_000

    def test_mined_from_source_description(self, estimator: MetricEstimator) -> None:
        record = {
            "title": "青花瓷",
            "about_this_result": {"source": {"description": "累计 8000 播放"}},
        }
        assert estimator.resolve_views(record, 1, 0) == 8_000

    def test_zero_reported_falls_through(self, estimator: MetricEstimator) -> None:
        record = {"views": 0, "title": "300次播放"}
        assert estimator.resolve_views(record, 1, 0) == 300

    def test_synthetic_when_nothing_disclosed(
        self, estimator: MetricEstimator
    ) -> None:
        # page 1, rank 0: base 50000 + midpoint jitter 10000
        assert estimator.resolve_views({"title": "青花瓷"}, 1, 0) == 60_000


# ---------------------------------------------------------------------------
# Synthetic views
# ---------------------------------------------------------------------------


class TestSyntheticViews:
    def test_first_page_starts_at_half_base(self, estimator: MetricEstimator) -> None:
        # page 1, rank 0 -> position 10
        assert estimator.synthetic_views(1, 0) == 50_000 + 10_000

    def test_first_page_last_rank_reaches_floor(
        self, estimator: MetricEstimator
    ) -> None:
        assert estimator.synthetic_views(1, 9) == 5_000 + 10_000

    def test_decays_with_rank(self, estimator: MetricEstimator) -> None:
        views = [estimator.synthetic_views(1, rank) for rank in range(10)]
        assert views == [50_000 - rank * 5_000 + 10_000 for rank in range(10)]

    def test_later_pages_sit_on_floor(self, estimator: MetricEstimator) -> None:
        assert estimator.synthetic_views(2, 0) == 5_000 + 10_000
        assert estimator.synthetic_views(5, 9) == 5_000 + 10_000

    @pytest.mark.parametrize(("page", "rank"), [(1, 0), (1, 9), (3, 4), (50, 9)])
    def test_always_at_least_floor(self, page: int, rank: int) -> None:
        est = MetricEstimator(RankingConfig(), SystemRandomSource())
        views = est.synthetic_views(page, rank)
        assert 5_000 <= views < 50_000 + 20_000

    def test_jitter_stays_below_upper_bound(self) -> None:
        est = MetricEstimator(RankingConfig(), _UpperBoundRandomSource())
        assert est.synthetic_views(1, 0) == 50_000 + 19_999


# ---------------------------------------------------------------------------
# Derived metrics and score
# ---------------------------------------------------------------------------


class TestEstimate:
    def test_exact_values_with_midpoint_jitter(
        self, estimator: MetricEstimator
    ) -> None:
        metrics = estimator.estimate({"views": "3.5万"}, 1, 0)
        assert metrics.views == 35_000
        assert metrics.likes == 1_925  # 1750 + 175
        assert metrics.comments == 210  # 175 + 35
        assert metrics.shares == 437  # 350 + 87.5
        assert metrics.score == 1_925 + 210 * 5 + 437 * 10

    @pytest.mark.parametrize("views", ["3.5万", "1.2亿", "87", "2.5w"])
    def test_bounds_and_score_formula(self, views: str) -> None:
        record: dict[str, Any] = {"views": views}
        est = MetricEstimator(RankingConfig(), SystemRandomSource())
        m = est.estimate(record, 1, 0)

        assert math.floor(m.views * 0.05) <= m.likes <= m.views * 0.06
        assert math.floor(m.views * 0.005) <= m.comments <= m.views * 0.007
        assert math.floor(m.views * 0.01) <= m.shares <= m.views * 0.015
        assert m.score == m.likes + 5 * m.comments + 10 * m.shares

    def test_zero_jitter_gives_rate_only(self) -> None:
        est = MetricEstimator(RankingConfig(), _FixedRandomSource(0.0))
        m = est.estimate({"views": 10_000}, 1, 0)
        assert (m.likes, m.comments, m.shares) == (500, 50, 100)
        assert m.score == 500 + 250 + 1000

    def test_custom_weights(self, midpoint_random: Any) -> None:
        cfg = RankingConfig(like_weight=2, comment_weight=0, share_weight=0)
        est = MetricEstimator(cfg, midpoint_random)
        assert est.score(likes=10, comments=99, shares=99) == 20
