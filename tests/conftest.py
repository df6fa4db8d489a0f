"""Shared test fixtures for Trendscope test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from trendscope.domain.entities import Platform, VideoResult
from trendscope.infrastructure.config.schema import RankingConfig
from trendscope.infrastructure.ranking import (
    MetricEstimator,
    RankingAggregator,
    ResultNormalizer,
)

# ---------------------------------------------------------------------------
# Deterministic randomness
# ---------------------------------------------------------------------------


class MidpointRandomSource:
    """``RandomSource`` returning the middle of every requested range."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, float]] = []

    def uniform(self, low: float, high: float) -> float:
        self.calls.append((low, high))
        return (low + high) / 2


@pytest.fixture()
def midpoint_random() -> MidpointRandomSource:
    return MidpointRandomSource()


@pytest.fixture()
def ranking_config() -> RankingConfig:
    return RankingConfig()


@pytest.fixture()
def estimator(
    ranking_config: RankingConfig, midpoint_random: MidpointRandomSource
) -> MetricEstimator:
    return MetricEstimator(ranking_config, midpoint_random)


@pytest.fixture()
def aggregator(
    ranking_config: RankingConfig, estimator: MetricEstimator
) -> RankingAggregator:
    return RankingAggregator(ResultNormalizer(estimator, ranking_config), ranking_config)


# ---------------------------------------------------------------------------
# Raw provider records
# ---------------------------------------------------------------------------


@pytest.fixture()
def raw_video_record() -> dict[str, Any]:
    """A complete SerpApi ``video_results`` entry."""
    return {
        "position": 1,
        "title": "清代青花瓷鉴赏 第一集",
        "link": "https://www.bilibili.com/video/BV1xx411c7mD",
        "thumbnail": "https://i0.hdslb.com/bfs/archive/cover.jpg",
        "channel": "故宫博物院",
        "date": "3 天前",
        "duration": "12:34",
        "views": "3.5万",
        "snippet": "带你看懂康熙青花的发色与纹饰",
    }


def _qinghua_records() -> list[dict[str, Any]]:
    domains = [
        "https://www.douyin.com/video/7301",
        "https://www.xiaohongshu.com/explore/6542",
        "https://www.bilibili.com/video/BV1ab",
        "https://www.kuaishou.com/short-video/3x9",
        "https://weibo.com/tv/show/1034",
    ]
    records: list[dict[str, Any]] = []
    for i in range(10):
        record: dict[str, Any] = {
            "position": i + 1,
            "title": f"清代青花瓷 精品赏析 {i + 1}",
            "link": f"{domains[i % len(domains)]}{i}",
        }
        if i % 3 == 0:
            record["views"] = f"{i + 1}.2万"
        elif i % 3 == 1:
            record["snippet"] = f"{(i + 1) * 1000}次播放 · 瓷器收藏"
        records.append(record)
    return records


@pytest.fixture()
def qinghua_records() -> list[dict[str, Any]]:
    """Ten valid records: reported, mined and undisclosed view counts mixed."""
    return _qinghua_records()


_UNDISCLOSED_TITLES = [
    "清代青花瓷 康熙官窑",
    "清代青花瓷 雍正御窑",
    "清代青花瓷 乾隆缠枝莲",
    "清代青花瓷 民窑小品",
    "清代青花瓷 发色鉴定",
    "清代青花瓷 款识辨伪",
    "清代青花瓷 山水人物",
    "清代青花瓷 外销瓷",
    "清代青花瓷 修复入门",
    "清代青花瓷 拍卖回顾",
]


@pytest.fixture()
def qinghua_undisclosed_records() -> list[dict[str, Any]]:
    """Ten valid records without a views field or any count in their text."""
    domains = [
        "https://www.douyin.com/video/",
        "https://www.xiaohongshu.com/explore/",
        "https://www.bilibili.com/video/",
        "https://www.kuaishou.com/short-video/",
        "https://weibo.com/tv/show/",
    ]
    return [
        {
            "title": title,
            "link": f"{domains[i % len(domains)]}qh{i}",
            "snippet": "瓷器收藏 鉴赏分享",
        }
        for i, title in enumerate(_UNDISCLOSED_TITLES)
    ]


@pytest.fixture()
def video_result() -> VideoResult:
    return VideoResult(
        id="vid-1-0-abc123def456",
        title="清代青花瓷鉴赏",
        thumbnail="https://i0.hdslb.com/bfs/archive/cover.jpg",
        link="https://www.bilibili.com/video/BV1xx411c7mD",
        platform=Platform.BILIBILI,
        channel="故宫博物院",
        published="3 天前",
        duration="12:34",
        views=35000,
        likes=1925,
        comments=210,
        shares=437,
        score=7345,
    )


# ---------------------------------------------------------------------------
# Port mocks
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_provider() -> AsyncMock:
    """AsyncMock SearchProviderPort returning no records by default."""
    provider = AsyncMock()
    provider.search_videos.return_value = []
    provider.search_images.return_value = []
    return provider


@pytest.fixture()
def mock_cache() -> AsyncMock:
    cache = AsyncMock()
    cache.get.return_value = None  # default: cache miss
    return cache
