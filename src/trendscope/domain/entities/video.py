"""Domain entities for ranked video discovery.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Platform(str, Enum):
    """Source platform of a video result (closed set + catch-all).

    Values are the labels rendered by clients.
    """

    BILIBILI = "B站"
    DOUYIN = "抖音"
    XIAOHONGSHU = "小红书"
    KUAISHOU = "快手"
    WEIBO = "微博"
    OTHER = "其他平台"


@dataclass(frozen=True)
class EngagementMetrics:
    """Estimated engagement counters for one result."""

    views: int
    likes: int
    comments: int
    shares: int
    score: int


@dataclass(frozen=True)
class VideoResult:
    """Canonical, ranked video result."""

    id: str
    title: str
    thumbnail: str
    link: str
    platform: Platform
    channel: str
    published: str
    duration: str
    views: int = 0
    likes: int = 0
    comments: int = 0
    shares: int = 0
    score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "link": self.link,
            "platform": self.platform.value,
            "channel": self.channel,
            "published": self.published,
            "duration": self.duration,
            "views": self.views,
            "likes": self.likes,
            "comments": self.comments,
            "shares": self.shares,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VideoResult:
        """Rebuild a result from its JSON shape (used by the API client)."""
        try:
            platform = Platform(data.get("platform", Platform.OTHER.value))
        except ValueError:
            platform = Platform.OTHER
        return cls(
            id=str(data["id"]),
            title=str(data["title"]),
            thumbnail=str(data.get("thumbnail", "")),
            link=str(data["link"]),
            platform=platform,
            channel=str(data.get("channel", "")),
            published=str(data.get("published", "")),
            duration=str(data.get("duration", "")),
            views=int(data.get("views", 0)),
            likes=int(data.get("likes", 0)),
            comments=int(data.get("comments", 0)),
            shares=int(data.get("shares", 0)),
            score=int(data.get("score", 0)),
        )


@dataclass(frozen=True)
class VideoPage:
    """One aggregated page: results ordered by score (desc) + exhaustion hint."""

    results: list[VideoResult] = field(default_factory=list)
    has_more: bool = False


@dataclass(frozen=True)
class VideoQuery:
    term: str
    page: int = 1


@dataclass
class PageState:
    """Client-held pagination state for one active query.

    Owned by a single PaginationController; never shared across queries.
    ``generation`` increments on every new search so late responses from an
    abandoned query can be recognised and discarded.
    """

    query: str = ""
    current_page: int = 1
    results: list[VideoResult] = field(default_factory=list)
    has_more: bool = False
    loading: bool = False
    generation: int = 0
    error: str | None = None
