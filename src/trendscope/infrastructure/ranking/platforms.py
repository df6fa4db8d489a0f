"""Source-platform classification by link."""

from __future__ import annotations

from trendscope.domain.entities.video import Platform

# Ordered: first matching domain wins.
PLATFORM_DOMAINS: tuple[tuple[str, Platform], ...] = (
    ("bilibili.com", Platform.BILIBILI),
    ("douyin.com", Platform.DOUYIN),
    ("xiaohongshu.com", Platform.XIAOHONGSHU),
    ("kuaishou.com", Platform.KUAISHOU),
    ("weibo.com", Platform.WEIBO),
)

# Order of the site: filters in the provider query.
SITE_FILTER_DOMAINS: tuple[str, ...] = (
    "douyin.com",
    "xiaohongshu.com",
    "bilibili.com",
    "kuaishou.com",
    "weibo.com",
)


def classify(link: str) -> Platform:
    """Map a result link to its platform; unmatched links are ``Platform.OTHER``."""
    if not link:
        return Platform.OTHER
    for domain, platform in PLATFORM_DOMAINS:
        if domain in link:
            return platform
    return Platform.OTHER


def site_scoped_query(term: str) -> str:
    """``'<term> (site:a OR site:b ...)'`` restricting results to known platforms."""
    sites = " OR ".join(f"site:{domain}" for domain in SITE_FILTER_DOMAINS)
    return f"{term} ({sites})"
