from .errors import (
    ConfigError,
    InputError,
    NetworkError,
    TrendscopeError,
    UpstreamError,
)
from .image import ImageResult
from .video import (
    EngagementMetrics,
    PageState,
    Platform,
    VideoPage,
    VideoQuery,
    VideoResult,
)

__all__ = [
    "ConfigError",
    "EngagementMetrics",
    "ImageResult",
    "InputError",
    "NetworkError",
    "PageState",
    "Platform",
    "TrendscopeError",
    "UpstreamError",
    "VideoPage",
    "VideoQuery",
    "VideoResult",
]
