"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "trendscope",
    "environment": "dev",
    "http": {
        "timeout_seconds": 10.0,
        "user_agent": "Trendscope/0.1.0",
    },
    "serpapi": {
        "base_url": "https://serpapi.com/search.json",
        "language": "zh-cn",
        "image_region": "cn",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "dir": "./.cache/trendscope",
        "ttl_seconds": 3600,
        "search_ttl_seconds": 300,
        "max_concurrent": 10,
    },
    "ranking": {
        "page_size": 10,
        "has_more_threshold": 8,
    },
}
