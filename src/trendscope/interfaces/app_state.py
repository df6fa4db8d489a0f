"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from trendscope.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from trendscope.application.use_cases import (
        ImageSearchUseCase,
        VideoSearchUseCase,
    )
    from trendscope.domain.ports import CachePort, SearchProviderPort


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: CachePort
    http_client: httpx.AsyncClient

    # Domain Ports
    search_provider: SearchProviderPort

    # Application Services
    video_search: VideoSearchUseCase
    image_search: ImageSearchUseCase
