"""Port for the upstream search provider."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

RawRecord = Mapping[str, Any]


@runtime_checkable
class SearchProviderPort(Protocol):
    """Async interface returning *raw*, untrusted provider records.

    Implementations raise ConfigError (missing credential, before any I/O),
    UpstreamError (provider error payload) or NetworkError (everything else).
    """

    async def search_videos(self, term: str, page: int = 1) -> list[RawRecord]:
        """Fetch one platform-scoped page of raw video records."""
        ...

    async def search_images(self, term: str) -> list[RawRecord]:
        """Fetch raw image records for a term."""
        ...
