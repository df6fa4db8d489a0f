"""Disk-backed store for raw SerpApi payloads (diskcache / SQLite)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Optional

import structlog
from diskcache import Cache as DiskCache

log = structlog.get_logger(__name__)


class DiskcacheAdapter:
    """CachePort over ``diskcache.Cache``.

    diskcache is synchronous, so every operation runs in a worker thread and
    at most ``max_concurrent`` of them touch the SQLite file at once. Entries
    stored without an explicit ``ttl`` expire after ``ttl_seconds``.

    The store must be opened (``async with`` or ``await __aenter__()``)
    before use; operations on a closed store raise RuntimeError.
    """

    def __init__(
        self,
        directory: str | Path = "./.cache/trendscope",
        ttl_seconds: int = 3600,
        max_concurrent: int = 10,
    ) -> None:
        self.directory = Path(directory)
        self.default_ttl = ttl_seconds
        self._store: DiskCache | None = None
        self._slots = asyncio.Semaphore(max_concurrent)

    async def __aenter__(self) -> DiskcacheAdapter:
        if self._store is None:
            self._store = await asyncio.to_thread(DiskCache, str(self.directory))
            log.info("search_cache_opened", directory=str(self.directory))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        store, self._store = self._store, None
        if store is not None:
            await asyncio.to_thread(store.close)
            log.info("search_cache_closed", directory=str(self.directory))

    async def _run(self, op: str, *args: Any, **kwargs: Any) -> Any:
        store = self._store
        if store is None:
            raise RuntimeError(f"search cache at {self.directory} is not open")
        async with self._slots:
            return await asyncio.to_thread(getattr(store, op), *args, **kwargs)

    async def get(self, key: str) -> Optional[Any]:
        value = await self._run("get", key, default=None)
        log.debug("search_cache_lookup", key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire = self.default_ttl if ttl is None else ttl
        await self._run("set", key, value, expire=expire)
        log.debug("search_cache_stored", key=key, ttl=expire)
