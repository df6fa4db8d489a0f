"""Client-side incremental pagination over ranked video pages."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from trendscope.domain.entities import InputError, PageState, VideoPage

log = structlog.get_logger(__name__)

FetchPage = Callable[[str, int], Awaitable[VideoPage]]


class PaginationController:
    """Accumulates ranked pages for one query at a time.

    ``fetch_page(term, page)`` is either ``VideoSearchUseCase.fetch_page`` or
    the HTTP ``ApiClient.fetch_page``. At most one fetch is in flight; extra
    scroll triggers while loading are dropped, not queued. Every ``search()``
    starts a new generation and responses belonging to an older generation
    are discarded.
    """

    def __init__(self, fetch_page: FetchPage) -> None:
        self._fetch_page = fetch_page
        self.state = PageState()
        self._closed = False
        self._pending: asyncio.Task[bool] | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def can_load_more(self) -> bool:
        st = self.state
        return (
            not self._closed and bool(st.query) and st.has_more and not st.loading
        )

    def _is_current(self, generation: int) -> bool:
        return not self._closed and self.state.generation == generation

    def _fail(self, generation: int, exc: Exception) -> bool:
        """Record ``exc`` on the current generation; False when it is stale."""
        if not self._is_current(generation):
            return False
        self.state.loading = False
        self.state.has_more = False
        self.state.error = str(exc)
        return True

    async def search(self, term: str) -> PageState:
        """Start a new query: reset state and load page 1."""
        if self._closed:
            raise RuntimeError("PaginationController is closed")
        term = (term or "").strip()
        if not term:
            raise InputError("关键词不能为空")

        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        generation = self.state.generation + 1
        self.state = PageState(query=term, generation=generation, loading=True)

        try:
            page = await self._fetch_page(term, 1)
        except Exception as e:
            if self._fail(generation, e):
                raise
            log.debug(
                "stale_page_discarded",
                query=term,
                page=1,
                generation=generation,
                error=str(e),
            )
            return self.state

        if not self._is_current(generation):
            log.debug("stale_page_discarded", query=term, page=1, generation=generation)
            return self.state

        self.state.results = list(page.results)
        self.state.has_more = page.has_more
        self.state.loading = False
        log.debug(
            "pagination_search_loaded",
            query=term,
            count=len(page.results),
            has_more=page.has_more,
        )
        return self.state

    async def load_more(self) -> bool:
        """Append the next page. Returns False when the trigger was a no-op."""
        if not self.can_load_more:
            return False

        st = self.state
        generation = st.generation
        next_page = st.current_page + 1
        st.loading = True

        try:
            page = await self._fetch_page(st.query, next_page)
        except Exception as e:
            if self._fail(generation, e):
                raise
            log.debug(
                "stale_page_discarded",
                query=st.query,
                page=next_page,
                generation=generation,
                error=str(e),
            )
            return False

        if not self._is_current(generation):
            log.debug(
                "stale_page_discarded",
                query=st.query,
                page=next_page,
                generation=generation,
            )
            return False

        st.results.extend(page.results)
        st.current_page = next_page
        st.has_more = page.has_more and bool(page.results)
        st.loading = False
        log.debug(
            "pagination_page_appended",
            query=st.query,
            page=next_page,
            count=len(page.results),
            total=len(st.results),
            has_more=st.has_more,
        )
        return True

    def on_last_item_visible(self) -> asyncio.Task[bool] | None:
        """Observer hook: schedule ``load_more()`` when the list end is reached.

        Must be called from a running event loop.
        """
        if not self.can_load_more:
            return None
        if self._pending is not None and not self._pending.done():
            return None
        task = asyncio.get_running_loop().create_task(self.load_more())
        task.add_done_callback(self._log_task_failure)
        self._pending = task
        return task

    def _log_task_failure(self, task: asyncio.Task[bool]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.warning(
                "pagination_load_more_failed",
                query=self.state.query,
                error=str(exc),
            )

    def close(self) -> None:
        """Detach: later triggers are ignored, late responses discarded."""
        self._closed = True
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
