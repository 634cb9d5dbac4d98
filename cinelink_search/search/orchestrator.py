"""Coordinates cache, fuzzy index, quota, and remote API into result pages.

Per invocation the steps run strictly in order: validate, local lookup,
short-circuit, remote augmentation, fallback. Every failure is turned
into a SearchCondition on the session; nothing is raised to the caller.

Each invocation takes a generation number. When a newer search (or
``clear()``) starts while an older one is still awaiting the remote
API, the older one's results are discarded on arrival.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Callable

from cinelink_search.budget.quota import QuotaTracker
from cinelink_search.cache.fuzzy import FuzzyIndex
from cinelink_search.cache.store import CacheStore
from cinelink_search.config import LOCAL_SUFFICIENT_RESULTS
from cinelink_search.contracts import (
    CacheRecord,
    ContentFilter,
    SearchBackend,
    SearchCondition,
    StrategyTag,
)
from cinelink_search.errors import BackendError, StorageError
from cinelink_search.utils.text import normalize_query, unique

from .session import SearchSession
from .strategies import LocalStrategy, RemoteStrategy, StrategyResult

logger = logging.getLogger(__name__)

_ERROR_CONDITIONS = {
    "timeout": SearchCondition.TIMEOUT,
    "network": SearchCondition.NETWORK_ERROR,
    "api": SearchCondition.API_ERROR,
}


def condition_for(error: BackendError | None) -> SearchCondition:
    if error is None:
        return SearchCondition.GENERIC
    return _ERROR_CONDITIONS.get(error.kind, SearchCondition.GENERIC)


class SearchOrchestrator:
    def __init__(
        self,
        *,
        cache: CacheStore,
        quota: QuotaTracker,
        backend: SearchBackend,
        page_size: int = 10,
        local_sufficient: int = LOCAL_SUFFICIENT_RESULTS,
        on_index_rebuilt: Callable[[list[CacheRecord]], None] | None = None,
    ) -> None:
        self.cache = cache
        self.quota = quota
        self.page_size = page_size
        self.local_sufficient = local_sufficient
        self.session = SearchSession()
        self._on_index_rebuilt = on_index_rebuilt
        self._index: FuzzyIndex | None = None
        self.local = LocalStrategy(lambda: self._index, page_size=page_size)
        self.remote = RemoteStrategy(backend, quota, page_size=page_size)
        self._generation = 0
        self._inflight: asyncio.Task | None = None

    @property
    def index(self) -> FuzzyIndex | None:
        return self._index

    @property
    def generation(self) -> int:
        """Bumped by every search start and every clear."""
        return self._generation

    @property
    def api_call_count(self) -> int:
        return self.quota.calls

    def rebuild_index(self) -> None:
        """Rebuild the fuzzy index from the cache. Required after every cache change."""
        records = self.cache.all()
        self._index = FuzzyIndex(records) if records else None
        if self._on_index_rebuilt is not None:
            self._on_index_rebuilt(records)

    # --- Public operations ---

    async def perform_search(
        self,
        query: str,
        content_filter: ContentFilter | str = ContentFilter.ALL,
        page: int = 1,
        append: bool = False,
    ) -> SearchSession:
        session = self.session
        clean = normalize_query(query)
        if clean is None:
            session.condition = SearchCondition.EMPTY_QUERY
            return session

        content_filter = ContentFilter(content_filter)
        self.cancel_search()
        self._generation += 1
        generation = self._generation

        session.query = clean
        session.content_filter = content_filter
        session.is_loading = page == 1
        session.is_loading_more = page > 1
        if page == 1:
            session.condition = None
            session.results = []

        try:
            await self._search(clean, content_filter, page, append, generation)
        finally:
            if generation == self._generation:
                session.is_loading = False
                session.is_loading_more = False
        return session

    async def load_more_results(self) -> SearchSession:
        session = self.session
        if session.is_loading_more or not session.has_more_pages or not session.query:
            return session
        return await self.perform_search(
            session.query, session.content_filter, session.current_page + 1, append=True
        )

    def cancel_search(self) -> bool:
        """Cancel the in-flight remote call, if any."""
        task = self._inflight
        if task is None or task.done():
            return False
        task.cancel()
        return True

    def clear(self) -> None:
        """Reset session state. Cache and history are untouched."""
        self.cancel_search()
        self._generation += 1
        self.session.reset()

    # --- Steps ---

    async def _search(
        self,
        query: str,
        content_filter: ContentFilter,
        page: int,
        append: bool,
        generation: int,
    ) -> None:
        session = self.session
        append = append and page > 1

        local = self.local.run(query, content_filter, page)
        if local.hit and page == 1:
            session.show(local.items, append=False)

        allowed = await self.quota.can_call()
        if local.hit and page == 1 and (local.total >= self.local_sufficient or not allowed):
            logger.debug("Local cache answers %r (%d matches)", query, local.total)
            self._publish_local(local, page, append)
            return

        if not allowed or (page > 1 and local.total >= self.local_sufficient):
            if page == 1 and not local.hit:
                session.set_empty(SearchCondition.RATE_LIMIT)
            else:
                self._publish_local(local, page, append)
            return

        remote = await self._call_remote(query, content_filter, page, generation)
        if remote is None:
            return

        if remote.tag == StrategyTag.HIT:
            await self._publish_remote(remote, local, page, append)
        elif remote.tag == StrategyTag.MISS:
            if page == 1 and not local.hit:
                session.set_empty(SearchCondition.NO_RESULTS)
            else:
                self._publish_local(local, page, append)
        else:
            fallback = self.local.run(query, content_filter, page)
            if fallback.hit:
                self._publish_local(fallback, page, append)
                session.condition = None
            elif page == 1:
                session.set_empty(condition_for(remote.error))

    async def _call_remote(
        self, query: str, content_filter: ContentFilter, page: int, generation: int
    ) -> StrategyResult | None:
        """Run the remote strategy. None if cancelled or superseded."""
        task = asyncio.ensure_future(self.remote.run(query, content_filter, page))
        self._inflight = task
        try:
            result = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.debug("Search for %r cancelled", query)
            return None
        finally:
            if self._inflight is task:
                self._inflight = None

        if generation != self._generation:
            logger.debug("Discarding superseded results for %r", query)
            return None
        return result

    def _publish_local(self, local: StrategyResult, page: int, append: bool) -> None:
        session = self.session
        if local.hit:
            session.show(local.items, append=append)
        session.set_pagination(
            page=page,
            total=local.total,
            total_pages=math.ceil(local.total / self.page_size),
            has_more=local.has_more,
        )

    async def _publish_remote(
        self, remote: StrategyResult, local: StrategyResult, page: int, append: bool
    ) -> None:
        session = self.session
        if page == 1:
            merged = unique([*remote.items, *local.items], key=lambda r: r["id"])
            session.show(merged, append=False)
            session.set_pagination(
                page=1,
                total=max(remote.total, local.total),
                total_pages=max(remote.total_pages, math.ceil(local.total / self.page_size)),
                has_more=remote.has_more or local.has_more,
            )
        else:
            session.show(remote.items, append=append)
            session.set_pagination(
                page=page,
                total=remote.total,
                total_pages=remote.total_pages,
                has_more=remote.has_more,
            )

        try:
            added = await self.cache.upsert_many(remote.items)
        except StorageError as exc:
            logger.warning("Could not persist result cache: %s", exc)
            added = True  # in-memory cache still changed
        if added:
            self.rebuild_index()
