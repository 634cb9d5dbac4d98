"""Composition root: wires storage, cache, quota, history, suggestions, search.

Everything is constructed explicitly and owned by one SearchService so
each piece can be replaced in tests. Use ``async with SearchService(...)``
or call ``init()`` / ``dispose()`` yourself.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from cinelink_search.backends import get_backend
from cinelink_search.budget.quota import QuotaTracker
from cinelink_search.cache.store import CacheStore
from cinelink_search.config import Settings, get_settings
from cinelink_search.contracts import (
    CacheRecord,
    ContentFilter,
    KeyValueStorage,
    SearchBackend,
    SearchCondition,
)
from cinelink_search.errors import StorageError
from cinelink_search.history import SearchHistory
from cinelink_search.search.orchestrator import SearchOrchestrator
from cinelink_search.search.session import SearchSession
from cinelink_search.storage.json_file import JsonFileStorage
from cinelink_search.suggest.generator import SuggestionGenerator
from cinelink_search.suggest.keywords import PopularKeywords

logger = logging.getLogger(__name__)


class SearchService:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        storage: KeyValueStorage | None = None,
        backend: SearchBackend | None = None,
        clock: Callable[[], float] = time.time,
        on_suggestions: Callable[[list[str]], None] | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        if storage is None:
            storage = JsonFileStorage(self.settings.storage_dir)
        self.storage = storage
        self.backend = backend or get_backend(
            self.settings.search_backend, **self.settings.backend_kwargs()
        )

        self.cache = CacheStore(self.storage, max_size=self.settings.max_cache_size)
        self.quota = QuotaTracker(
            self.storage, ceiling=self.settings.max_calls_per_day, clock=clock
        )
        self.history = SearchHistory(self.storage)
        self.keywords = PopularKeywords(
            self.storage,
            fetcher=getattr(self.backend, "trending_keywords", None),
            clock=clock,
        )
        self.suggester = SuggestionGenerator(
            keywords=self.keywords.keywords,
            debounce_ms=self.settings.debounce_ms,
            on_suggestions=on_suggestions,
        )
        self.orchestrator = SearchOrchestrator(
            cache=self.cache,
            quota=self.quota,
            backend=self.backend,
            page_size=self.settings.page_size,
            on_index_rebuilt=self.suggester.refresh_index,
        )
        self._initialized = False

    async def __aenter__(self) -> "SearchService":
        await self.init()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.dispose()

    @property
    def session(self) -> SearchSession:
        return self.orchestrator.session

    async def init(self) -> None:
        """Load persisted state and build both fuzzy indexes."""
        if self._initialized:
            return
        await self.cache.load()
        await self.quota.load()
        await self.history.load()
        self.suggester.set_keywords(await self.keywords.load())
        self.orchestrator.rebuild_index()
        self._initialized = True
        logger.debug(
            "Search service ready: %d cached, %d history, %s",
            len(self.cache),
            len(self.history),
            self.quota.summary(),
        )

    async def dispose(self) -> None:
        self.suggester.cancel()
        self.orchestrator.cancel_search()
        await self.backend.aclose()
        self._initialized = False

    # --- Search ---

    async def search(
        self,
        query: str,
        content_filter: ContentFilter | str = ContentFilter.ALL,
        page: int = 1,
    ) -> SearchSession:
        """Run a search and remember the query unless it failed or was superseded."""
        generation = self.orchestrator.generation
        session = await self.orchestrator.perform_search(query, content_filter, page)
        superseded = self.orchestrator.generation != generation + 1
        if not superseded and session.condition in (None, SearchCondition.NO_RESULTS):
            await self._remember(session.query)
        return session

    async def load_more(self) -> SearchSession:
        return await self.orchestrator.load_more_results()

    def clear_search(self) -> None:
        self.suggester.cancel()
        self.orchestrator.clear()

    async def clear_cache(self) -> None:
        await self.cache.clear()
        self.orchestrator.rebuild_index()

    # --- Suggestions ---

    def suggest(self, text: str) -> None:
        """Debounced: the settled list arrives via ``suggester.suggestions``."""
        self.suggester.request(text, self.history.entries)

    def suggest_now(self, text: str) -> list[str]:
        return self.suggester.generate(text, self.history.entries)

    # --- History ---

    async def delete_history_item(self, term: str) -> None:
        await self.history.delete(term)

    async def clear_history(self) -> None:
        await self.history.clear()

    async def _remember(self, query: str) -> None:
        try:
            await self.history.save(query)
        except StorageError as exc:
            logger.warning("Could not persist search history: %s", exc)

    @property
    def cached_records(self) -> list[CacheRecord]:
        return self.cache.all()
