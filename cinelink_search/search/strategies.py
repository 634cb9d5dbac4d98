"""Named lookup strategies tried in order by the orchestrator.

Each returns a tagged StrategyResult (hit / miss / error) so the fallback
order local -> remote -> local is explicit and testable in isolation.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable

from cinelink_search.budget.quota import QuotaTracker
from cinelink_search.cache.fuzzy import FuzzyIndex
from cinelink_search.config import MAX_LOCAL_RESULTS, PLACEHOLDER_POSTER
from cinelink_search.contracts import CacheRecord, ContentFilter, SearchBackend, StrategyTag
from cinelink_search.errors import BackendError
from cinelink_search.utils.text import is_genre_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StrategyResult:
    tag: StrategyTag
    items: list[CacheRecord] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    has_more: bool = False
    error: BackendError | None = None

    @property
    def hit(self) -> bool:
        return self.tag == StrategyTag.HIT


MISS = StrategyResult(tag=StrategyTag.MISS)


def normalize_record(record: CacheRecord) -> CacheRecord:
    """Copy of ``record`` with a placeholder poster when none is usable."""
    out = CacheRecord(**record)  # type: ignore[typeddict-item]
    poster = out.get("poster")
    if not poster or poster == "N/A":
        out["poster"] = PLACEHOLDER_POSTER
    return out


class LocalStrategy:
    """Fuzzy lookup over the cache, filtered by type, sliced into pages."""

    name = "local"

    def __init__(
        self,
        index: Callable[[], FuzzyIndex | None],
        *,
        page_size: int = 10,
        max_results: int = MAX_LOCAL_RESULTS,
    ) -> None:
        self._index = index
        self.page_size = page_size
        self.max_results = max_results

    def run(self, query: str, content_filter: ContentFilter, page: int = 1) -> StrategyResult:
        index = self._index()
        if index is None or not query:
            return MISS
        if is_genre_query(query):
            logger.debug("Skipping local cache for genre search %r", query)
            return MISS

        matches = index.search(query, limit=self.max_results)
        if content_filter != ContentFilter.ALL:
            matches = [r for r in matches if r.get("type") == content_filter.value]

        start = (page - 1) * self.page_size
        end = start + self.page_size
        page_items = matches[start:end]
        if not page_items:
            return StrategyResult(tag=StrategyTag.MISS, total=len(matches))

        return StrategyResult(
            tag=StrategyTag.HIT,
            items=page_items,
            total=len(matches),
            total_pages=math.ceil(len(matches) / self.page_size),
            has_more=end < len(matches),
        )


class RemoteStrategy:
    """One remote API attempt; the quota is charged before the call is made."""

    name = "remote"

    def __init__(self, backend: SearchBackend, quota: QuotaTracker, *, page_size: int = 10) -> None:
        self.backend = backend
        self.quota = quota
        self.page_size = page_size

    async def run(self, query: str, content_filter: ContentFilter, page: int = 1) -> StrategyResult:
        await self.quota.record_call()
        try:
            data = await self.backend.search(query, content_filter=content_filter, page=page)
        except BackendError as exc:
            logger.warning("Remote search failed (%s): %s", exc.kind, exc)
            return StrategyResult(tag=StrategyTag.ERROR, error=exc)
        except Exception as exc:
            logger.exception("Unexpected error from backend %r", self.backend.name)
            return StrategyResult(
                tag=StrategyTag.ERROR, error=BackendError(str(exc), kind="unknown")
            )

        items = [normalize_record(r) for r in data["items"]]
        if not items:
            return MISS

        total = data["total_results"]
        total_pages = math.ceil(total / self.page_size)
        return StrategyResult(
            tag=StrategyTag.HIT,
            items=items,
            total=total,
            total_pages=total_pages,
            has_more=page < total_pages,
        )
