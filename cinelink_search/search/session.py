"""Transient per-search state published to the caller."""

from __future__ import annotations

from dataclasses import dataclass, field

from cinelink_search.contracts import CacheRecord, ContentFilter, SearchCondition


@dataclass
class SearchSession:
    query: str = ""
    content_filter: ContentFilter = ContentFilter.ALL
    current_page: int = 1
    results: list[CacheRecord] = field(default_factory=list)
    is_loading: bool = False
    is_loading_more: bool = False
    total_results: int = 0
    total_pages: int = 0
    has_more_pages: bool = False
    condition: SearchCondition | None = None

    @property
    def message(self) -> str | None:
        return self.condition.message if self.condition else None

    def reset(self) -> None:
        self.query = ""
        self.content_filter = ContentFilter.ALL
        self.current_page = 1
        self.results = []
        self.is_loading = False
        self.is_loading_more = False
        self.total_results = 0
        self.total_pages = 0
        self.has_more_pages = False
        self.condition = None

    def show(self, items: list[CacheRecord], *, append: bool) -> None:
        if not append:
            self.results = list(items)
            return
        shown = {r["id"] for r in self.results}
        self.results = [*self.results, *(r for r in items if r["id"] not in shown)]

    def set_pagination(self, *, page: int, total: int, total_pages: int, has_more: bool) -> None:
        self.current_page = page
        self.total_results = total
        self.total_pages = total_pages
        self.has_more_pages = has_more

    def set_empty(self, condition: SearchCondition | None) -> None:
        self.results = []
        self.set_pagination(page=1, total=0, total_pages=0, has_more=False)
        self.condition = condition
