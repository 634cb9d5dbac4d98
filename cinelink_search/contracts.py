"""Single source of truth for all types, enums, and protocols."""

from __future__ import annotations

from enum import Enum
from typing import NotRequired, Protocol, TypedDict, runtime_checkable

# --- Enums ---


class ContentFilter(str, Enum):
    ALL = "all"
    MOVIE = "movie"
    SERIES = "series"


class SearchCondition(str, Enum):
    """User-visible outcome of a search that produced no displayable page."""

    EMPTY_QUERY = "empty_query"
    NO_RESULTS = "no_results"
    RATE_LIMIT = "rate_limit"  # policy gate, not a failure
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    API_ERROR = "api_error"
    GENERIC = "generic"

    @property
    def message(self) -> str:
        return CONDITION_MESSAGES[self]

    @property
    def is_failure(self) -> bool:
        return self in (
            SearchCondition.TIMEOUT,
            SearchCondition.NETWORK_ERROR,
            SearchCondition.API_ERROR,
            SearchCondition.GENERIC,
        )


CONDITION_MESSAGES: dict[SearchCondition, str] = {
    SearchCondition.EMPTY_QUERY: "Please enter a search term",
    SearchCondition.NO_RESULTS: "No results found",
    SearchCondition.RATE_LIMIT: "Daily search limit reached. Please try again tomorrow.",
    SearchCondition.TIMEOUT: "Search timed out. Please try again.",
    SearchCondition.NETWORK_ERROR: "Network error. Please check your connection.",
    SearchCondition.API_ERROR: "Search failed. Please try again.",
    SearchCondition.GENERIC: "Search failed. Please check your connection and try again.",
}


class StrategyTag(str, Enum):
    HIT = "hit"
    MISS = "miss"
    ERROR = "error"


# --- Data Types ---


class CacheRecord(TypedDict):
    id: str  # "tt1375666"
    title: str
    year: str  # "2010", "2008–2013" for series
    type: str  # "movie" | "series" | "episode"
    poster: str | None
    genre: NotRequired[str]


class QuotaState(TypedDict):
    calls: int
    reset_at: float  # epoch seconds


class RemotePage(TypedDict):
    items: list[CacheRecord]
    total_results: int
    total_pages: int


# --- Protocols ---


@runtime_checkable
class SearchBackend(Protocol):
    name: str

    async def search(
        self,
        query: str,
        *,
        content_filter: ContentFilter = ContentFilter.ALL,
        page: int = 1,
    ) -> RemotePage: ...

    async def health_check(self) -> bool: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class KeyValueStorage(Protocol):
    """Durable string storage, one opaque value per key."""

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...

    async def clear(self) -> None: ...
