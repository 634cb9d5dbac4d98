"""Test fixtures and fakes."""

from __future__ import annotations

import asyncio

import pytest

from cinelink_search.budget.quota import QuotaTracker
from cinelink_search.cache.store import CacheStore
from cinelink_search.contracts import CacheRecord, ContentFilter, RemotePage
from cinelink_search.search.orchestrator import SearchOrchestrator
from cinelink_search.storage.memory import MemoryStorage

T0 = 1_760_000_000.0


def make_record(
    record_id: str,
    title: str,
    *,
    year: str = "2010",
    type: str = "movie",
    poster: str | None = "https://img.example.com/p.jpg",
) -> CacheRecord:
    return CacheRecord(id=record_id, title=title, year=year, type=type, poster=poster)


def make_page(items: list[CacheRecord], total: int | None = None) -> RemotePage:
    total = len(items) if total is None else total
    return RemotePage(items=items, total_results=total, total_pages=-(-total // 10))


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """Serves canned pages keyed by page number, or raises ``error``."""

    name = "fake"

    def __init__(
        self,
        pages: dict[int, RemotePage] | None = None,
        *,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ) -> None:
        self.pages = pages or {}
        self.error = error
        self.gate = gate
        self.started = asyncio.Event()
        self.calls: list[tuple[str, ContentFilter, int]] = []
        self.closed = False

    async def search(self, query, *, content_filter=ContentFilter.ALL, page=1):
        self.calls.append((query, content_filter, page))
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.pages.get(page, make_page([]))

    async def health_check(self):
        return True

    async def aclose(self):
        self.closed = True


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(storage) -> CacheStore:
    return CacheStore(storage)


@pytest.fixture
def quota(storage, clock) -> QuotaTracker:
    return QuotaTracker(storage, clock=clock)


@pytest.fixture
def inception() -> CacheRecord:
    return make_record("tt1375666", "Inception", year="2010")


def build_orchestrator(cache: CacheStore, quota: QuotaTracker, backend) -> SearchOrchestrator:
    orch = SearchOrchestrator(cache=cache, quota=quota, backend=backend)
    orch.rebuild_index()
    return orch
