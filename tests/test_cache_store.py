"""Tests for CacheStore: bounded, deduplicated, persisted result cache."""

from __future__ import annotations

import json

import pytest
from conftest import make_record

from cinelink_search.cache.store import CacheStore
from cinelink_search.config import CACHE_KEY
from cinelink_search.storage.memory import MemoryStorage


class TestUpsert:
    @pytest.mark.asyncio
    async def test_adds_new_records(self, cache, inception):
        added = await cache.upsert_many([inception])
        assert added is True
        assert cache.all() == [inception]
        assert "tt1375666" in cache

    @pytest.mark.asyncio
    async def test_duplicate_ids_are_ignored(self, cache):
        await cache.upsert_many([make_record("a", "Alpha"), make_record("a", "Alpha again")])
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_first_write_wins(self, cache):
        await cache.upsert_many([make_record("a", "Original", year="1999")])
        added = await cache.upsert_many([make_record("a", "Overwrite", year="2024")])
        assert added is False
        assert cache.all()[0]["title"] == "Original"
        assert cache.all()[0]["year"] == "1999"

    @pytest.mark.asyncio
    async def test_returns_false_and_skips_write_when_nothing_new(self, storage, cache):
        await cache.upsert_many([make_record("a", "Alpha")])
        await storage.remove_item(CACHE_KEY)
        assert await cache.upsert_many([make_record("a", "Alpha")]) is False
        assert await storage.get_item(CACHE_KEY) is None

    @pytest.mark.asyncio
    async def test_insertion_order_preserved(self, cache):
        await cache.upsert_many([make_record("b", "B"), make_record("a", "A")])
        await cache.upsert_many([make_record("c", "C")])
        assert [r["id"] for r in cache.all()] == ["b", "a", "c"]

    @pytest.mark.asyncio
    async def test_records_without_id_skipped(self, cache):
        bad = make_record("", "No id")
        assert await cache.upsert_many([bad]) is False
        assert len(cache) == 0


class TestEviction:
    @pytest.mark.asyncio
    async def test_cap_keeps_most_recent(self, storage):
        cache = CacheStore(storage)  # default cap 1500
        await cache.upsert_many([make_record(f"id{i}", f"Title {i}") for i in range(1500)])
        await cache.upsert_many([make_record(f"new{i}", f"New {i}") for i in range(10)])

        records = cache.all()
        assert len(records) == 1500
        assert records[0]["id"] == "id10"
        assert records[-1]["id"] == "new9"
        assert "id0" not in cache
        assert "id9" not in cache

    @pytest.mark.asyncio
    async def test_evicted_ids_can_be_reinserted(self, storage):
        cache = CacheStore(storage, max_size=2)
        await cache.upsert_many([make_record("a", "A"), make_record("b", "B")])
        await cache.upsert_many([make_record("c", "C")])
        assert "a" not in cache
        assert await cache.upsert_many([make_record("a", "A")]) is True
        assert [r["id"] for r in cache.all()] == ["c", "a"]


class TestPersistence:
    @pytest.mark.asyncio
    async def test_load_restores_records(self, storage, inception):
        await CacheStore(storage).upsert_many([inception])

        restored = CacheStore(storage)
        await restored.load()
        assert restored.all() == [inception]

    @pytest.mark.asyncio
    async def test_load_missing_is_empty(self, cache):
        await cache.load()
        assert cache.all() == []

    @pytest.mark.asyncio
    async def test_load_corrupt_is_empty(self):
        cache = CacheStore(MemoryStorage({CACHE_KEY: "{{not json"}))
        await cache.load()
        assert cache.all() == []

    @pytest.mark.asyncio
    async def test_load_non_list_is_empty(self):
        cache = CacheStore(MemoryStorage({CACHE_KEY: json.dumps({"id": "x"})}))
        await cache.load()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_load_drops_duplicates_and_trims_to_cap(self):
        blob = [make_record("a", "A"), make_record("a", "A2"), make_record("b", "B")]
        blob.append(make_record("c", "C"))
        cache = CacheStore(MemoryStorage({CACHE_KEY: json.dumps(blob)}), max_size=2)
        await cache.load()
        assert [r["id"] for r in cache.all()] == ["b", "c"]

    @pytest.mark.asyncio
    async def test_clear_empties_memory_and_storage(self, storage, cache, inception):
        await cache.upsert_many([inception])
        await cache.clear()
        assert cache.all() == []
        assert await storage.get_item(CACHE_KEY) is None
