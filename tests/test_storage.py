"""Tests for key-value storage backends and JSON helpers."""

from __future__ import annotations

import pytest

from cinelink_search.contracts import KeyValueStorage
from cinelink_search.storage import load_json, save_json
from cinelink_search.storage.json_file import JsonFileStorage
from cinelink_search.storage.memory import MemoryStorage


@pytest.fixture
def file_storage(tmp_path):
    return JsonFileStorage(tmp_path / "store")


class TestJsonFileStorage:
    def test_protocol_conformance(self, file_storage):
        assert isinstance(file_storage, KeyValueStorage)

    def test_creates_directory(self, tmp_path):
        JsonFileStorage(tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, file_storage):
        assert await file_storage.get_item("movieCache") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, file_storage):
        await file_storage.set_item("searchHistory", '["batman"]')
        assert await file_storage.get_item("searchHistory") == '["batman"]'

    @pytest.mark.asyncio
    async def test_values_survive_new_instance(self, tmp_path):
        await JsonFileStorage(tmp_path).set_item("apiLimit", "{}")
        assert await JsonFileStorage(tmp_path).get_item("apiLimit") == "{}"

    @pytest.mark.asyncio
    async def test_remove_item(self, file_storage):
        await file_storage.set_item("k", "v")
        await file_storage.remove_item("k")
        assert await file_storage.get_item("k") is None
        # Removing again is a no-op
        await file_storage.remove_item("k")

    @pytest.mark.asyncio
    async def test_clear(self, file_storage):
        await file_storage.set_item("a", "1")
        await file_storage.set_item("b", "2")
        await file_storage.clear()
        assert await file_storage.get_item("a") is None
        assert await file_storage.get_item("b") is None

    @pytest.mark.asyncio
    async def test_rejects_path_like_keys(self, file_storage):
        with pytest.raises(ValueError, match="Invalid storage key"):
            await file_storage.get_item("../escape")


class TestMemoryStorage:
    def test_protocol_conformance(self):
        assert isinstance(MemoryStorage(), KeyValueStorage)

    @pytest.mark.asyncio
    async def test_round_trip_and_clear(self):
        storage = MemoryStorage({"x": "1"})
        await storage.set_item("y", "2")
        assert await storage.get_item("x") == "1"
        assert sorted(storage.keys()) == ["x", "y"]
        await storage.clear()
        assert storage.keys() == []


class TestJsonHelpers:
    @pytest.mark.asyncio
    async def test_save_and_load(self):
        storage = MemoryStorage()
        await save_json(storage, "k", {"calls": 3})
        assert await load_json(storage, "k") == {"calls": 3}

    @pytest.mark.asyncio
    async def test_missing_returns_default(self):
        assert await load_json(MemoryStorage(), "k", default=[]) == []

    @pytest.mark.asyncio
    async def test_corrupt_returns_default(self, caplog):
        storage = MemoryStorage({"k": "not valid json{{{"})
        assert await load_json(storage, "k", default=[]) == []
        assert "corrupt" in caplog.text
