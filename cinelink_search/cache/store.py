"""Bounded, persisted list of previously seen result records."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cinelink_search.config import CACHE_KEY
from cinelink_search.contracts import CacheRecord, KeyValueStorage
from cinelink_search.storage import load_json, save_json

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1500


class CacheStore:
    """Insertion-ordered record cache, unique by ``id``, FIFO-evicted at ``max_size``.

    The whole list is rewritten to storage on every mutation. Existing
    records are never overwritten: the first write for an id wins.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        max_size: int = DEFAULT_MAX_SIZE,
        key: str = CACHE_KEY,
    ) -> None:
        self._storage = storage
        self._key = key
        self.max_size = max_size
        self._records: list[CacheRecord] = []
        self._ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    async def load(self) -> None:
        """Read persisted records. Corrupt or missing data means an empty cache."""
        data = await load_json(self._storage, self._key, default=[])
        if not isinstance(data, list):
            logger.warning("Cache blob is not a list; starting empty")
            data = []

        records: list[CacheRecord] = []
        seen: set[str] = set()
        for item in data:
            if not isinstance(item, dict) or not item.get("id") or item["id"] in seen:
                continue
            seen.add(item["id"])
            records.append(item)  # type: ignore[arg-type]

        self._records = records
        self._evict()
        logger.debug("Loaded %d cached records", len(self._records))

    async def upsert_many(self, records: Iterable[CacheRecord]) -> bool:
        """Insert unseen records. Returns True if anything was added."""
        added = False
        for record in records:
            record_id = record.get("id")
            if not record_id or record_id in self._ids:
                continue
            self._records.append(record)
            self._ids.add(record_id)
            added = True

        if added:
            self._evict()
            await save_json(self._storage, self._key, self._records)
        return added

    def all(self) -> list[CacheRecord]:
        """Current records, oldest first."""
        return list(self._records)

    async def clear(self) -> None:
        self._records = []
        self._ids = set()
        await self._storage.remove_item(self._key)

    def _evict(self) -> None:
        excess = len(self._records) - self.max_size
        if excess > 0:
            del self._records[:excess]
            logger.debug("Evicted %d oldest cached records", excess)
        self._ids = {r["id"] for r in self._records}
