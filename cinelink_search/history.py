"""Most-recent-first search history, persisted locally."""

from __future__ import annotations

import logging

from cinelink_search.config import HISTORY_KEY, MIN_QUERY_LENGTH
from cinelink_search.contracts import KeyValueStorage
from cinelink_search.storage import load_json, save_json

logger = logging.getLogger(__name__)

MAX_HISTORY_SIZE = 20


class SearchHistory:
    """Up to ``max_size`` distinct query strings, newest first.

    Saving an existing entry moves it to the front; saving the entry that
    is already at the front changes nothing.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        max_size: int = MAX_HISTORY_SIZE,
        key: str = HISTORY_KEY,
    ) -> None:
        self._storage = storage
        self._key = key
        self.max_size = max_size
        self._entries: list[str] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    async def load(self) -> None:
        data = await load_json(self._storage, self._key, default=[])
        if not isinstance(data, list):
            logger.warning("History blob is not a list; starting empty")
            data = []
        entries: list[str] = []
        for item in data:
            if isinstance(item, str) and item not in entries:
                entries.append(item)
        self._entries = entries[: self.max_size]

    async def save(self, term: str) -> None:
        if not term or len(term) < MIN_QUERY_LENGTH:
            return
        if self._entries and self._entries[0] == term:
            return

        self._entries = [term, *(e for e in self._entries if e != term)][: self.max_size]
        await save_json(self._storage, self._key, self._entries)

    async def delete(self, term: str) -> None:
        if term not in self._entries:
            return
        self._entries = [e for e in self._entries if e != term]
        await save_json(self._storage, self._key, self._entries)

    async def clear(self) -> None:
        self._entries = []
        await self._storage.remove_item(self._key)
