"""Popular search phrases for the suggestion list."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable
from typing import Callable

from cinelink_search.config import KEYWORD_MAX_AGE_SECONDS, KEYWORDS_KEY, KEYWORDS_TIME_KEY
from cinelink_search.contracts import KeyValueStorage
from cinelink_search.errors import StorageError
from cinelink_search.storage import load_json, save_json

logger = logging.getLogger(__name__)

FALLBACK_KEYWORDS = [
    "action movies",
    "comedy series",
    "drama films",
    "thriller movies",
    "horror films",
    "sci-fi movies",
    "adventure movies",
    "fantasy films",
]


class PopularKeywords:
    """Trending phrases fetched remotely and cached for ``max_age`` seconds.

    Falls back to a fixed list when there is no fetcher or it fails.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        fetcher: Callable[[], Awaitable[list[str]]] | None = None,
        max_age: float = KEYWORD_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._fetcher = fetcher
        self._clock = clock
        self.max_age = max_age
        self._keywords: list[str] = list(FALLBACK_KEYWORDS)

    @property
    def keywords(self) -> list[str]:
        return list(self._keywords)

    async def load(self) -> list[str]:
        cached = await load_json(self._storage, KEYWORDS_KEY)
        cached_at = await load_json(self._storage, KEYWORDS_TIME_KEY)
        if (
            isinstance(cached, list)
            and cached
            and isinstance(cached_at, (int, float))
            and self._clock() - cached_at < self.max_age
        ):
            self._keywords = [str(k) for k in cached]
            return self.keywords

        if self._fetcher is None:
            self._keywords = list(FALLBACK_KEYWORDS)
            return self.keywords

        try:
            fresh = await self._fetcher()
        except Exception as exc:  # any fetch failure degrades to the fixed list
            logger.warning("Failed to load trending keywords: %s", exc)
            self._keywords = list(FALLBACK_KEYWORDS)
            return self.keywords

        if not fresh:
            self._keywords = list(FALLBACK_KEYWORDS)
            return self.keywords

        self._keywords = list(fresh)
        try:
            await save_json(self._storage, KEYWORDS_KEY, self._keywords)
            await save_json(self._storage, KEYWORDS_TIME_KEY, self._clock())
        except StorageError as exc:
            logger.warning("Could not cache trending keywords: %s", exc)
        return self.keywords
