"""Ranked autosuggestions from history, cached titles, and popular keywords."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Callable

from cinelink_search.cache.fuzzy import SUGGESTION_OPTIONS, FuzzyIndex
from cinelink_search.contracts import CacheRecord
from cinelink_search.utils.text import unique

from .debounce import Debouncer

logger = logging.getLogger(__name__)

DEBOUNCE_MS = 200
MAX_SUGGESTIONS = 8
MAX_RECENT_SEARCHES = 3
MAX_POPULAR_KEYWORDS = 5
MAX_EXACT_MATCHES = 2
MAX_PARTIAL_MATCHES = 2
MAX_MOVIE_MATCHES = 4
MAX_POPULAR_MATCHES = 3


class SuggestionGenerator:
    """Builds suggestion lists; ``request()`` is the debounced entry point.

    Ordering for non-empty input, case-insensitive:
      1. history entries starting with the input
      2. history entries containing (not starting with) the input
      3. fuzzy-matched cached titles
      4. popular keywords containing the input
    Empty input yields recent history followed by popular keywords.
    """

    def __init__(
        self,
        *,
        keywords: Sequence[str] = (),
        debounce_ms: int = DEBOUNCE_MS,
        on_suggestions: Callable[[list[str]], None] | None = None,
    ) -> None:
        self._keywords = list(keywords)
        self._index: FuzzyIndex | None = None
        self._on_suggestions = on_suggestions
        self._suggestions: list[str] = []
        self._debouncer = Debouncer(debounce_ms / 1000.0, self._publish)

    @property
    def suggestions(self) -> list[str]:
        return list(self._suggestions)

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    def set_keywords(self, keywords: Sequence[str]) -> None:
        self._keywords = list(keywords)

    def refresh_index(self, records: list[CacheRecord]) -> None:
        """Rebuild the title index from the current cache contents."""
        self._index = FuzzyIndex(records, SUGGESTION_OPTIONS) if records else None

    def generate(self, text: str, history: Sequence[str] = ()) -> list[str]:
        """Suggestions for ``text`` right now, without debouncing."""
        if not text or not text.strip():
            combined = [*history[:MAX_RECENT_SEARCHES], *self._keywords[:MAX_POPULAR_KEYWORDS]]
            return unique(combined)[:MAX_SUGGESTIONS]

        needle = text.lower()
        out: list[str] = []

        out.extend([h for h in history if h.lower().startswith(needle)][:MAX_EXACT_MATCHES])
        out.extend(
            [h for h in history if needle in h.lower() and not h.lower().startswith(needle)][
                :MAX_PARTIAL_MATCHES
            ]
        )

        if self._index is not None:
            titles = [r["title"] for r in self._index.search(text, limit=MAX_MOVIE_MATCHES)]
            out.extend(t for t in titles if t not in out)

        matches = [k for k in self._keywords if needle in k.lower()][:MAX_POPULAR_MATCHES]
        out.extend(k for k in matches if k not in out)

        return unique(out)[:MAX_SUGGESTIONS]

    def request(self, text: str, history: Sequence[str] = ()) -> None:
        """Debounced generate; the settled result lands in ``suggestions``."""
        self._debouncer.start(text, list(history))

    def cancel(self) -> bool:
        return self._debouncer.cancel()

    async def wait(self) -> None:
        await self._debouncer.wait()

    def _publish(self, text: str, history: list[str]) -> None:
        self._suggestions = self.generate(text, history)
        logger.debug("%d suggestions for %r", len(self._suggestions), text)
        if self._on_suggestions is not None:
            self._on_suggestions(self.suggestions)
