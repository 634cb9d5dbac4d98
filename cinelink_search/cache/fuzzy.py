"""Weighted approximate-match index over cached records.

Each configured field is compared to the query with rapidfuzz. When the
query is shorter than the field value, ``partial_ratio`` is used so the
query may match anywhere in the value; otherwise the plain ``ratio``
applies, which keeps equal-length and longer queries from sliding over
short fields such as the year. A field matches when its distance (1 - similarity) is within the
threshold, and a record matches when any field does. Matches are ranked
by the weighted similarity of their matching fields.

The index is immutable: rebuild it whenever the record list changes.
"""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz import fuzz

from cinelink_search.contracts import CacheRecord


@dataclass(frozen=True)
class FuzzyOptions:
    keys: tuple[tuple[str, float], ...]  # (field, weight)
    threshold: float  # max distance accepted, 0 = exact
    min_match_char_length: int = 1


SEARCH_OPTIONS = FuzzyOptions(
    keys=(("title", 0.7), ("year", 0.15), ("genre", 0.15)),
    threshold=0.4,
    min_match_char_length=2,
)

SUGGESTION_OPTIONS = FuzzyOptions(
    keys=(("title", 0.85), ("year", 0.15)),
    threshold=0.5,
    min_match_char_length=1,
)


def field_similarity(query: str, value: str) -> float:
    """Similarity in [0, 1] between an already-lowercased query and value."""
    if not query or not value:
        return 0.0
    if len(query) < len(value):
        return fuzz.partial_ratio(query, value) / 100.0
    return fuzz.ratio(query, value) / 100.0


class FuzzyIndex:
    def __init__(self, records: list[CacheRecord], options: FuzzyOptions = SEARCH_OPTIONS) -> None:
        self.options = options
        self._records = list(records)
        self._total_weight = sum(w for _, w in options.keys) or 1.0
        # Pre-lowered field values, aligned with self._records
        self._fields: list[list[tuple[str, float]]] = [
            [
                (str(record.get(name) or "").lower(), weight)  # type: ignore[misc]
                for name, weight in options.keys
            ]
            for record in self._records
        ]

    def __len__(self) -> int:
        return len(self._records)

    def search_scored(
        self, query: str, limit: int | None = None
    ) -> list[tuple[CacheRecord, float]]:
        """Matches with relevance in (0, 1], best first."""
        q = query.lower().strip()
        if len(q) < self.options.min_match_char_length or not self._records:
            return []

        cutoff = 1.0 - self.options.threshold
        scored: list[tuple[float, int]] = []
        for pos, fields in enumerate(self._fields):
            relevance = 0.0
            matched = False
            for value, weight in fields:
                sim = field_similarity(q, value)
                if sim >= cutoff:
                    matched = True
                    relevance += weight * sim
            if matched:
                scored.append((relevance / self._total_weight, pos))

        # Stable on position so equal scores keep insertion order
        scored.sort(key=lambda x: (-x[0], x[1]))
        if limit is not None:
            scored = scored[:limit]
        return [(self._records[pos], score) for score, pos in scored]

    def search(self, query: str, limit: int | None = None) -> list[CacheRecord]:
        return [record for record, _ in self.search_scored(query, limit)]
