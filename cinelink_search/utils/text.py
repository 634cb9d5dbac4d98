"""Text utilities: query normalization, genre detection, order-preserving dedup."""

from __future__ import annotations

import re
from collections.abc import Hashable, Iterable
from typing import Callable, TypeVar

from cinelink_search.config import MIN_QUERY_LENGTH

T = TypeVar("T")

_WHITESPACE_RE = re.compile(r"\s+")

# Queries that name a genre want fresh remote results, not cached title matches
GENRE_KEYWORDS = frozenset(
    {
        "action",
        "adventure",
        "animation",
        "comedy",
        "crime",
        "documentary",
        "drama",
        "family",
        "fantasy",
        "history",
        "horror",
        "music",
        "mystery",
        "romance",
        "science fiction",
        "sci-fi",
        "sci fi",
        "scifi",
        "thriller",
        "war",
        "western",
        "anime",
        "bollywood",
        "hollywood",
        "korean",
        "japanese",
        "kids",
        "reality",
        "soap",
        "talk",
    }
)


def normalize_query(raw: str | None, min_length: int = MIN_QUERY_LENGTH) -> str | None:
    """Trim and collapse internal whitespace. None if shorter than ``min_length``."""
    if not raw:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", raw.strip())
    if len(cleaned) < min_length:
        return None
    return cleaned


def is_genre_query(query: str) -> bool:
    q = query.lower().strip()
    return q in GENRE_KEYWORDS or (q.endswith("s") and q[:-1] in GENRE_KEYWORDS)


def unique(items: Iterable[T], key: Callable[[T], Hashable] | None = None) -> list[T]:
    """Drop repeats, keeping the first occurrence of each key."""
    seen: set = set()
    out: list[T] = []
    for item in items:
        k = key(item) if key else item
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out
