"""Shared HTTP plumbing for search backends.

Translates every httpx failure mode into a BackendError with a kind the
orchestrator can turn into a user-facing condition. Each search sends
exactly one request: every request counts against the daily quota, so a
429 is reported rather than retried.
"""

from __future__ import annotations

import math

import httpx

from cinelink_search.contracts import CacheRecord, RemotePage
from cinelink_search.errors import BackendError

REMOTE_PAGE_SIZE = 10

# OMDb reports these as Response=False but they just mean "nothing here"
_EMPTY_ERRORS = ("movie not found!", "series not found!", "too many results.")


async def get_json(client: httpx.AsyncClient, path: str, params: dict) -> dict:
    """GET ``path`` once and decode the JSON body, raising BackendError on failure."""
    try:
        resp = await client.get(path, params=params)
        resp.raise_for_status()
    except httpx.TimeoutException as exc:
        raise BackendError(f"Request timed out: {exc}", kind="timeout") from exc
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        message = "Rate limited by search API" if status == 429 else f"HTTP {status}"
        raise BackendError(message, kind="api", status_code=status) from exc
    except httpx.HTTPError as exc:
        raise BackendError(f"Network error: {exc}", kind="network") from exc

    try:
        data = resp.json()
    except ValueError as exc:
        raise BackendError("Malformed JSON payload", kind="api") from exc
    if not isinstance(data, dict):
        raise BackendError("Unexpected payload shape", kind="api")
    return data


def record_from_item(item: dict) -> CacheRecord | None:
    """Build a CacheRecord from an OMDb-shaped search item."""
    record_id = item.get("imdbID") or item.get("id")
    title = item.get("Title") or item.get("title")
    if not record_id or not title:
        return None

    poster = item.get("Poster", item.get("poster"))
    record = CacheRecord(
        id=str(record_id),
        title=str(title),
        year=str(item.get("Year") or item.get("year") or ""),
        type=str(item.get("Type") or item.get("type") or "movie"),
        poster=poster or None,
    )
    genre = item.get("Genre") or item.get("genre")
    if genre:
        record["genre"] = str(genre)
    return record


def parse_search_payload(data: dict) -> RemotePage:
    """Parse a ``{"Search": [...], "totalResults": "N", "Response": ...}`` payload."""
    if str(data.get("Response", "True")).lower() == "false":
        error = str(data.get("Error", ""))
        if error.lower() in _EMPTY_ERRORS:
            return RemotePage(items=[], total_results=0, total_pages=0)
        raise BackendError(error or "Search failed", kind="api")

    raw_items = data.get("Search") or []
    if not isinstance(raw_items, list):
        raise BackendError("Unexpected 'Search' field", kind="api")

    items: list[CacheRecord] = []
    for item in raw_items:
        if isinstance(item, dict):
            record = record_from_item(item)
            if record is not None:
                items.append(record)

    try:
        total = int(data.get("totalResults") or len(items))
    except (TypeError, ValueError):
        total = len(items)

    return RemotePage(
        items=items,
        total_results=total,
        total_pages=math.ceil(total / REMOTE_PAGE_SIZE),
    )
