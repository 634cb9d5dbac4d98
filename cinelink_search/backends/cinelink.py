"""CineLink backend proxy.

The app's own API fronts OMDb and answers with the same payload shape
on ``/movies/search``. It also serves trending keywords for the
suggestion list.
"""

from __future__ import annotations

import httpx

from cinelink_search.contracts import ContentFilter, RemotePage

from . import register_backend
from .http import get_json, parse_search_payload

_BASE_URL = "https://cinelink-backend-production.up.railway.app/api"


class CinelinkBackend:
    name: str = "cinelink"

    def __init__(self, *, base_url: str = _BASE_URL, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
        )

    async def search(
        self,
        query: str,
        *,
        content_filter: ContentFilter = ContentFilter.ALL,
        page: int = 1,
    ) -> RemotePage:
        params: dict[str, str | int] = {"q": query, "page": page}
        if content_filter != ContentFilter.ALL:
            params["type"] = content_filter.value

        data = await get_json(self._client, "/movies/search", params)
        return parse_search_payload(data)

    async def trending_keywords(self) -> list[str]:
        """Return the backend's current popular search phrases."""
        data = await get_json(self._client, "/search/trending-keywords", {})
        keywords = data.get("keywords") or []
        return [str(k) for k in keywords if isinstance(k, str) and k.strip()]

    async def health_check(self) -> bool:
        try:
            resp = await self._client.get("/health")
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def aclose(self) -> None:
        await self._client.aclose()


register_backend("cinelink", CinelinkBackend)
