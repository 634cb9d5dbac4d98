"""OMDb search backend."""

from __future__ import annotations

import httpx

from cinelink_search.contracts import ContentFilter, RemotePage

from . import register_backend
from .http import get_json, parse_search_payload

_BASE_URL = "https://www.omdbapi.com/"


class OmdbBackend:
    """Direct OMDb API client (``?s=<query>&type=<filter>&page=<n>``).

    OMDb pages are fixed at 10 items.
    """

    name: str = "omdb"

    def __init__(
        self, *, api_key: str = "", base_url: str = _BASE_URL, timeout: float = 30.0
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url
        self._client = httpx.AsyncClient(timeout=timeout)

    async def search(
        self,
        query: str,
        *,
        content_filter: ContentFilter = ContentFilter.ALL,
        page: int = 1,
    ) -> RemotePage:
        params: dict[str, str | int] = {"s": query, "page": page, "apikey": self._api_key}
        if content_filter != ContentFilter.ALL:
            params["type"] = content_filter.value

        data = await get_json(self._client, self.base_url, params)
        return parse_search_payload(data)

    async def health_check(self) -> bool:
        try:
            resp = await self._client.get(
                self.base_url, params={"s": "test", "apikey": self._api_key}
            )
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    async def aclose(self) -> None:
        await self._client.aclose()


register_backend("omdb", OmdbBackend)
