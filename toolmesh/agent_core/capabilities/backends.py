"""HTTP backends for the built-in capabilities.

``HttpSearchBackend`` queries a JSON search endpoint that speaks the SearxNG
``/search?format=json`` dialect and normalizes its hits to
``{"title", "url", "snippet"}``. It satisfies ``SearchBackend`` and can be
passed as ``ToolDeps.web_search``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class HttpSearchBackend:
    """Async web search over an HTTP JSON endpoint.

    A shared ``httpx.AsyncClient`` may be provided (custom timeouts, proxies,
    or a mock transport in tests); otherwise one is created per backend and
    released by ``aclose``. The per-call ``region`` overrides the one given here.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        region: Optional[str] = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._region = region

    async def __call__(self, query: str, limit: int, region: Optional[str] = None) -> List[Dict[str, Any]]:
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        params: Dict[str, Any] = {"q": query, "format": "json"}
        language = region or self._region
        if language:
            params["language"] = language
        resp = await self._client.get(f"{self._endpoint}/search", params=params)
        resp.raise_for_status()
        data = resp.json()

        hits: List[Dict[str, Any]] = []
        for item in data.get("results") or []:
            url = item.get("url") or item.get("link")
            if not url:
                continue
            hits.append(
                {
                    "title": item.get("title") or "",
                    "url": url,
                    "snippet": item.get("content") or item.get("snippet") or "",
                }
            )
            if len(hits) >= limit:
                break
        logger.debug("search endpoint returned %d hits for %r", len(hits), query)
        return hits

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self) -> None:
        await self._client.aclose()
