from __future__ import annotations

"""Search -> navigate -> extract pipeline.

``ChainedPipeline`` wires three calls against two capabilities in a fixed
order:

1. **search**: ``{"query": query, "limit": N}`` on the search capability.
   The reply is ``{"results": [{"title", "url", "snippet"}]}``.
2. **select**: the first result URL, in the order the search returned them.
3. **navigate**: ``{"action": "go_to_url", "url": url}`` on the browser. The
   reply must carry a tab identifier.
4. **extract**: ``{"action": "extract_content", "tab_id": tab, "goal": goal}``
   on the browser. The reply text is the answer.

Stages run strictly one after another; there are no retries and no fallback
to later search results.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from ..capabilities.registry import CapabilityRegistry
from ..errors import (
    EmptySearchResultError,
    NavigationFailedError,
    PipelineStageError,
    ToolRuntimeError,
)
from ..schemas.domain import CallRequest

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_CAPABILITY = "web_search"
DEFAULT_BROWSER_CAPABILITY = "browseruse"
DEFAULT_SEARCH_LIMIT = 5


class ChainedPipeline:
    """Run the search -> navigate -> extract chain against the registry."""

    def __init__(
        self,
        *,
        registry: CapabilityRegistry,
        search_capability: str = DEFAULT_SEARCH_CAPABILITY,
        browser_capability: str = DEFAULT_BROWSER_CAPABILITY,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._registry = registry
        self._search_capability = search_capability
        self._browser_capability = browser_capability
        self._search_limit = search_limit

    async def run(self, query: str, extract_goal: str) -> str:
        """Answer ``query`` by extracting ``extract_goal`` from the first search hit.

        Raises:
            EmptySearchResultError: The search returned no results.
            NavigationFailedError: The browser could not open the selected URL.
            PipelineStageError: Any other stage failure.
        """
        url = await self.search(query)
        tab_id = await self.navigate(url)
        text = await self._call_text("extract", self._browser_capability, {
            "action": "extract_content",
            "tab_id": tab_id,
            "goal": extract_goal,
        })
        logger.info("Pipeline finished for query=%r (%d characters extracted)", query, len(text))
        return text

    async def search(self, query: str) -> str:
        """Run the search stage and return the selected URL."""
        text = await self._call_text("search", self._search_capability, {
            "query": query,
            "limit": self._search_limit,
        })
        payload = _decode_object("search", text)
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise PipelineStageError("search", message=f"unexpected results payload: {results!r}")
        if not results:
            raise EmptySearchResultError()

        url = select_first_url(results)
        logger.debug("Selected %s out of %d search results", url, len(results))
        return url

    async def navigate(self, url: str) -> str:
        """Open ``url`` in the browser and return the tab identifier."""
        cap = self._lookup("navigate", self._browser_capability)
        try:
            result = await cap.call(CallRequest(arguments={"action": "go_to_url", "url": url}))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise PipelineStageError("navigate", exc) from exc

        if result.is_error:
            raise NavigationFailedError(url, result.summary() or "browser reported an error")
        try:
            payload = json.loads(result.first_text())
        except (ToolRuntimeError, ValueError) as exc:
            raise NavigationFailedError(url, f"unreadable browser reply: {exc}") from exc

        tab_id = extract_tab_id(payload)
        if tab_id is None:
            raise NavigationFailedError(url, "browser reply carries no tab identifier")
        return tab_id

    def _lookup(self, stage: str, name: str) -> Any:
        try:
            return self._registry.lookup(name)
        except ToolRuntimeError as exc:
            raise PipelineStageError(stage, exc) from exc

    async def _call_text(self, stage: str, name: str, arguments: Dict[str, Any]) -> str:
        cap = self._lookup(stage, name)
        try:
            result = await cap.call(CallRequest(arguments=arguments))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            raise PipelineStageError(stage, exc) from exc

        if result.is_error:
            raise PipelineStageError(stage, message=result.summary() or f"'{name}' reported an error")
        try:
            return result.first_text()
        except ToolRuntimeError as exc:
            raise PipelineStageError(stage, exc) from exc


def select_first_url(results: list) -> str:
    """Return the URL of the first result, in source order."""
    first = results[0]
    url = str(first.get("url") or "").strip() if isinstance(first, dict) else ""
    if not url:
        raise PipelineStageError("select", message=f"first search result has no url: {first!r}")
    return url


def extract_tab_id(payload: Any) -> Optional[str]:
    """Find the tab identifier in a navigation reply.

    Accepts ``tab_id``, ``tabId`` and ``TabID`` (key match ignores case and
    underscores). Numeric identifiers are returned as strings.
    """
    if not isinstance(payload, dict):
        return None
    for key, value in payload.items():
        if str(key).replace("_", "").lower() == "tabid" and value not in (None, ""):
            return str(value)
    return None


def _decode_object(stage: str, text: str) -> Dict[str, Any]:
    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise PipelineStageError(stage, message=f"malformed JSON reply: {exc}") from exc
    if not isinstance(payload, dict):
        raise PipelineStageError(stage, message="reply is not a JSON object")
    return payload
