from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..errors import InvalidArgumentsError
from ..schemas.domain import CallRequest, CallResult, CapabilityDescriptor, ParameterSpec
from .base import BrowserBackend, SearchBackend, ToolDeps, VectorSearchBackend

logger = logging.getLogger(__name__)


class WebSearchConfig(BaseModel):
    """Configuration blob for the ``web_search`` capability."""

    max_results: int = Field(default=5, ge=1, description="Upper bound for the result count")
    region: Optional[str] = Field(default=None, description="Search region hint passed to the backend on every call")


class BrowserConfig(BaseModel):
    """Launch options for the ``browseruse`` capability, applied once at construction."""

    headless: bool = True
    disable_security: bool = False
    extra_chromium_args: List[str] = Field(default_factory=list)


class VectorSearchConfig(BaseModel):
    """Configuration blob for the ``vector_search`` capability."""

    address: str = Field(..., min_length=1, description="Vector store address, used to connect at construction")
    collection: str = "default"
    top_k: int = Field(default=5, ge=1)
    score_threshold: float = 0.0
    metric_type: Literal["L2", "IP", "HAMMING", "JACCARD"] = "L2"


class WebSearchCapability:
    """
    Capability to perform web searches.

    Delegates the search to the ``web_search`` backend of the dependency
    bundle and renders the hits as ``{"results": [{title, url, snippet}]}``.
    """

    name = "web_search"

    def __init__(self, config: WebSearchConfig, backend: SearchBackend) -> None:
        self._config = config
        self._backend = backend

    def descriptor(self) -> CapabilityDescriptor:
        return CapabilityDescriptor(
            name=self.name,
            description="Web search tool for retrieving up-to-date information from the internet.",
            parameters={
                "query": ParameterSpec(type="string", description="Search keywords", required=True),
                "limit": ParameterSpec(type="integer", description="Maximum number of results"),
            },
        )

    async def call(self, request: CallRequest) -> CallResult:
        """
        Execute a web search.

        Args:
            request: Arguments:
                - query (str): The search query. Alias: 'q'.
                - limit (int): Optional result count, at least 1 and capped by ``max_results``.

        Returns:
            CallResult: JSON text with the search hits, or an error result.
        """
        try:
            args = request.as_dict()
        except InvalidArgumentsError as exc:
            return CallResult.error(str(exc))

        query = str(args.get("query") or args.get("q") or "").strip()
        if not query:
            return CallResult.error("missing query")
        raw_limit = args.get("limit")
        if raw_limit is None or raw_limit == "":
            limit = self._config.max_results
        else:
            try:
                limit = int(raw_limit)
            except (TypeError, ValueError):
                return CallResult.error(f"invalid limit: {raw_limit!r}")
            if limit < 1:
                return CallResult.error(f"invalid limit: {raw_limit!r} (must be at least 1)")
            limit = min(limit, self._config.max_results)

        try:
            hits = await self._backend(query, limit, self._config.region)
        except Exception as exc:
            logger.warning("web_search backend failed for query=%r: %s", query, exc)
            return CallResult.error(f"search failed: {exc}")

        results = [
            {
                "title": str(hit.get("title") or ""),
                "url": str(hit.get("url") or hit.get("link") or ""),
                "snippet": str(hit.get("snippet") or hit.get("summary") or ""),
            }
            for hit in hits[:limit]
        ]
        return CallResult.text(json.dumps({"results": results}, ensure_ascii=False))


class BrowserCapability:
    """
    Capability to drive a real browser (navigate, click, extract content).

    Arguments may arrive as a mapping or as their serialized JSON string; both
    are accepted. The backend response is returned as JSON text.
    """

    name = "browseruse"

    def __init__(self, backend: BrowserBackend) -> None:
        self._backend = backend

    def descriptor(self) -> CapabilityDescriptor:
        return CapabilityDescriptor(
            name=self.name,
            description="Real browser automation tool (navigation, content extraction, etc.).",
            parameters={
                "action": ParameterSpec(
                    type="string",
                    description="Action type (go_to_url, click_element, extract_content, ...)",
                    required=True,
                ),
                "url": ParameterSpec(type="string", description="Target URL for navigation or a new tab"),
                "goal": ParameterSpec(type="string", description="Extraction goal for extract_content"),
                "index": ParameterSpec(type="string", description="Element index"),
                "scroll_amount": ParameterSpec(type="string", description="Pixels to scroll"),
                "tab_id": ParameterSpec(type="string", description="Tab identifier"),
                "query": ParameterSpec(type="string", description="Search query"),
            },
        )

    async def call(self, request: CallRequest) -> CallResult:
        try:
            action = request.as_dict()
        except InvalidArgumentsError as exc:
            return CallResult.error(f"failed to parse arguments: {exc}")

        if not str(action.get("action") or "").strip():
            return CallResult.error("missing action")

        try:
            result = await self._backend.execute(action)
        except Exception as exc:
            logger.warning("browser action %r failed: %s", action.get("action"), exc)
            return CallResult.error(f"browser action failed: {exc}")
        return CallResult.text(json.dumps(dict(result), ensure_ascii=False, default=str))


class VectorSearchCapability:
    """Capability to retrieve entry points and documents from a vector store."""

    name = "vector_search"

    def __init__(self, config: VectorSearchConfig, backend: VectorSearchBackend) -> None:
        self._config = config
        self._backend = backend

    def descriptor(self) -> CapabilityDescriptor:
        return CapabilityDescriptor(
            name=self.name,
            description=(
                "Search site features and their entry URLs (tickets, hotel booking, ...). "
                "Input the user's question to get the best matching entry URL."
            ),
            parameters={
                "query": ParameterSpec(
                    type="string",
                    description="Retrieval text; the intent is matched against the most relevant resources",
                    required=True,
                ),
            },
        )

    async def call(self, request: CallRequest) -> CallResult:
        # a bare string argument is the query itself
        if isinstance(request.arguments, str):
            query = request.arguments.strip()
            if query.startswith("{"):
                try:
                    query = str(request.as_dict().get("query") or "").strip()
                except InvalidArgumentsError as exc:
                    return CallResult.error(str(exc))
        else:
            query = str(request.arguments.get("query") or "").strip()
        if not query:
            return CallResult.error("missing query")

        try:
            documents = await self._backend.search(query, self._config.top_k, self._config.collection)
        except Exception as exc:
            logger.warning("vector search failed for query=%r: %s", query, exc)
            return CallResult.error(f"retrieval failed: {exc}")

        threshold = self._config.score_threshold
        kept: List[Dict[str, Any]] = [
            doc for doc in documents if float(doc.get("score", threshold) or 0.0) >= threshold
        ]
        return CallResult.text(json.dumps(kept, ensure_ascii=False, default=str))


def _require(backend: Any, name: str) -> Any:
    if backend is None:
        raise RuntimeError(f"{name} backend not configured")
    return backend


def build_web_search(config: WebSearchConfig, deps: ToolDeps) -> WebSearchCapability:
    return WebSearchCapability(config, _require(deps.web_search, "web_search"))


async def build_browser(config: BrowserConfig, deps: ToolDeps) -> BrowserCapability:
    backend = _require(deps.browser, "browser")
    await backend.launch(
        headless=config.headless,
        disable_security=config.disable_security,
        extra_chromium_args=list(config.extra_chromium_args),
    )
    return BrowserCapability(backend)


async def build_vector_search(config: VectorSearchConfig, deps: ToolDeps) -> VectorSearchCapability:
    backend = _require(deps.vector_search, "vector_search")
    await backend.connect(address=config.address, metric_type=config.metric_type)
    return VectorSearchCapability(config, backend)
