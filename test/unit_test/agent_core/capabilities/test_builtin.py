from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

import pytest

from toolmesh.agent_core.capabilities.base import Capability, ToolDeps
from toolmesh.agent_core.capabilities.builtin import (
    BrowserCapability,
    BrowserConfig,
    VectorSearchCapability,
    VectorSearchConfig,
    WebSearchCapability,
    WebSearchConfig,
    build_browser,
    build_vector_search,
    build_web_search,
)
from toolmesh.agent_core.schemas.domain import CallRequest


class _FakeSearch:
    def __init__(self, hits: List[Dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self.hits = hits or []
        self.error = error
        self.calls: List[Tuple[str, int]] = []
        self.regions: List[str | None] = []

    async def __call__(self, query: str, limit: int, region: str | None = None) -> List[Dict[str, Any]]:
        self.calls.append((query, limit))
        self.regions.append(region)
        if self.error is not None:
            raise self.error
        return self.hits


class _FakeBrowser:
    def __init__(self, reply: Dict[str, Any] | None = None, error: Exception | None = None) -> None:
        self.reply = reply or {"ok": True}
        self.error = error
        self.actions: List[Dict[str, Any]] = []
        self.launched: List[Dict[str, Any]] = []

    async def launch(self, *, headless: bool, disable_security: bool, extra_chromium_args: List[str]) -> None:
        self.launched.append(
            {"headless": headless, "disable_security": disable_security, "extra_chromium_args": extra_chromium_args}
        )

    async def execute(self, action: Dict[str, Any]) -> Dict[str, Any]:
        self.actions.append(action)
        if self.error is not None:
            raise self.error
        return self.reply


class _FakeVectorStore:
    def __init__(self, docs: List[Dict[str, Any]]) -> None:
        self.docs = docs
        self.calls: List[Tuple[str, int, str]] = []
        self.connections: List[Tuple[str, str]] = []

    async def connect(self, *, address: str, metric_type: str) -> None:
        self.connections.append((address, metric_type))

    async def search(self, query: str, top_k: int, collection: str) -> List[Dict[str, Any]]:
        self.calls.append((query, top_k, collection))
        return self.docs


def test_builtin_capabilities_satisfy_protocol() -> None:
    assert isinstance(WebSearchCapability(WebSearchConfig(), _FakeSearch()), Capability)
    assert isinstance(BrowserCapability(_FakeBrowser()), Capability)
    assert isinstance(VectorSearchCapability(VectorSearchConfig(address="localhost:19530"), _FakeVectorStore([])), Capability)


def test_web_search_descriptor_marks_query_required() -> None:
    desc = WebSearchCapability(WebSearchConfig(), _FakeSearch()).descriptor()
    assert desc.name == "web_search"
    assert desc.required_parameters() == ["query"]


@pytest.mark.asyncio
async def test_web_search_renders_results_json() -> None:
    backend = _FakeSearch(
        hits=[
            {"title": "A", "url": "https://a.example", "snippet": "first"},
            {"title": "B", "link": "https://b.example", "summary": "second"},
        ]
    )
    cap = WebSearchCapability(WebSearchConfig(), backend)

    res = await cap.call(CallRequest(arguments={"query": "python", "limit": 2}))

    assert res.is_error is False
    payload = json.loads(res.first_text())
    assert payload == {
        "results": [
            {"title": "A", "url": "https://a.example", "snippet": "first"},
            {"title": "B", "url": "https://b.example", "snippet": "second"},
        ]
    }
    assert backend.calls == [("python", 2)]


@pytest.mark.asyncio
async def test_web_search_limit_is_capped_by_config() -> None:
    backend = _FakeSearch()
    cap = WebSearchCapability(WebSearchConfig(max_results=3), backend)

    await cap.call(CallRequest(arguments={"q": "python", "limit": 50}))

    assert backend.calls == [("python", 3)]


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [-1, 0, "-3"])
async def test_web_search_rejects_non_positive_limit(limit: Any) -> None:
    backend = _FakeSearch(
        hits=[
            {"title": "A", "url": "https://a.example"},
            {"title": "B", "url": "https://b.example"},
            {"title": "C", "url": "https://c.example"},
        ]
    )
    cap = WebSearchCapability(WebSearchConfig(max_results=5), backend)

    res = await cap.call(CallRequest(arguments={"query": "x", "limit": limit}))

    assert res.is_error is True
    assert "invalid limit" in res.summary()
    assert backend.calls == []


@pytest.mark.asyncio
async def test_web_search_rejects_non_numeric_limit() -> None:
    backend = _FakeSearch()
    cap = WebSearchCapability(WebSearchConfig(), backend)

    res = await cap.call(CallRequest(arguments={"query": "x", "limit": "many"}))

    assert res.is_error is True
    assert backend.calls == []


@pytest.mark.asyncio
async def test_web_search_passes_configured_region_to_backend() -> None:
    backend = _FakeSearch()
    cap = WebSearchCapability(WebSearchConfig(region="zh-CN"), backend)

    await cap.call(CallRequest(arguments={"query": "python"}))

    assert backend.calls == [("python", 5)]
    assert backend.regions == ["zh-CN"]


@pytest.mark.asyncio
async def test_web_search_missing_query_is_error_result() -> None:
    backend = _FakeSearch()
    cap = WebSearchCapability(WebSearchConfig(), backend)

    res = await cap.call(CallRequest(arguments={}))

    assert res.is_error is True
    assert "missing query" in res.summary()
    assert backend.calls == []


@pytest.mark.asyncio
async def test_web_search_backend_failure_is_error_result() -> None:
    cap = WebSearchCapability(WebSearchConfig(), _FakeSearch(error=ConnectionError("offline")))

    res = await cap.call(CallRequest(arguments={"query": "python"}))

    assert res.is_error is True
    assert "offline" in res.summary()


@pytest.mark.asyncio
async def test_browser_accepts_serialized_arguments() -> None:
    backend = _FakeBrowser(reply={"TabID": 3})
    cap = BrowserCapability(backend)

    res = await cap.call(CallRequest(arguments='{"action": "go_to_url", "url": "https://a.example"}'))

    assert res.is_error is False
    assert json.loads(res.first_text()) == {"TabID": 3}
    assert backend.actions == [{"action": "go_to_url", "url": "https://a.example"}]


@pytest.mark.asyncio
async def test_browser_rejects_unparsable_arguments() -> None:
    backend = _FakeBrowser()
    cap = BrowserCapability(backend)

    res = await cap.call(CallRequest(arguments="not json"))

    assert res.is_error is True
    assert backend.actions == []


@pytest.mark.asyncio
async def test_browser_requires_action() -> None:
    cap = BrowserCapability(_FakeBrowser())

    res = await cap.call(CallRequest(arguments={"url": "https://a.example"}))

    assert res.is_error is True
    assert "missing action" in res.summary()


@pytest.mark.asyncio
async def test_browser_backend_failure_is_error_result() -> None:
    cap = BrowserCapability(_FakeBrowser(error=RuntimeError("crashed")))

    res = await cap.call(CallRequest(arguments={"action": "go_to_url", "url": "https://a.example"}))

    assert res.is_error is True
    assert "crashed" in res.summary()


@pytest.mark.asyncio
async def test_vector_search_accepts_bare_string_and_filters_by_score() -> None:
    store = _FakeVectorStore(
        [
            {"url": "https://tickets.example", "score": 0.9},
            {"url": "https://hotel.example", "score": 0.2},
        ]
    )
    cfg = VectorSearchConfig(address="localhost:19530", collection="features", top_k=4, score_threshold=0.5)
    cap = VectorSearchCapability(cfg, store)

    res = await cap.call(CallRequest(arguments="book a train ticket"))

    assert json.loads(res.first_text()) == [{"url": "https://tickets.example", "score": 0.9}]
    assert store.calls == [("book a train ticket", 4, "features")]


@pytest.mark.asyncio
async def test_vector_search_accepts_query_mapping() -> None:
    store = _FakeVectorStore([])
    cap = VectorSearchCapability(VectorSearchConfig(address="localhost:19530"), store)

    res = await cap.call(CallRequest(arguments={"query": "hotels"}))

    assert res.is_error is False
    assert store.calls == [("hotels", 5, "default")]


def test_vector_search_config_requires_address() -> None:
    with pytest.raises(ValueError):
        VectorSearchConfig()  # type: ignore[call-arg]


@pytest.mark.asyncio
async def test_recipes_build_from_dependency_bundle() -> None:
    deps = ToolDeps(web_search=_FakeSearch(), browser=_FakeBrowser(), vector_search=_FakeVectorStore([]))

    assert isinstance(build_web_search(WebSearchConfig(), deps), WebSearchCapability)
    assert isinstance(await build_browser(BrowserConfig(), deps), BrowserCapability)
    assert isinstance(await build_vector_search(VectorSearchConfig(address="x"), deps), VectorSearchCapability)


def test_recipe_fails_without_backend() -> None:
    with pytest.raises(RuntimeError, match="web_search backend not configured"):
        build_web_search(WebSearchConfig(), ToolDeps())


@pytest.mark.asyncio
async def test_browser_recipe_launches_backend_with_config() -> None:
    browser = _FakeBrowser()
    deps = ToolDeps(browser=browser)
    cfg = BrowserConfig(headless=False, disable_security=True, extra_chromium_args=["--no-sandbox"])

    await build_browser(cfg, deps)

    assert browser.launched == [
        {"headless": False, "disable_security": True, "extra_chromium_args": ["--no-sandbox"]}
    ]


@pytest.mark.asyncio
async def test_vector_search_recipe_connects_with_address_and_metric() -> None:
    store = _FakeVectorStore([])
    deps = ToolDeps(vector_search=store)

    cap = await build_vector_search(VectorSearchConfig(address="milvus:19530", metric_type="IP"), deps)
    await cap.call(CallRequest(arguments={"query": "hotels"}))

    assert store.connections == [("milvus:19530", "IP")]
    assert store.calls == [("hotels", 5, "default")]


def test_vector_search_config_rejects_unknown_metric() -> None:
    with pytest.raises(ValueError):
        VectorSearchConfig(address="milvus:19530", metric_type="COSINE")


@pytest.mark.asyncio
async def test_browser_recipe_fails_without_backend() -> None:
    with pytest.raises(RuntimeError, match="browser backend not configured"):
        await build_browser(BrowserConfig(), ToolDeps())
