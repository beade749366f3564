import json
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from toolmesh.agent_core.capabilities.base import ToolDeps
from toolmesh.agent_core.schemas.domain import ChatMessage
from toolmesh.server.core.config import Settings
from toolmesh.server.main import create_app


class FakeSearchBackend:
    def __init__(self) -> None:
        self.hits: List[Dict[str, Any]] = [
            {"title": "First", "url": "https://first.example", "snippet": "one"},
            {"title": "Second", "url": "https://second.example", "snippet": "two"},
        ]

    async def __call__(self, query: str, limit: int, region: Optional[str] = None) -> List[Dict[str, Any]]:
        return self.hits[:limit]


class FakeBrowserBackend:
    def __init__(self) -> None:
        self.actions: List[Dict[str, Any]] = []
        self.launch_options: Optional[Dict[str, Any]] = None

    async def launch(self, *, headless: bool, disable_security: bool, extra_chromium_args: List[str]) -> None:
        self.launch_options = {
            "headless": headless,
            "disable_security": disable_security,
            "extra_chromium_args": extra_chromium_args,
        }

    async def execute(self, action: Dict[str, Any]) -> Dict[str, Any]:
        self.actions.append(action)
        if action["action"] == "go_to_url":
            return {"TabID": 1, "url": action["url"]}
        return {"content": f"content for {action.get('goal')}"}


class FakeTextGenerator:
    """Replies with ``reply``; set it per test."""

    def __init__(self) -> None:
        self.reply: Optional[str] = '{"steps": []}'

    async def generate(self, messages: Sequence[ChatMessage]) -> Optional[str]:
        return self.reply


@pytest.fixture
def tools_config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"server_port": "8080", "tools": {"web_search": {"max_results": 5}, "browseruse": {}}}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def app_settings(tools_config_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        tools_config=str(tools_config_file),
        enabled_tools=["web_search", "browseruse"],
    )


@pytest.fixture
def text_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def browser_backend() -> FakeBrowserBackend:
    return FakeBrowserBackend()


@pytest.fixture
def tool_deps(browser_backend: FakeBrowserBackend) -> ToolDeps:
    return ToolDeps(web_search=FakeSearchBackend(), browser=browser_backend)


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    app_settings: Settings, text_generator: FakeTextGenerator, tool_deps: ToolDeps
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client against an app whose lifespan has run."""
    app = create_app(app_settings=app_settings, deps=tool_deps, text_generator=text_generator)
    async with app.router.lifespan_context(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client
