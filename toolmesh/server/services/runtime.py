"""
Runtime Service.

Holds the objects built once at startup (the constructed capability registry,
the coordinator and the chained pipeline) and shares them with the API layer.
"""

from dataclasses import dataclass, replace

from toolmesh.agent_core.capabilities.backends import HttpSearchBackend
from toolmesh.agent_core.capabilities.base import ToolDeps
from toolmesh.agent_core.capabilities.registry import CapabilityRegistry
from toolmesh.agent_core.factory import build_coordinator, build_default_registry, build_pipeline
from toolmesh.agent_core.model_provider import TextGenerator, create_text_generator
from toolmesh.agent_core.service import Coordinator
from toolmesh.agent_core.toolchain.pipeline import ChainedPipeline
from toolmesh.core.logging_config import get_logger
from toolmesh.server.core.config import Settings, load_tools_config

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolRuntime:
    """Startup-built collaborators shared by every request."""

    registry: CapabilityRegistry
    coordinator: Coordinator
    pipeline: ChainedPipeline


def default_tool_deps(settings: Settings) -> ToolDeps:
    """Backends available without caller injection: web search when an endpoint is configured."""
    web_search = HttpSearchBackend(settings.search_endpoint) if settings.search_endpoint else None
    return ToolDeps(web_search=web_search)


async def close_tool_deps(deps: ToolDeps) -> None:
    """Release backends that hold connections (anything exposing ``aclose``)."""
    for backend in (deps.web_search, deps.browser, deps.vector_search):
        aclose = getattr(backend, "aclose", None)
        if aclose is not None:
            await aclose()
            logger.debug(f"Closed backend {type(backend).__name__}")


async def build_runtime(
    settings: Settings,
    *,
    deps: ToolDeps,
    text_generator: TextGenerator | None = None,
    registry: CapabilityRegistry | None = None,
) -> ToolRuntime:
    """
    Construct every enabled capability and wire the query services.

    Args:
        settings: Application settings (enabled tools, config path, LLM settings).
        deps: Backends shared by the capability recipes.
        text_generator: Planner model; taken from ``deps`` or built from ``settings.openai`` when omitted.
        registry: Pre-populated registry; the built-in one is used when omitted.

    Raises:
        ToolRuntimeError: If any capability fails to construct.
        RuntimeError: If no text generator is given and no API key is configured.
    """
    generator = text_generator or deps.text_generator or create_text_generator(settings.openai)
    deps = replace(deps, text_generator=generator)

    registry = registry if registry is not None else build_default_registry(settings.enabled_tools)
    tools_config = load_tools_config(settings.tools_config)
    await registry.construct_all(tools_config.tools, deps)

    logger.info(f"Runtime ready with capabilities: {registry.names()}")
    return ToolRuntime(
        registry=registry,
        coordinator=build_coordinator(registry=registry, text_generator=generator),
        pipeline=build_pipeline(registry=registry, search_limit=settings.search_limit),
    )
