"""Model Context Protocol bridge.

Publishes the constructed capabilities of a ``CapabilityRegistry`` as MCP
tools so any MCP client can list and call them:

- ``tools/list`` returns one tool per capability; the descriptor's parameters
  become a JSON Schema object.
- ``tools/call`` resolves the capability by name and forwards the arguments
  unchanged. A result flagged ``is_error`` is raised so the MCP server reports
  it as an error result.

Typical usage::

    registry = build_default_registry(["web_search"])
    await registry.construct_all(config, deps)
    await serve_stdio(registry)

The ``toolmesh-mcp`` console script builds the runtime from the application
settings, exactly as the HTTP server does, and serves it over stdio.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from toolmesh.agent_core.capabilities.base import ToolDeps
from toolmesh.agent_core.capabilities.registry import CapabilityRegistry
from toolmesh.agent_core.errors import ToolRuntimeError
from toolmesh.agent_core.model_provider import TextGenerator
from toolmesh.agent_core.schemas.domain import CallRequest, CallResult, CapabilityDescriptor, TextContent
from toolmesh.core.logging_config import setup_logging
from toolmesh.server.core.config import Settings, settings as default_settings
from toolmesh.server.services.runtime import build_runtime, close_tool_deps, default_tool_deps

logger = logging.getLogger(__name__)

McpContent = Union[types.TextContent, types.ImageContent]


class ToolCallError(ToolRuntimeError):
    """Raised when a capability reports an error result to an MCP client."""

    def __init__(self, tool_name: str, message: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"{tool_name}: {message}")

    def context(self) -> dict:
        return {"tool_name": self.tool_name}


def descriptor_to_input_schema(descriptor: CapabilityDescriptor) -> Dict[str, Any]:
    """Render a descriptor's parameters as a JSON Schema object."""
    properties: Dict[str, Any] = {}
    for name, spec in descriptor.parameters.items():
        prop: Dict[str, Any] = {"type": spec.type}
        if spec.description:
            prop["description"] = spec.description
        properties[name] = prop
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    required = descriptor.required_parameters()
    if required:
        schema["required"] = required
    return schema


def list_mcp_tools(registry: CapabilityRegistry) -> List[types.Tool]:
    return [
        types.Tool(name=d.name, description=d.description, inputSchema=descriptor_to_input_schema(d))
        for d in registry.list_descriptors()
    ]


def to_mcp_content(result: CallResult) -> List[McpContent]:
    blocks: List[McpContent] = []
    for block in result.content:
        if isinstance(block, TextContent):
            blocks.append(types.TextContent(type="text", text=block.text))
        else:
            blocks.append(types.ImageContent(type="image", data=block.data, mimeType=block.mime_type))
    return blocks


async def call_mcp_tool(
    registry: CapabilityRegistry, name: str, arguments: Optional[Dict[str, Any]]
) -> List[McpContent]:
    """
    Call a capability on behalf of an MCP client.

    Raises:
        CapabilityNotFoundError: No capability has that name.
        ToolCallError: The capability returned an error result.
    """
    cap = registry.lookup(name)
    result = await cap.call(CallRequest(arguments=dict(arguments or {})))
    if result.is_error:
        raise ToolCallError(name, result.summary() or "capability reported an error")
    logger.debug("MCP call to '%s' returned %d content blocks", name, len(result.content))
    return to_mcp_content(result)


def build_mcp_server(registry: CapabilityRegistry, *, name: str = "toolmesh") -> Server:
    """Create a low-level MCP server whose tools are the registry's capabilities."""
    server: Server = Server(name)

    @server.list_tools()
    async def _list_tools() -> List[types.Tool]:
        return list_mcp_tools(registry)

    @server.call_tool()
    async def _call_tool(tool_name: str, arguments: Dict[str, Any]) -> List[McpContent]:
        return await call_mcp_tool(registry, tool_name, arguments)

    logger.info("MCP server '%s' exposes %d capabilities", name, len(registry.names()))
    return server


async def serve_stdio(registry: CapabilityRegistry, *, name: str = "toolmesh") -> None:
    """Run the MCP bridge over stdin/stdout until the client disconnects."""
    server = build_mcp_server(registry, name=name)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def serve_runtime(
    settings: Settings,
    *,
    deps: Optional[ToolDeps] = None,
    text_generator: Optional[TextGenerator] = None,
) -> None:
    """
    Construct the enabled capabilities and serve them over stdio.

    Backends created from ``settings`` (not injected through ``deps``) are
    closed when the client disconnects.
    """
    owns_deps = deps is None
    tool_deps = default_tool_deps(settings) if owns_deps else deps
    try:
        runtime = await build_runtime(settings, deps=tool_deps, text_generator=text_generator)
        await serve_stdio(runtime.registry)
    finally:
        if owns_deps:
            await close_tool_deps(tool_deps)


def run() -> None:
    """Console entry point for ``toolmesh-mcp``."""
    setup_logging(log_level=default_settings.log_level)
    asyncio.run(serve_runtime(default_settings))
