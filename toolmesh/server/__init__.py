"""
toolmesh Server Package.

This package contains the transports that expose the capability runtime.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Settings, constants and the tool configuration loader.
    exception_handlers: JSON error responses for runtime failures.
    services: Startup-built runtime and its request dependencies.

Modules:
    mcp_bridge: Model Context Protocol server publishing the capabilities.
"""
