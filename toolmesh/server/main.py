"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS),
registers exception handlers and includes all API routers. It serves as the
root of the web server.

Capabilities are constructed once in the application lifespan. A construction
failure aborts startup, so the server never serves traffic with a partial
registry.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolmesh.agent_core.capabilities.base import ToolDeps
from toolmesh.agent_core.model_provider import TextGenerator
from toolmesh.core.logging_config import get_logger, setup_logging

from .api.v1 import chain, health, messages, tools
from .core import constant
from .core.config import Settings, settings as default_settings
from .exception_handlers import setup_exception_handlers
from .services.runtime import build_runtime, close_tool_deps, default_tool_deps

logger = get_logger(__name__)


def create_app(
    *,
    app_settings: Optional[Settings] = None,
    deps: Optional[ToolDeps] = None,
    text_generator: Optional[TextGenerator] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use; the module-level settings when omitted.
        deps: Backends handed to every capability recipe.
        text_generator: Planner model; built from the OpenAI settings when omitted.
    """
    cfg = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifespan events.

        Builds the capability runtime on startup and stores it on ``app.state``.
        Backends created here (not injected through ``deps``) are closed on shutdown.
        """
        logger.info("Starting up toolmesh server...")
        owns_deps = deps is None
        tool_deps = default_tool_deps(cfg) if owns_deps else deps
        try:
            app.state.runtime = await build_runtime(cfg, deps=tool_deps, text_generator=text_generator)
        except Exception as e:
            logger.error(f"Capability runtime initialization failed: {e}", exc_info=True)
            if owns_deps:
                await close_tool_deps(tool_deps)
            raise

        yield

        logger.info("Shutting down toolmesh server...")
        app.state.runtime = None
        if owns_deps:
            await close_tool_deps(tool_deps)

    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
        toolmesh Server API

        Answers queries by planning and executing calls against pluggable capabilities,
        and runs the fixed search -> navigate -> extract chain.
        """,
        version=constant.VERSION,
        openapi_url=f"{constant.API_V1_STR}/openapi.json",
        docs_url=f"{constant.API_V1_STR}/docs",
        redoc_url=f"{constant.API_V1_STR}/redoc",
        lifespan=lifespan,
    )
    app.state.runtime = None

    cors = cfg.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )

    setup_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(messages.router, tags=["messages"])
    app.include_router(chain.router, prefix=f"{constant.API_V1_STR}/chain", tags=["chain"])
    app.include_router(tools.router, prefix=f"{constant.API_V1_STR}/tools", tags=["tools"])
    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    import uvicorn

    setup_logging(log_level=default_settings.log_level)
    uvicorn.run(app, host=default_settings.server_host, port=default_settings.server_port)


if __name__ == "__main__":
    run()
