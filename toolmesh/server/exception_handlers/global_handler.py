"""
Global Exception Handlers for FastAPI Application.

This module provides the handlers that turn failures into JSON responses:

- ``tool_runtime_exception_handler``: capability runtime errors (plan
  generation, step failures, pipeline stages) with their structured context.
- ``global_exception_handler``: any other unhandled exception, logged with an
  error ID and full traceback.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from toolmesh.agent_core.errors import ToolRuntimeError
from toolmesh.core.logging_config import get_logger

logger = get_logger(__name__)


async def tool_runtime_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Report a capability runtime failure.

    The body carries the error message, the error class name and the error's
    structured context (step index, capability name, pipeline stage, ...).

    Args:
        request: The HTTP request that caused the exception
        exc: The ``ToolRuntimeError`` that was raised

    Returns:
        JSONResponse with status 500 and the error details
    """
    context = exc.context() if isinstance(exc, ToolRuntimeError) else {}
    logger.warning(
        f"Runtime failure in {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        extra={"error_type": type(exc).__name__, **{f"ctx_{k}": v for k, v in context.items()}},
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "error_type": type(exc).__name__,
            **context,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    This handler is called for any unhandled exception in the application.
    It logs the full error context and returns a JSON response with an error ID
    that clients can use to reference the error when reporting issues.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    # Generate unique error ID for tracking
    error_id = id(exc)

    # Log the error with full context
    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    This function should be called during application initialization to set up
    all custom exception handlers.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ToolRuntimeError, tool_runtime_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
