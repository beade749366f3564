"""
Health Check Endpoints.

This module provides basic system status endpoints (health, version)
used for monitoring and deployment verification.
"""

from fastapi import APIRouter, Request

from toolmesh.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check(request: Request):
    """
    Health check endpoint.

    Reports whether the capability runtime has been constructed and how many
    capabilities it holds.
    """
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        return {"status": "starting", "capabilities": 0}
    return {"status": "ok", "capabilities": len(runtime.registry.names())}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API and supported schema version.
    """
    return {"version": constant.VERSION, "schema_version": "v1"}
