"""
Runtime Dependencies.

Expose the startup-built ``ToolRuntime`` pieces to API endpoints.
"""

from typing import Annotated

from fastapi import Depends, Request

from toolmesh.agent_core.capabilities.registry import CapabilityRegistry
from toolmesh.agent_core.service import Coordinator
from toolmesh.agent_core.toolchain.pipeline import ChainedPipeline
from toolmesh.server.services.runtime import ToolRuntime


def get_runtime(request: Request) -> ToolRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise RuntimeError("toolmesh runtime is not initialized; the application lifespan has not run")
    return runtime


def get_registry(runtime: Annotated[ToolRuntime, Depends(get_runtime)]) -> CapabilityRegistry:
    return runtime.registry


def get_coordinator(runtime: Annotated[ToolRuntime, Depends(get_runtime)]) -> Coordinator:
    return runtime.coordinator


def get_pipeline(runtime: Annotated[ToolRuntime, Depends(get_runtime)]) -> ChainedPipeline:
    return runtime.pipeline


RegistryDep = Annotated[CapabilityRegistry, Depends(get_registry)]
CoordinatorDep = Annotated[Coordinator, Depends(get_coordinator)]
PipelineDep = Annotated[ChainedPipeline, Depends(get_pipeline)]
