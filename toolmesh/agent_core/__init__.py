"""Capability runtime: registry, planning and execution.

This package contains the "engine room" of toolmesh.

Design overview
---------------

- Capabilities are pluggable tools behind one calling contract
  (``descriptor()`` and ``async call(CallRequest) -> CallResult``). They are
  built once at startup by ``CapabilityRegistry.construct_all`` from
  registered recipes, configuration blobs and a shared ``ToolDeps`` bundle.
- ``PlanGenerator`` asks a language model for a JSON ``ToolCallPlan``.
- ``PlanExecutor`` runs the plan step by step; the last step's text is the
  answer and the first failure aborts the run.
- ``ChainedPipeline`` answers a query with a fixed search -> navigate ->
  extract chain, without a planner.

Typical usage
-------------

Most applications should use ``agent_core.service.Coordinator`` (see
``agent_core.factory.build_coordinator``) to orchestrate the full run:

1. Build the registry and call ``construct_all``.
2. Generate a plan for the query.
3. Execute it and return the final text.
"""

from .capabilities import Capability, CapabilityRegistry, ToolDeps
from .factory import build_coordinator, build_default_registry, build_pipeline
from .model_provider import PydanticAITextGenerator, TextGenerator
from .service import Coordinator
from .toolchain import ChainedPipeline

__all__ = [
    "Capability",
    "CapabilityRegistry",
    "ToolDeps",
    "Coordinator",
    "ChainedPipeline",
    "TextGenerator",
    "PydanticAITextGenerator",
    "build_default_registry",
    "build_coordinator",
    "build_pipeline",
]
