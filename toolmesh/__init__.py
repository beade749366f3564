"""toolmesh.

This package contains a small capability runtime: a language-model planner
picks tools from a registry, and an executor runs the resulting plan against
them through one uniform calling contract.

High-level architecture
-----------------------

The codebase is organized around two execution shapes:

- **Planned execution**: a text-generation model turns a free-text query into
  an ordered ``ToolCallPlan``; ``PlanExecutor`` runs the plan step by step and
  returns the text of the last step.
- **Chained execution**: ``ChainedPipeline`` threads the output of a web search
  into a browser navigation and then a content extraction. The call sequence is
  fixed and never generated.

Core subpackages
----------------

- ``toolmesh.agent_core``:

  - Capability interface, construction recipes and the ``CapabilityRegistry``.
  - Plan generation and plan parsing.
  - The plan executor and the chained pipeline.

- ``toolmesh.server``:

  - FastAPI transport exposing ``{query} -> {result}``.
  - An MCP bridge publishing the registered capabilities.

Typical workflow
----------------

1. Register construction recipes on a ``CapabilityRegistry``.
2. Construct every capability once from configuration (all or nothing).
3. Hand the registry to a ``Coordinator`` or a ``ChainedPipeline``.
4. Serve queries concurrently; the registry is read-only from then on.
"""
