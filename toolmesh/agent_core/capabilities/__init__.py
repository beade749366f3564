"""Capability interface, registry and built-in capability adapters.

 A *capability* is the execution unit behind a plan step.

 - The planner emits ``ToolCallStep`` items naming a capability.
 - The executor resolves that name through ``CapabilityRegistry.lookup``.
 - The capability runs with a ``CallRequest`` and answers with a ``CallResult``.

 Capabilities are built once at startup by construction recipes that receive
 their own configuration blob and the shared ``ToolDeps`` bundle.

 This package exports:

 - ``Capability``: protocol for async capability execution.
 - ``CapabilityRegistry``: name -> recipe -> live instance.
 - ``ToolDeps``: the dependency bundle handed to every recipe.
 """

from .base import Capability, ConstructionRecipe, ToolDeps
from .registry import CapabilityRegistry

__all__ = [
    "Capability",
    "CapabilityRegistry",
    "ConstructionRecipe",
    "ToolDeps",
]
