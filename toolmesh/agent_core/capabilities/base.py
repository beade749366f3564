from __future__ import annotations

"""Capability protocol, dependency bundle and construction recipes.

A capability is the concrete execution unit behind a plan step.

The plan executor and the chained pipeline resolve a capability name through
a ``CapabilityRegistry`` and invoke ``Capability.call`` with a
``CallRequest``. They never assume a concrete capability type.

Capabilities should:

- describe themselves through an immutable ``CapabilityDescriptor``,
- report domain failures as ``CallResult(is_error=True)`` rather than raising,
- raise only for structural failures (broken transport, cancelled calls).
"""

from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from ..schemas.domain import CallRequest, CallResult, CapabilityDescriptor


@runtime_checkable
class Capability(Protocol):
    """Protocol for capability implementations."""

    def descriptor(self) -> CapabilityDescriptor: ...

    async def call(self, request: CallRequest) -> CallResult: ...


class BrowserBackend(Protocol):
    """Browser automation backend used by the ``browseruse`` capability.

    ``launch`` runs once, when the capability is constructed.
    """

    async def launch(self, *, headless: bool, disable_security: bool, extra_chromium_args: List[str]) -> None: ...

    async def execute(self, action: Dict[str, Any]) -> Mapping[str, Any]: ...


class VectorSearchBackend(Protocol):
    """Vector store used by the ``vector_search`` capability.

    ``connect`` runs once, when the capability is constructed.
    """

    async def connect(self, *, address: str, metric_type: str) -> None: ...

    async def search(self, query: str, top_k: int, collection: str) -> List[Dict[str, Any]]: ...


SearchBackend = Callable[[str, int, Optional[str]], Awaitable[List[Dict[str, Any]]]]


@dataclass(frozen=True)
class ToolDeps:
    """Shared, read-only handles handed to every construction recipe.

    The bundle is created once by application wiring code before any
    capability is constructed and is never mutated afterwards.

    Attributes
    ----------
    text_generator:
        Shared text-generation collaborator (see ``model_provider``).
    web_search:
        ``async (query, limit, region) -> [{"title", "url", "snippet"}]``.
    browser:
        Browser automation backend.
    vector_search:
        Vector store connected by the ``vector_search`` recipe.
    """

    text_generator: Any | None = None
    web_search: Optional[SearchBackend] = None
    browser: Optional[BrowserBackend] = None
    vector_search: Optional[VectorSearchBackend] = None


RecipeResult = Union[Capability, Awaitable[Capability]]
ConstructionRecipe = Callable[[Any, ToolDeps], RecipeResult]
