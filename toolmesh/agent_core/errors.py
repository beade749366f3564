"""Error types for the capability runtime.

Defines a small hierarchy of exceptions raised by the registry, the planner,
the plan executor and the chained pipeline. Every error carries enough
context (capability name, step index, pipeline stage, raw model reply) to
diagnose a failure without re-running the request.
"""

from __future__ import annotations

from typing import Optional


class ToolRuntimeError(Exception):
    """Base error for all capability runtime exceptions."""

    def context(self) -> dict:
        """Structured fields surfaced to the transport layer alongside the message."""
        return {}


class CapabilityNotFoundError(ToolRuntimeError):
    """Raised when a lookup names a capability that was never constructed."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"capability not found: '{name}'")

    def context(self) -> dict:
        return {"tool_name": self.name}


class RegistryFrozenError(ToolRuntimeError):
    """Raised when the registry is mutated after construction has completed."""


class MissingConfigurationError(ToolRuntimeError):
    """Raised when a registered recipe has no configuration entry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"missing configuration for capability: '{name}'")

    def context(self) -> dict:
        return {"tool_name": self.name}


class ConstructionFailedError(ToolRuntimeError):
    """Raised when a recipe fails to build its capability."""

    def __init__(self, name: str, cause: BaseException) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"failed to construct capability '{name}': {cause}")

    def context(self) -> dict:
        return {"tool_name": self.name}


class InvalidArgumentsError(ToolRuntimeError):
    """Raised when serialized call arguments cannot be decoded into a mapping."""


class UnsupportedContentError(ToolRuntimeError):
    """Raised when a call result carries no text content block."""


class PlanGenerationError(ToolRuntimeError):
    """Raised when the text-generation collaborator fails while producing a plan."""


class EmptyModelResponseError(PlanGenerationError):
    """Raised when the text-generation collaborator returns an empty reply."""

    def __init__(self) -> None:
        super().__init__("model returned an empty response")


class InvalidPlanFormatError(PlanGenerationError):
    """Raised when the model reply cannot be parsed into a tool call plan."""

    def __init__(self, raw_reply: str, reason: str) -> None:
        self.raw_reply = raw_reply
        self.reason = reason
        super().__init__(f"failed to parse tool call plan: {reason}\nmodel output: {raw_reply}")

    def context(self) -> dict:
        return {"raw_reply": self.raw_reply}


class StepFailedError(ToolRuntimeError):
    """Raised when a plan step fails; later steps are never executed."""

    def __init__(self, index: int, tool_name: str, cause: BaseException | str) -> None:
        self.index = index
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"step {index}: capability '{tool_name}' failed: {cause}")

    def context(self) -> dict:
        return {"step_index": self.index, "tool_name": self.tool_name}


class PipelineStageError(ToolRuntimeError):
    """Raised when a stage of the chained pipeline fails."""

    def __init__(self, stage: str, cause: Optional[BaseException | str] = None, message: Optional[str] = None) -> None:
        self.stage = stage
        self.cause = cause
        detail = message or str(cause)
        super().__init__(f"pipeline stage '{stage}' failed: {detail}")

    def context(self) -> dict:
        return {"stage": self.stage}


class EmptySearchResultError(PipelineStageError):
    """Raised when the search stage yields no results."""

    def __init__(self) -> None:
        super().__init__("search", message="search returned no results")


class NavigationFailedError(PipelineStageError):
    """Raised when the browser cannot navigate or returns no tab identifier."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__("navigate", message=f"navigation to {url} failed: {reason}")

    def context(self) -> dict:
        return {"stage": self.stage, "url": self.url}
