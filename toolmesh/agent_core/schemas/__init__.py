"""Schemas and DTOs for the capability runtime."""

from .domain import (
    CallRequest,
    CallResult,
    CapabilityDescriptor,
    ChatMessage,
    ContentBlock,
    ImageContent,
    ParameterSpec,
    TextContent,
    ToolCallPlan,
    ToolCallStep,
)

__all__ = [
    "CallRequest",
    "CallResult",
    "CapabilityDescriptor",
    "ChatMessage",
    "ContentBlock",
    "ImageContent",
    "ParameterSpec",
    "TextContent",
    "ToolCallPlan",
    "ToolCallStep",
]
