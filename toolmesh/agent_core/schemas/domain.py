from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field

from ..errors import InvalidArgumentsError, UnsupportedContentError
from .base import BaseSchema, FrozenSchema


class ParameterSpec(FrozenSchema):
    """Schema entry for a single capability parameter."""

    type: str = "string"
    description: Optional[str] = None
    required: bool = False


class CapabilityDescriptor(FrozenSchema):
    """Static metadata describing one capability.

    ``description`` is copied verbatim into planning prompts, so it should be
    written for the model rather than for developers.
    """

    name: str
    description: str
    parameters: Dict[str, ParameterSpec] = Field(default_factory=dict)

    def required_parameters(self) -> List[str]:
        return sorted(name for name, spec in self.parameters.items() if spec.required)


class TextContent(BaseSchema):
    type: Literal["text"] = "text"
    text: str


class ImageContent(BaseSchema):
    type: Literal["image"] = "image"
    data: str
    mime_type: str


ContentBlock = Annotated[Union[TextContent, ImageContent], Field(discriminator="type")]


class CallRequest(BaseSchema):
    """Arguments for one capability call.

    The arguments are either a mapping or its serialized JSON form. Their
    shape is capability-specific and validated only by the target capability.
    """

    arguments: Union[Dict[str, Any], str] = Field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        """Return the arguments as a mapping, decoding the serialized form if needed.

        Raises:
            InvalidArgumentsError: If the string form is not a JSON object.
        """
        if isinstance(self.arguments, dict):
            return dict(self.arguments)
        try:
            decoded = json.loads(self.arguments)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentsError(f"arguments are not valid JSON: {exc}") from exc
        if not isinstance(decoded, dict):
            raise InvalidArgumentsError(f"arguments must be a JSON object, got {type(decoded).__name__}")
        return decoded


class CallResult(BaseSchema):
    """Outcome of one capability call.

    ``is_error=True`` marks a reported, recoverable failure produced by the
    capability itself. Structural failures are raised as exceptions instead.
    """

    content: List[ContentBlock] = Field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "CallResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> "CallResult":
        return cls(content=[TextContent(text=message)], is_error=True)

    def first_text(self) -> str:
        """Return the text of the first text block.

        Raises:
            UnsupportedContentError: If the result holds no text block.
        """
        for block in self.content:
            if isinstance(block, TextContent):
                return block.text
        kinds = [block.type for block in self.content] or ["<empty>"]
        raise UnsupportedContentError(f"result has no text content (got: {', '.join(kinds)})")

    def summary(self) -> str:
        """Best-effort text rendering used in error messages."""
        return " ".join(block.text for block in self.content if isinstance(block, TextContent))


class ToolCallStep(BaseSchema):
    # model replies often carry extra keys; they are not part of the contract
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tool_name: str
    params: Dict[str, Any] = Field(default_factory=dict)
    reason: str = ""


class ToolCallPlan(BaseSchema):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    steps: List[ToolCallStep] = Field(default_factory=list)


class ChatRole(str, Enum):
    system = "system"
    user = "user"
    assistant = "assistant"


class ChatMessage(BaseSchema):
    role: ChatRole
    content: str
