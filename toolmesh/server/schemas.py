"""
API Schemas.

This module contains Pydantic models used for API request bodies and response validation.
These schemas define the interface contract between the client and the server.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from toolmesh.agent_core.schemas.domain import CapabilityDescriptor


class QueryRequest(BaseModel):
    """
    Schema for a planned query.

    The query is answered by generating a tool call plan and executing it.
    """

    query: str = Field(
        ...,
        min_length=1,
        description="The natural-language question to answer.",
        examples=["What is the weather in Taipei today?"],
    )

    model_config = ConfigDict(json_schema_extra={"example": {"query": "Find the latest Python release notes"}})


class QueryResponse(BaseModel):
    """
    Schema for a query answer.

    ``result`` is the text of the last executed step, or ``null`` when the
    generated plan had no steps.
    """

    result: Optional[str] = Field(default=None, description="Final answer text.")


class ChainRequest(BaseModel):
    """Schema for the search -> navigate -> extract chain."""

    query: str = Field(..., min_length=1, description="Search keywords.", examples=["python 3.13 release notes"])
    goal: str = Field(
        ...,
        min_length=1,
        description="What to extract from the first search hit.",
        examples=["Summarize the new features"],
    )


class ToolListResponse(BaseModel):
    """Descriptors of every constructed capability, sorted by name."""

    tools: List[CapabilityDescriptor] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Body returned for runtime failures.

    The error's structured context (``step_index``, ``tool_name``, ``stage``,
    ``raw_reply``, ...) is merged into the body next to these fields.
    """

    detail: str
    error_type: str

    model_config = ConfigDict(extra="allow")
