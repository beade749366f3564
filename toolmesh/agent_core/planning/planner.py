from __future__ import annotations

"""Plan generation for user queries.

This module defines the planner used by ``Coordinator``.

Responsibilities
----------------

- Describe every capability in the registry to the model (name, description,
  flattened parameter list).
- Ask the model, in a single blocking call, for a JSON tool call plan.
- Parse the reply into a ``ToolCallPlan``.

The planner is intentionally constrained:

- It does not execute tools or capabilities.
- It does not stream, and it does not retry. A malformed reply is a terminal
  failure of the request.
"""

import logging
from typing import Iterable, List

from ..capabilities.registry import CapabilityRegistry
from ..errors import EmptyModelResponseError, PlanGenerationError
from ..model_provider import TextGenerator
from ..schemas.domain import CapabilityDescriptor, ChatMessage, ChatRole, ToolCallPlan
from .steps import parse_plan

logger = logging.getLogger(__name__)

PLAN_FORMAT_HINT = (
    '{"steps": [{"tool_name": "<tool name>", "params": {"<param>": "<value>"}, '
    '"reason": "<why this call is needed>"}]}'
)


def describe_capabilities(descriptors: Iterable[CapabilityDescriptor]) -> str:
    """Render descriptors as the tool catalogue shown to the model."""
    blocks: List[str] = []
    for descriptor in descriptors:
        params = [
            f"{name} ({spec.type}): {spec.description}" if spec.description else f"{name} ({spec.type})"
            for name, spec in sorted(descriptor.parameters.items())
        ]
        params_text = "\n    ".join(params) if params else "(no parameters)"
        blocks.append(
            f"- Tool: {descriptor.name}\n"
            f"  Description: {descriptor.description}\n"
            f"  Parameters:\n"
            f"    {params_text}"
        )
    return "\n\n".join(blocks)


class PlanGenerator:
    """Planner that turns a query into a ``ToolCallPlan`` using a text generator."""

    def __init__(self, *, registry: CapabilityRegistry, text_generator: TextGenerator) -> None:
        """
        Initialize the planner.

        Args:
            registry: Source of the capability descriptors offered to the model.
            text_generator: Collaborator answering ``generate(messages) -> text``.
        """
        self._registry = registry
        self._text_generator = text_generator

    def build_messages(self, query: str) -> List[ChatMessage]:
        catalogue = describe_capabilities(self._registry.list_descriptors())
        system = (
            "You can use the following tools to answer the user's question:\n"
            f"{catalogue}\n"
            "Generate a tool call plan (JSON) for the user's question."
        )
        user = (
            f"User query: {query}\n"
            "Generate a tool call plan in JSON describing which tools to call, their parameters and why.\n"
            f"Respond with JSON only, in exactly this format: {PLAN_FORMAT_HINT}"
        )
        return [ChatMessage(role=ChatRole.system, content=system), ChatMessage(role=ChatRole.user, content=user)]

    async def plan(self, query: str) -> ToolCallPlan:
        """Generate a plan for a query.

        Raises
        ------
        PlanGenerationError
            The text generator failed.
        EmptyModelResponseError
            The text generator returned nothing.
        InvalidPlanFormatError
            The reply is not a valid plan document.
        """
        messages = self.build_messages(query)
        try:
            reply = await self._text_generator.generate(messages)
        except PlanGenerationError:
            raise
        except Exception as exc:
            logger.error("Plan generation call failed: %s", exc)
            raise PlanGenerationError(f"model call failed: {exc}") from exc

        if reply is None or not reply.strip():
            raise EmptyModelResponseError()

        plan = parse_plan(reply)
        logger.debug("Generated plan with %d steps: %s", len(plan.steps), [s.tool_name for s in plan.steps])
        return plan
