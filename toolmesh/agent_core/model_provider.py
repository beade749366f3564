"""
Text-generation collaborator used by the planner.

The planner consumes a model only through the ``TextGenerator`` contract:
``generate(messages) -> text``. This module provides that contract, a
Pydantic AI backed implementation, and a factory for OpenAI-compatible chat
models (including self-hosted or third-party endpoints that speak the OpenAI
chat completions API).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, runtime_checkable

from pydantic_ai import Agent, ModelSettings
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from .schemas.domain import ChatMessage, ChatRole

if TYPE_CHECKING:
    from toolmesh.server.core.config import OpenAIConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class TextGenerator(Protocol):
    """Single-shot text generation over a list of chat messages."""

    async def generate(self, messages: Sequence[ChatMessage]) -> Optional[str]: ...


class PydanticAITextGenerator:
    """
    ``TextGenerator`` backed by a Pydantic AI ``Agent``.

    System messages become the agent's system prompt; the remaining messages
    form the user prompt. Each call builds a fresh agent, so one generator can
    serve concurrent requests.
    """

    def __init__(self, model: Any, *, model_settings: Optional[ModelSettings] = None) -> None:
        """
        Initialize the generator.

        Args:
            model: A Pydantic AI model instance or a model name understood by Pydantic AI.
            model_settings: Optional per-request settings (temperature, max tokens, ...).
        """
        self._model = model
        self._model_settings = model_settings

    async def generate(self, messages: Sequence[ChatMessage]) -> Optional[str]:
        system_prompt = "\n\n".join(m.content for m in messages if m.role == ChatRole.system)
        user_prompt = "\n\n".join(m.content for m in messages if m.role != ChatRole.system)

        agent: Agent = Agent(self._model, output_type=str, system_prompt=system_prompt)
        result = await agent.run(user_prompt, model_settings=self._model_settings)
        logger.debug("Text generation finished: %d characters", len(result.output or ""))
        return result.output


def create_chat_model(config: "OpenAIConfig") -> OpenAIChatModel:
    """
    Create an OpenAI-compatible chat model from configuration.

    Raises:
        RuntimeError: If no API key is configured.
    """
    api_key = config.api_key.get_secret_value() if config.api_key else None
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")

    provider = OpenAIProvider(base_url=config.base_url, api_key=api_key)
    settings = ModelSettings(temperature=config.temperature, max_tokens=config.max_tokens)
    logger.debug("Creating chat model %s (base_url=%s)", config.model, config.base_url or "default")
    return OpenAIChatModel(config.model, provider=provider, settings=settings)


def create_text_generator(config: "OpenAIConfig") -> PydanticAITextGenerator:
    """Build the default ``TextGenerator`` for the configured chat model."""
    return PydanticAITextGenerator(create_chat_model(config))
