from __future__ import annotations

"""Convenience factories for wiring the agent core.

This module contains small helpers to build the default capability registry,
the ``Coordinator`` (planner + executor) and the ``ChainedPipeline``.

The intent is to keep application wiring and tests concise, while still
allowing advanced deployments to register their own recipes and provide their
own text generator.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple, Type

from pydantic import BaseModel

from .capabilities.base import ConstructionRecipe
from .capabilities.builtin import (
    BrowserConfig,
    VectorSearchConfig,
    WebSearchConfig,
    build_browser,
    build_vector_search,
    build_web_search,
)
from .capabilities.registry import CapabilityRegistry
from .errors import CapabilityNotFoundError
from .model_provider import TextGenerator
from .planning.planner import PlanGenerator
from .runtime import PlanExecutor
from .service import Coordinator, CoordinatorDeps
from .toolchain.pipeline import DEFAULT_SEARCH_LIMIT, ChainedPipeline

logger = logging.getLogger(__name__)

BUILTIN_RECIPES: Dict[str, Tuple[ConstructionRecipe, Type[BaseModel]]] = {
    "web_search": (build_web_search, WebSearchConfig),
    "browseruse": (build_browser, BrowserConfig),
    "vector_search": (build_vector_search, VectorSearchConfig),
}


def build_default_registry(enabled: Optional[Iterable[str]] = None) -> CapabilityRegistry:
    """Build a ``CapabilityRegistry`` with the built-in recipes registered.

    Args:
        enabled: Names of the built-in capabilities to register. ``None``
            registers all of them.

    Raises:
        CapabilityNotFoundError: If ``enabled`` names an unknown capability.
    """
    names = list(BUILTIN_RECIPES) if enabled is None else list(enabled)
    reg = CapabilityRegistry()
    for name in names:
        if name not in BUILTIN_RECIPES:
            raise CapabilityNotFoundError(name)
        recipe, config_model = BUILTIN_RECIPES[name]
        reg.register_recipe(name, recipe, config_model=config_model)
    logger.debug("Default registry prepared with recipes: %s", names)
    return reg


def build_coordinator(*, registry: CapabilityRegistry, text_generator: TextGenerator) -> Coordinator:
    """Construct a ``Coordinator`` from a registry and a text generator."""
    planner = PlanGenerator(registry=registry, text_generator=text_generator)
    executor = PlanExecutor(registry=registry)
    return Coordinator(deps=CoordinatorDeps(planner=planner, executor=executor))


def build_pipeline(*, registry: CapabilityRegistry, search_limit: int = DEFAULT_SEARCH_LIMIT) -> ChainedPipeline:
    """Construct the default search -> navigate -> extract pipeline."""
    return ChainedPipeline(registry=registry, search_limit=search_limit)
