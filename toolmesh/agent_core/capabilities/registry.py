from __future__ import annotations

"""Capability registry.

The registry maps a capability name to its construction recipe and, once
constructed, to the live capability instance.

Lifecycle
---------

1. ``register_recipe`` records factories while the application is wired.
2. ``construct_all`` builds every capability exactly once from configuration.
   Construction is all-or-nothing: either every recipe succeeds and all
   instances are committed together, or nothing is committed.
3. From then on the registry is read-only. ``lookup`` and
   ``list_descriptors`` may be called concurrently from threads or tasks.
"""

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from ..errors import (
    CapabilityNotFoundError,
    ConstructionFailedError,
    MissingConfigurationError,
    RegistryFrozenError,
)
from ..schemas.domain import CapabilityDescriptor
from .base import Capability, ConstructionRecipe, ToolDeps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RecipeEntry:
    recipe: ConstructionRecipe
    config_model: Optional[Type[BaseModel]] = None

    def decode(self, blob: Any) -> Any:
        """Decode the opaque configuration blob into the recipe's typed config."""
        if self.config_model is None or isinstance(blob, self.config_model):
            return blob
        if blob is None:
            return self.config_model()
        return self.config_model.model_validate(blob)


class CapabilityRegistry:
    """
    Concurrency-safe mapping of capability names to recipes and instances.

    Notes:
        - ``register_recipe`` overwrites any existing recipe for the name.
        - ``lookup`` raises ``CapabilityNotFoundError`` if the capability is missing.
        - A single re-entrant lock guards both mappings; readers hold it only
          for a dictionary read, so lookups never wait on capability I/O.
    """

    def __init__(self) -> None:
        """Initialize an empty capability registry."""
        self._recipes: Dict[str, _RecipeEntry] = {}
        self._caps: Dict[str, Capability] = {}
        self._constructed = False
        self._constructing = False
        self._lock = threading.RLock()

    @property
    def constructed(self) -> bool:
        with self._lock:
            return self._constructed

    def register_recipe(
        self,
        name: str,
        recipe: ConstructionRecipe,
        *,
        config_model: Optional[Type[BaseModel]] = None,
    ) -> None:
        """
        Register a construction recipe.

        Args:
            name: Unique capability name; also the key looked up in configuration.
            recipe: ``(config, deps) -> Capability`` (may be a coroutine function).
            config_model: Optional pydantic model used to decode the raw config blob.

        Raises:
            RegistryFrozenError: If ``construct_all`` is running or has already completed.
        """
        with self._lock:
            if self._constructed or self._constructing:
                raise RegistryFrozenError(f"cannot register '{name}': registry already constructed")
            if name in self._recipes:
                logger.warning("Recipe for capability '%s' overwritten", name)
            self._recipes[name] = _RecipeEntry(recipe=recipe, config_model=config_model)

    def recipe_names(self) -> List[str]:
        with self._lock:
            return list(self._recipes)

    async def construct_all(self, config_by_name: Mapping[str, Any], deps: ToolDeps) -> None:
        """
        Construct every registered capability from its configuration entry.

        Args:
            config_by_name: Capability name -> opaque configuration blob.
            deps: Shared dependency bundle handed to every recipe.

        Raises:
            RegistryFrozenError: If construction already ran successfully or is still running.
            MissingConfigurationError: If a registered name has no configuration entry.
            ConstructionFailedError: If decoding the config or running the recipe fails.
        """
        with self._lock:
            if self._constructed:
                raise RegistryFrozenError("capabilities have already been constructed")
            if self._constructing:
                raise RegistryFrozenError("capability construction is already in progress")
            self._constructing = True
            entries = dict(self._recipes)

        try:
            staged = await self._stage(entries, config_by_name, deps)
            with self._lock:
                self._caps.update(staged)
                self._constructed = True
        finally:
            with self._lock:
                self._constructing = False
        logger.info("Constructed %d capabilities: %s", len(staged), sorted(staged))

    async def _stage(
        self, entries: Dict[str, _RecipeEntry], config_by_name: Mapping[str, Any], deps: ToolDeps
    ) -> Dict[str, Capability]:
        staged: Dict[str, Capability] = {}
        for name, entry in entries.items():
            if name not in config_by_name:
                raise MissingConfigurationError(name)
            try:
                config = entry.decode(config_by_name[name])
                built = entry.recipe(config, deps)
                if inspect.isawaitable(built):
                    built = await built
            except ValidationError as exc:
                raise ConstructionFailedError(name, exc) from exc
            except Exception as exc:
                logger.error("Constructing capability '%s' failed: %s", name, exc)
                raise ConstructionFailedError(name, exc) from exc
            if not isinstance(built, Capability):
                raise ConstructionFailedError(name, TypeError(f"recipe returned {type(built).__name__}"))
            staged[name] = built
            logger.debug("Constructed capability '%s'", name)

        unused = set(config_by_name) - set(entries)
        if unused:
            logger.debug("Ignoring configuration without a recipe: %s", sorted(unused))
        return staged

    def lookup(self, name: str) -> Capability:
        """
        Retrieve a constructed capability by name.

        Returns:
            The same capability instance on every call.

        Raises:
            CapabilityNotFoundError: If no capability is registered with the given name.
        """
        with self._lock:
            cap = self._caps.get(name)
        if cap is None:
            raise CapabilityNotFoundError(name)
        return cap

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._caps

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._caps)

    def list_descriptors(self) -> List[CapabilityDescriptor]:
        """Snapshot of every constructed capability's descriptor, ordered by name."""
        with self._lock:
            caps = [self._caps[name] for name in sorted(self._caps)]
        return [cap.descriptor() for cap in caps]
