from __future__ import annotations

"""Plan executor.

``PlanExecutor`` runs a ``ToolCallPlan`` against a ``CapabilityRegistry``.

Execution model
--------------

- Steps run strictly in plan order, one at a time.
- Each step resolves its capability by name, builds a ``CallRequest`` from the
  step's parameters and awaits ``Capability.call``.
- The first failure aborts the run with ``StepFailedError``: an unknown
  capability, a raised exception, a result flagged ``is_error``, or a result
  without a text block. Later steps never run and no partial answer is built.
- The answer is the text of the last executed step. Earlier outputs are
  discarded once superseded.

Cancellation
------------

The executor imposes no timeout. A caller-side cancellation (``Task.cancel``
or an ``asyncio.timeout`` deadline) interrupts the awaited capability call and
propagates out of ``execute`` unchanged. Steps that already ran are not rolled
back.
"""

import asyncio
import logging
from typing import Optional

from ..capabilities.registry import CapabilityRegistry
from ..errors import CapabilityNotFoundError, StepFailedError, UnsupportedContentError
from ..schemas.domain import CallRequest, ToolCallPlan
from .models import PlanRun, RunStatus, StepOutcome

logger = logging.getLogger(__name__)


class PlanExecutor:
    """Execute a tool call plan step by step against the registry."""

    def __init__(self, *, registry: CapabilityRegistry) -> None:
        self._registry = registry

    async def execute(self, plan: ToolCallPlan, *, run: Optional[PlanRun] = None) -> Optional[str]:
        """Run every step of ``plan`` and return the last step's text.

        Args:
            plan: The steps to execute, in order.
            run: Optional per-request record updated with state transitions.

        Returns:
            The text of the last step, or ``None`` for an empty plan.

        Raises:
            StepFailedError: On the first failing step.
            asyncio.CancelledError: If the caller cancels the run.
        """
        run = run if run is not None else PlanRun()
        run.plan = plan
        final: Optional[str] = None

        for idx, step in enumerate(plan.steps):
            run.transition(RunStatus.executing_step, step_index=idx)
            try:
                final = await self._execute_step(idx, step.tool_name, step.params)
            except StepFailedError as exc:
                run.outcomes.append(
                    StepOutcome(index=idx, tool_name=step.tool_name, reason=step.reason, ok=False, error=str(exc))
                )
                run.error = str(exc)
                run.transition(RunStatus.failed)
                raise
            except asyncio.CancelledError:
                logger.info("Run %s cancelled during step %d (%s)", run.id, idx, step.tool_name)
                run.error = f"cancelled during step {idx}"
                run.transition(RunStatus.failed)
                raise
            run.outcomes.append(StepOutcome(index=idx, tool_name=step.tool_name, reason=step.reason, ok=True))

        run.result = final
        run.transition(RunStatus.completed)
        return final

    async def _execute_step(self, idx: int, tool_name: str, params: dict) -> str:
        try:
            cap = self._registry.lookup(tool_name)
        except CapabilityNotFoundError as exc:
            raise StepFailedError(idx, tool_name, exc) from exc

        logger.debug("Step %d: calling '%s' with %s", idx, tool_name, params)
        try:
            result = await cap.call(CallRequest(arguments=dict(params)))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Step %d: '%s' raised %s", idx, tool_name, exc)
            raise StepFailedError(idx, tool_name, exc) from exc

        if result.is_error:
            raise StepFailedError(idx, tool_name, result.summary() or "capability reported an error")

        try:
            return result.first_text()
        except UnsupportedContentError as exc:
            raise StepFailedError(idx, tool_name, exc) from exc
