from __future__ import annotations

"""High-level orchestration service for planned queries.

``Coordinator`` provides an application-friendly API for answering a query
without manually wiring the planner and the executor.

Workflow
--------

- ``run``:

  1. Uses ``PlanGenerator`` to generate a plan for the query.
  2. Executes the plan with ``PlanExecutor``.
  3. Returns the text of the last step (``None`` for an empty plan).

- ``run_with_trace``: same workflow, but returns the ``PlanRun`` record so the
  caller can inspect state transitions and per-step outcomes.

``Coordinator`` is intentionally thin: it delegates execution semantics to the
executor and prompt construction to the planner. Each query owns its own
``PlanRun``, so one coordinator serves concurrent queries.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import ToolRuntimeError
from .planning.planner import PlanGenerator
from .runtime import PlanExecutor, PlanRun, RunStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoordinatorDeps:
    """Dependency bundle for ``Coordinator``."""

    planner: PlanGenerator
    executor: PlanExecutor


class Coordinator:
    """Orchestrate plan generation + execution for a single query."""

    def __init__(self, *, deps: CoordinatorDeps) -> None:
        self._deps = deps

    async def run(self, query: str) -> Optional[str]:
        """Plan and execute a query.

        Returns
        -------
        Optional[str]
            The text produced by the last plan step, or ``None`` if the plan
            has no steps.
        """
        run = PlanRun(query=query)
        await self._drive(run)
        return run.result

    async def run_with_trace(self, query: str) -> PlanRun:
        """Plan and execute a query, returning the completed run record.

        Errors still propagate; the record passed around is left in the
        ``failed`` state before they do.
        """
        run = PlanRun(query=query)
        await self._drive(run)
        return run

    async def _drive(self, run: PlanRun) -> None:
        run.transition(RunStatus.generating_plan)
        try:
            plan = await self._deps.planner.plan(run.query)
        except ToolRuntimeError as exc:
            run.error = str(exc)
            run.transition(RunStatus.failed)
            logger.warning("Run %s: plan generation failed: %s", run.id, exc)
            raise

        logger.info("Run %s: executing %d-step plan", run.id, len(plan.steps))
        await self._deps.executor.execute(plan, run=run)
        logger.info("Run %s: %s", run.id, run.status.value)
