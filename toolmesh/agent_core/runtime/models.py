from __future__ import annotations

"""Per-request execution state for planned runs.

Every query owns one ``PlanRun``. The record is never shared between
requests, so concurrent queries need no synchronization beyond the
registry's lookup lock.

State machine::

    idle -> generating_plan -> executing_step(i) -> executing_step(i+1)
                                                 -> completed
                                                 -> failed
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import Field

from ..schemas.base import BaseSchema
from ..schemas.domain import ToolCallPlan


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RunStatus(str, Enum):
    idle = "idle"
    generating_plan = "generating_plan"
    executing_step = "executing_step"
    completed = "completed"
    failed = "failed"


class StepOutcome(BaseSchema):
    index: int
    tool_name: str
    reason: str = ""
    ok: bool
    error: Optional[str] = None


class PlanRun(BaseSchema):
    id: str = Field(default_factory=lambda: str(uuid4()))
    query: str = ""

    status: RunStatus = RunStatus.idle
    step_index: Optional[int] = None
    plan: Optional[ToolCallPlan] = None
    outcomes: List[StepOutcome] = Field(default_factory=list)

    result: Optional[str] = None
    error: Optional[str] = None

    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)

    def transition(self, status: RunStatus, *, step_index: Optional[int] = None) -> None:
        self.status = status
        if step_index is not None:
            self.step_index = step_index
        self.updated_at = _utc_now()

    @property
    def finished(self) -> bool:
        return self.status in (RunStatus.completed, RunStatus.failed)
