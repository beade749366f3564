"""Plan execution runtime.

 The runtime takes a ``ToolCallPlan`` produced by the planning subsystem and
 executes it against the capability registry:

 - steps run strictly in order, one at a time;
 - the first failing step aborts the run with ``StepFailedError``;
 - the text of the last step is the answer.

 The main entry point is ``PlanExecutor``. Per-request state is recorded in a
 ``PlanRun``.
 """

from .engine import PlanExecutor
from .models import PlanRun, RunStatus, StepOutcome

__all__ = [
    "PlanExecutor",
    "PlanRun",
    "RunStatus",
    "StepOutcome",
]
