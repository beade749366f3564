"""Planning components.

 The planning subsystem turns a free-text user query into a ``ToolCallPlan``:
 an ordered list of ``ToolCallStep`` items, each naming a capability, its
 parameters, and a reason kept for traceability.

 The planner itself does not execute tools; it only emits the plan that is
 later consumed by ``toolmesh.agent_core.runtime.PlanExecutor``.
 """

from .planner import PlanGenerator
from .steps import parse_plan

__all__ = [
    "PlanGenerator",
    "parse_plan",
]
