from __future__ import annotations

import re

from pydantic import ValidationError

from ..errors import InvalidPlanFormatError
from ..schemas.domain import ToolCallPlan

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n(?P<body>.*?)\n?```$", re.DOTALL)


def strip_code_fence(reply: str) -> str:
    """Remove one Markdown code fence wrapping the whole reply, if present."""
    text = reply.strip()
    match = _FENCE_RE.match(text)
    if match:
        return match.group("body").strip()
    return text


def parse_plan(reply: str) -> ToolCallPlan:
    """Parse a model reply into a ``ToolCallPlan``.

    The reply must be a JSON object of the form
    ``{"steps": [{"tool_name": ..., "params": {...}, "reason": ...}]}``.
    Steps keep the order in which they appear in the reply.

    Raises:
        InvalidPlanFormatError: If the reply is not a valid plan document.
    """
    body = strip_code_fence(reply)
    try:
        return ToolCallPlan.model_validate_json(body)
    except ValidationError as exc:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in exc.errors()
        )
        raise InvalidPlanFormatError(reply, reason) from exc
