from __future__ import annotations

import pytest

from toolmesh.agent_core.errors import InvalidPlanFormatError
from toolmesh.agent_core.planning.steps import parse_plan, strip_code_fence


def test_parse_plan_preserves_step_order() -> None:
    reply = (
        '{"steps": ['
        '{"tool_name": "web_search", "params": {"query": "q"}, "reason": "find"},'
        '{"tool_name": "browseruse", "params": {"action": "go_to_url"}, "reason": "open"},'
        '{"tool_name": "vector_search", "params": {}, "reason": "lookup"}'
        "]}"
    )

    plan = parse_plan(reply)

    assert [s.tool_name for s in plan.steps] == ["web_search", "browseruse", "vector_search"]
    assert plan.steps[0].params == {"query": "q"}
    assert plan.steps[1].reason == "open"


def test_parse_plan_defaults_params_and_reason() -> None:
    plan = parse_plan('{"steps": [{"tool_name": "web_search"}]}')

    assert plan.steps[0].params == {}
    assert plan.steps[0].reason == ""


def test_parse_plan_accepts_empty_plan() -> None:
    assert parse_plan('{"steps": []}').steps == []


def test_parse_plan_ignores_unknown_keys() -> None:
    plan = parse_plan('{"steps": [{"tool_name": "a", "confidence": 0.9}], "note": "x"}')

    assert plan.steps[0].tool_name == "a"


def test_parse_plan_strips_markdown_fence() -> None:
    reply = '```json\n{"steps": [{"tool_name": "a", "params": {"k": 1}}]}\n```'

    plan = parse_plan(reply)

    assert plan.steps[0].params == {"k": 1}


@pytest.mark.parametrize(
    "reply",
    [
        "I would search the web first.",
        '{"steps": "web_search"}',
        '{"steps": [{"params": {}}]}',
        '[{"tool_name": "a"}]',
        '{"steps": [{"tool_name": "a"}',
    ],
)
def test_parse_plan_rejects_malformed_reply(reply: str) -> None:
    with pytest.raises(InvalidPlanFormatError) as exc_info:
        parse_plan(reply)

    assert exc_info.value.raw_reply == reply


def test_strip_code_fence_leaves_plain_text_untouched() -> None:
    assert strip_code_fence('  {"steps": []}\n') == '{"steps": []}'
    assert strip_code_fence('```\n{"steps": []}\n```') == '{"steps": []}'
