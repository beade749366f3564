"""
Message API Endpoints.

This module answers free-form queries: the planner turns the query into a tool
call plan, the executor runs it, and the text of the last step is returned.
"""

from typing import Optional

from fastapi import APIRouter, Query

from toolmesh.core.logging_config import get_logger
from toolmesh.server.schemas import ErrorResponse, QueryRequest, QueryResponse
from toolmesh.server.services.deps import CoordinatorDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/messages",
    response_model=QueryResponse,
    summary="Answer Query",
    description="Generate a tool call plan for the query, execute it and return the final text.",
    response_description="The answer produced by the last plan step.",
    responses={500: {"model": ErrorResponse, "description": "Plan generation or a plan step failed."}},
)
async def post_message(
    body: QueryRequest,
    coordinator: CoordinatorDep,
    session_id: Optional[str] = Query(default=None, alias="sessionId", description="Client session identifier."),
):
    """
    Answer a query through plan generation and execution.

    Runtime failures (plan generation, step failures) are reported by the
    exception handlers with the failing step and capability in the body.
    """
    logger.info(f"Received query (session={session_id or '-'}): {body.query!r}")
    result = await coordinator.run(body.query)
    return QueryResponse(result=result)
