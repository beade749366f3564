"""
Chained Pipeline API Endpoints.

Runs the fixed search -> navigate -> extract chain: the first search hit is
opened in the browser and the requested content is extracted from it.
"""

from fastapi import APIRouter

from toolmesh.core.logging_config import get_logger
from toolmesh.server.schemas import ChainRequest, ErrorResponse, QueryResponse
from toolmesh.server.services.deps import PipelineDep

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=QueryResponse,
    summary="Run Search Chain",
    description="Search the web, open the first result and extract content matching the goal.",
    response_description="The extracted content.",
    responses={500: {"model": ErrorResponse, "description": "A pipeline stage failed."}},
)
async def run_chain(body: ChainRequest, pipeline: PipelineDep):
    logger.info(f"Running chain for query={body.query!r}")
    result = await pipeline.run(body.query, body.goal)
    return QueryResponse(result=result)
