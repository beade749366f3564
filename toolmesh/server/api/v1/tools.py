"""
Capability Catalogue Endpoints.

Lists the constructed capabilities with the descriptors offered to the planner.
"""

from fastapi import APIRouter

from toolmesh.server.schemas import ToolListResponse
from toolmesh.server.services.deps import RegistryDep

router = APIRouter()


@router.get(
    "",
    response_model=ToolListResponse,
    summary="List Capabilities",
    description="Return the descriptor of every constructed capability, sorted by name.",
)
async def list_tools(registry: RegistryDep):
    return ToolListResponse(tools=registry.list_descriptors())
