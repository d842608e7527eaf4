# =============================================================================
# app/routers/agents.py - Agent CRUD Endpoints
# =============================================================================
# Handles agent creation and management.
# All endpoints require authentication; a caller only sees their own agents.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, get_current_user
from core.models.agent import AgentCreate, AgentModelUpdate, AgentUpdate
from core.services.agent_service import AgentService
from lib.utils import build_pagination

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
async def list_agents(
    user: AuthUser = Depends(get_current_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    search: Annotated[str | None, Query(description="Match on name or description")] = None,
    sector_id: Annotated[str | None, Query(description="Filter by sector")] = None,
    is_active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
):
    """
    List the caller's agents, newest first.
    """
    agents, total = AgentService.list_agents(
        user_id=user.id,
        page=page,
        limit=limit,
        search=search,
        sector_id=sector_id,
        is_active=is_active,
    )

    return {
        "success": True,
        "data": agents,
        "pagination": build_pagination(page, limit, total),
    }


@router.post("", status_code=201)
@router.post("/create", status_code=201)
async def create_agent(
    request: AgentCreate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create an agent.

    The caller's plan limits how many agents they can own (403 LIMIT_REACHED).
    """
    agent = AgentService.create_agent(user.id, request)
    return {"success": True, "data": agent}


@router.get("/{agent_id}")
async def get_agent(
    agent_id: Annotated[str, Path(description="Agent UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Get one of the caller's agents with its sector."""
    agent = AgentService.get_agent(agent_id, user.id)
    return {"success": True, "data": agent}


@router.patch("/{agent_id}")
async def update_agent(
    agent_id: Annotated[str, Path(description="Agent UUID")],
    request: AgentUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Partially update an agent."""
    agent = AgentService.update_agent(agent_id, user.id, request.to_update_dict())
    return {"success": True, "data": agent}


@router.delete("/{agent_id}")
async def delete_agent(
    agent_id: Annotated[str, Path(description="Agent UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete an agent permanently."""
    AgentService.delete_agent(agent_id, user.id)
    return {"success": True, "message": "Agent deleted successfully"}


@router.patch("/{agent_id}/model")
async def update_agent_model(
    agent_id: Annotated[str, Path(description="Agent UUID")],
    request: AgentModelUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Switch the LLM an agent runs on.

    Premium models must be included in the caller's plan.
    """
    agent = AgentService.update_model(agent_id, user.id, request.model)
    return {"success": True, "data": agent}
