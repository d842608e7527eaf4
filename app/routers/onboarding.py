# =============================================================================
# app/routers/onboarding.py - Agent Onboarding Endpoints
# =============================================================================
# Backs the onboarding wizard:
# - GET /onboarding/sectors: sector picker
# - POST /onboarding/preview: generated prompt for the confirmation step
# - POST /onboarding/complete: create the agent from the answers
#
# The body of preview/complete is the wizard state (OnboardingData),
# in snake_case or the web client's camelCase.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.onboarding import OnboardingData
from core.services.onboarding_service import OnboardingService
from core.services.sector_service import SectorService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/sectors")
async def list_sectors(user: AuthUser = Depends(get_current_user)):
    """Active sectors ordered by name."""
    sectors = SectorService.list_sectors()
    return {"success": True, "data": sectors}


@router.post("/preview")
async def preview_agent(
    request: OnboardingData,
    user: AuthUser = Depends(get_current_user),
):
    """
    Generate the system prompt without creating anything.

    Returns agent_name, default_agent_name and system_prompt.
    """
    preview = OnboardingService.preview(request)
    return {"success": True, "data": preview}


@router.post("/complete", status_code=201)
async def complete_onboarding(
    request: OnboardingData,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create the agent described by the wizard answers.

    Companion agents also save the caller's business profile.
    """
    agent = OnboardingService.complete(user.id, request)
    return {"success": True, "data": agent}
