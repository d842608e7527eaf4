# =============================================================================
# app/routers/business_profiles.py - Business Profile Endpoints
# =============================================================================
# One profile per user. POST upserts, PATCH/DELETE target a profile id
# and check ownership.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, get_current_user
from core.models.business_profile import BusinessProfileInput, BusinessProfileUpdate
from core.services.business_profile_service import BusinessProfileService

router = APIRouter()


@router.get("")
async def get_business_profile(user: AuthUser = Depends(get_current_user)):
    """The caller's business profile, or null with exists=false."""
    profile = BusinessProfileService.get_for_user(user.id)
    return {"success": True, "data": profile, "exists": profile is not None}


@router.post("")
async def upsert_business_profile(
    request: BusinessProfileInput,
    user: AuthUser = Depends(get_current_user),
):
    """Create or replace the caller's business profile."""
    profile = BusinessProfileService.upsert(user.id, request)
    return {"success": True, "data": profile}


@router.patch("/{profile_id}")
async def update_business_profile(
    profile_id: Annotated[str, Path(description="Profile UUID")],
    request: BusinessProfileUpdate,
    user: AuthUser = Depends(get_current_user),
):
    profile = BusinessProfileService.update(profile_id, user.id, request.to_update_dict())
    return {"success": True, "data": profile}


@router.delete("/{profile_id}")
async def delete_business_profile(
    profile_id: Annotated[str, Path(description="Profile UUID")],
    user: AuthUser = Depends(get_current_user),
):
    BusinessProfileService.delete(profile_id, user.id)
    return {"success": True, "message": "Profile deleted successfully"}
