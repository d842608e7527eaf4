# =============================================================================
# core/services/business_profile_service.py - Business Profile Logic
# =============================================================================
# One business profile per user, upserted on user_id.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ForbiddenError, ResourceNotFoundError, ValidationFailedError
from core.models.business_profile import BusinessProfileInput
from lib.supabase_client import SupabaseClient, is_not_found_error
from lib.utils import normalize_uuid, same_owner, utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "business_profiles"


class BusinessProfileService:
    """
    Service for business profile operations.
    """

    @staticmethod
    def get_for_user(user_id: UUID | str) -> dict[str, Any] | None:
        """The caller's profile, or None."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found_error(e):
                return None
            logger.error(f"Failed to fetch business profile for user {user_id}: {e}")
            raise

    @staticmethod
    def upsert(user_id: UUID | str, profile: BusinessProfileInput) -> dict[str, Any]:
        """
        Create or replace the caller's profile.

        Raises:
            ValidationFailedError: If business_name is blank
        """
        row = profile.to_row()
        if not row["business_name"]:
            raise ValidationFailedError("business_name is required")

        row["user_id"] = normalize_uuid(user_id)
        row["updated_at"] = utc_now_iso()

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).upsert(row, on_conflict="user_id").execute()
            if response.data:
                saved = response.data[0]
                logger.info(f"Upserted business profile {saved.get('id')} for user {user_id}")
                return saved
            raise Exception("Upsert returned no data")

        except Exception as e:
            logger.error(f"Failed to upsert business profile: {e}")
            raise

    @staticmethod
    def get_owned(profile_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        Raises:
            ResourceNotFoundError: If the profile doesn't exist
            ForbiddenError: If it belongs to someone else
        """
        profile = SupabaseClient.fetch_row(TABLE, profile_id)
        if not profile:
            raise ResourceNotFoundError("Profile", profile_id)
        if not same_owner(profile, user_id):
            raise ForbiddenError("profile")
        return profile

    @staticmethod
    def update(profile_id: str, user_id: UUID | str, updates: dict[str, Any]) -> dict[str, Any]:
        profile = BusinessProfileService.get_owned(profile_id, user_id)

        if "business_name" in updates:
            name = (updates["business_name"] or "").strip()
            if not name:
                raise ValidationFailedError("business_name is required")
            updates["business_name"] = name

        if not updates:
            return profile

        updates["updated_at"] = utc_now_iso()
        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).update(updates).eq("id", profile_id).execute()
            if response.data:
                logger.info(f"Updated business profile: {profile_id}")
                return response.data[0]
            return profile

        except Exception as e:
            logger.error(f"Failed to update business profile {profile_id}: {e}")
            raise

    @staticmethod
    def delete(profile_id: str, user_id: UUID | str) -> None:
        BusinessProfileService.get_owned(profile_id, user_id)

        client = SupabaseClient.get_client()
        try:
            client.table(TABLE).delete().eq("id", profile_id).execute()
            logger.info(f"Deleted business profile: {profile_id}")
        except Exception as e:
            logger.error(f"Failed to delete business profile {profile_id}: {e}")
            raise
