# =============================================================================
# core/services/sector_service.py - Sector Lookups
# =============================================================================
# Reads the `sectors` table. The static catalogue in lib/sectors.py is
# only used as a fallback for expertise text when a row lacks it.
# =============================================================================

import logging
from typing import Any

from lib.sectors import get_sector_by_slug
from lib.supabase_client import SupabaseClient, is_not_found_error

logger = logging.getLogger(__name__)


class SectorService:
    """
    Service for sector reads used by onboarding and agent creation.
    """

    @staticmethod
    def list_sectors(active_only: bool = True) -> list[dict[str, Any]]:
        """Sectors ordered by name."""
        client = SupabaseClient.get_client()

        try:
            query = client.table("sectors").select("*")
            if active_only:
                query = query.eq("is_active", True)
            response = query.order("name").execute()
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list sectors: {e}")
            raise

    @staticmethod
    def get_by_slug(slug: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_row("sectors", slug, id_column="slug")

    @staticmethod
    def get_by_id(sector_id: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_row("sectors", sector_id)

    @staticmethod
    def get_first_sector_id() -> str | None:
        client = SupabaseClient.get_client()
        try:
            response = client.table("sectors").select("id").limit(1).single().execute()
            return response.data["id"] if response.data else None
        except Exception as e:
            if is_not_found_error(e):
                return None
            raise

    @staticmethod
    def resolve_sector_id(sector_id: str | None, sector_slug: str | None) -> str | None:
        """
        Sector id for a new agent.

        An explicit id wins; otherwise the slug is looked up and, failing
        that, the first sector is used.
        """
        if sector_id:
            return sector_id
        if not sector_slug:
            return None

        sector = SectorService.get_by_slug(sector_slug)
        if sector:
            return sector["id"]

        logger.warning(f"Unknown sector slug '{sector_slug}', falling back to first sector")
        return SectorService.get_first_sector_id()

    @staticmethod
    def get_expertise(sector: dict[str, Any] | None, slug: str | None) -> tuple[str, list[str]]:
        """
        (base_expertise, common_tasks) for prompt generation.

        Database values win; the static catalogue fills the gaps, then the
        generic "autre" sector.
        """
        catalogue = get_sector_by_slug(slug or (sector or {}).get("slug")) or get_sector_by_slug("autre")

        expertise = (sector or {}).get("base_expertise") or catalogue.base_expertise
        tasks = (sector or {}).get("common_tasks") or list(catalogue.common_tasks)
        return expertise, tasks
