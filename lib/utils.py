# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import math
import re
import time
from datetime import datetime, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Handles both string and UUID objects, ensuring consistent string output.

    Example:
        agent_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        agent_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


def same_owner(row: dict[str, Any], user_id: str | UUID) -> bool:
    """True when the row's user_id column matches the caller."""
    return str(row.get("user_id")) == normalize_uuid(user_id)


# =============================================================================
# Time Utilities
# =============================================================================

def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string (for updated_at columns)."""
    return datetime.now(timezone.utc).isoformat()


def start_of_month_iso(now: datetime | None = None) -> str:
    """Midnight UTC on the first day of the current month."""
    now = now or datetime.now(timezone.utc)
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0).isoformat()


# =============================================================================
# Pagination
# =============================================================================

def build_pagination(page: int, limit: int, total: int) -> dict[str, int]:
    """
    Pagination block returned next to list data.

    Example:
        build_pagination(2, 20, 45) -> {"page": 2, "limit": 20, "total": 45, "total_pages": 3}
    """
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }


def page_range(page: int, limit: int) -> tuple[int, int]:
    """Inclusive (start, end) row offsets for PostgREST .range()."""
    offset = (page - 1) * limit
    return offset, offset + limit - 1


# =============================================================================
# Filenames
# =============================================================================

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")


def generate_safe_filename(original_name: str, timestamp_ms: int | None = None) -> str:
    """
    Sanitize an uploaded filename for use as a storage key.

    Unsafe characters become "_", runs of "_" collapse, everything is
    lowercased and a millisecond timestamp prefix keeps names unique.

    Example:
        generate_safe_filename("Mon Devis (v2).PDF", 1700000000000)
        -> "1700000000000_mon_devis_v2_.pdf"
    """
    safe_name = _UNSAFE_CHARS.sub("_", original_name)
    safe_name = _REPEATED_UNDERSCORES.sub("_", safe_name).lower()

    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    extension = safe_name.rsplit(".", 1)[-1]
    stem = re.sub(r"\.[^/.]+$", "", safe_name)

    return f"{timestamp_ms}_{stem}.{extension}"
