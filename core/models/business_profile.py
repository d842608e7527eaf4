# =============================================================================
# core/models/business_profile.py - Business Profile Schemas
# =============================================================================
# A business profile stores the companion onboarding answers once per user
# so later agents can reuse them. Upserted on user_id.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PROFILE_FIELDS = (
    "business_name",
    "business_type",
    "location",
    "years_experience",
    "main_clients",
    "specificities",
    "typical_project_size",
    "main_challenges",
    "tools_used",
    "primary_goals",
    "business_values",
    "example_projects",
)


class BusinessProfileInput(BaseModel):
    """
    Body of POST /business-profiles.

    business_name is validated by the service (blank after trim -> 400)
    so the error message matches the other profile errors.
    camelCase keys from the onboarding payload are accepted too.
    """
    business_name: str = ""
    business_type: str | None = None
    location: str | None = None
    years_experience: str | None = None
    main_clients: str | None = None
    specificities: str | None = None
    typical_project_size: str | None = None
    main_challenges: str | None = None
    tools_used: str | None = None
    primary_goals: list[str] = Field(default_factory=list)
    business_values: str | None = None
    example_projects: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_row(self) -> dict[str, Any]:
        """Row values with empty strings stored as NULL."""
        row = self.model_dump(by_alias=False)
        for field in PROFILE_FIELDS:
            if row[field] == "":
                row[field] = None
        row["business_name"] = (self.business_name or "").strip()
        return row


class BusinessProfileUpdate(BaseModel):
    """Partial update of a business profile."""
    business_name: str | None = None
    business_type: str | None = None
    location: str | None = None
    years_experience: str | None = None
    main_clients: str | None = None
    specificities: str | None = None
    typical_project_size: str | None = None
    main_challenges: str | None = None
    tools_used: str | None = None
    primary_goals: list[str] | None = None
    business_values: str | None = None
    example_projects: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_update_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=False)
