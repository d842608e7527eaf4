# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the API:
# - models/: Pydantic schemas for data validation
# - services/: Supabase-backed services (agents, chat, limits, billing...)
#
# Services raise app.exceptions errors; routers stay thin and only map
# HTTP requests onto service calls.
# =============================================================================
