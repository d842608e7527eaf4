# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - llm_client.py: Anthropic/OpenAI routing and conversation titles
# - pricing.py: Plans, model prices and the Doggo unit
# - prompt_generator.py: System prompts from onboarding answers
# - sectors.py: Static sector catalogue (seed data, prompt fallback)
# - file_processing.py: Image compression, thumbnails, PDF text
# - utils.py: Shared utilities (UUID normalization, pagination, filenames)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.llm_client import LLMResponse, send_message
from lib.utils import normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # LLM
    "LLMResponse",
    "send_message",
    # Utils
    "normalize_uuid",
]
