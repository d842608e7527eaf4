# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - onboarding.py: Wizard answers and step navigation
# - agent.py: Agent create/update schemas
# - business_profile.py: Business profile upsert schemas
# - conversation.py: Conversation schemas, message roles
# - chat.py: Chat request schema
# - attachment.py: Attachment row schema
# - subscription.py: Plans, limits, checkout
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Onboarding Models - Wizard state
# -----------------------------------------------------------------------------
from .onboarding import (
    AgentType,
    BusinessType,
    CommunicationStyle,
    ExperienceLevel,
    OnboardingData,
    OnboardingWizard,
    SelectedLLM,
)

# -----------------------------------------------------------------------------
# Subscription Models - Plans and limits
# -----------------------------------------------------------------------------
from .subscription import (
    BillingPeriod,
    CheckoutRequest,
    LimitCheckResult,
    ModelType,
    PlanLimits,
    PREMIUM_MODELS,
    SubscriptionPlan,
    SubscriptionStatus,
    SubscriptionTier,
)

# -----------------------------------------------------------------------------
# Agent Models
# -----------------------------------------------------------------------------
from .agent import (
    AgentCreate,
    AgentModelUpdate,
    AgentUpdate,
)

# -----------------------------------------------------------------------------
# Business Profile Models
# -----------------------------------------------------------------------------
from .business_profile import (
    BusinessProfileInput,
    BusinessProfileUpdate,
)

# -----------------------------------------------------------------------------
# Conversation & Chat Models
# -----------------------------------------------------------------------------
from .conversation import (
    ConversationCreate,
    ConversationStatus,
    ConversationUpdate,
    GenerateTitleRequest,
    MessageRole,
)
from .chat import (
    ChatRequest,
    ChatUsage,
)

# -----------------------------------------------------------------------------
# Attachment Models
# -----------------------------------------------------------------------------
from .attachment import AttachmentCreate

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Onboarding
    "AgentType",
    "BusinessType",
    "CommunicationStyle",
    "ExperienceLevel",
    "OnboardingData",
    "OnboardingWizard",
    "SelectedLLM",
    # Subscription
    "BillingPeriod",
    "CheckoutRequest",
    "LimitCheckResult",
    "ModelType",
    "PlanLimits",
    "PREMIUM_MODELS",
    "SubscriptionPlan",
    "SubscriptionStatus",
    "SubscriptionTier",
    # Agent
    "AgentCreate",
    "AgentModelUpdate",
    "AgentUpdate",
    # Business Profile
    "BusinessProfileInput",
    "BusinessProfileUpdate",
    # Conversation & Chat
    "ConversationCreate",
    "ConversationStatus",
    "ConversationUpdate",
    "GenerateTitleRequest",
    "MessageRole",
    "ChatRequest",
    "ChatUsage",
    # Attachment
    "AttachmentCreate",
]
