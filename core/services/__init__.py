# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .usage_service import UsageService
from .limits_service import LimitsService
from .sector_service import SectorService
from .business_profile_service import BusinessProfileService
from .agent_service import AgentService
from .conversation_service import ConversationService
from .message_service import MessageService
from .storage_service import StorageService
from .attachment_service import AttachmentService
from .chat_service import ChatService
from .billing_service import BillingService
from .onboarding_service import OnboardingService

__all__ = [
    "UsageService",
    "LimitsService",
    "SectorService",
    "BusinessProfileService",
    "AgentService",
    "ConversationService",
    "MessageService",
    "StorageService",
    "AttachmentService",
    "ChatService",
    "BillingService",
    "OnboardingService",
]
