# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - agents.py: Agent CRUD and model switching
# - business_profiles.py: The caller's business profile
# - conversations.py: Conversations, their messages and attachments
# - messages.py: Attachments of a message
# - attachments.py: File upload, signed URLs, deletion
# - chat.py: One chat turn with an agent
# - billing.py: Stripe checkout, portal and webhook
# - subscription.py: Plan limits, plan catalogue, monthly budget
# - onboarding.py: Sector list, prompt preview, agent creation
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import agents
from . import business_profiles
from . import conversations
from . import messages
from . import attachments
from . import chat
from . import billing
from . import subscription
from . import onboarding

__all__ = [
    "health",
    "agents",
    "business_profiles",
    "conversations",
    "messages",
    "attachments",
    "chat",
    "billing",
    "subscription",
    "onboarding",
]
