# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the yaya API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    YayaException,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
    yaya_exception_handler,
)
from app.middleware import GatewayMiddleware
from app.routers import (
    agents,
    attachments,
    billing,
    business_profiles,
    chat,
    conversations,
    health,
    messages,
    onboarding,
    subscription,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the effective configuration on startup. Clients (Supabase,
    OpenAI, Anthropic, Stripe) are created lazily on first use.
    """
    logger.info(f"Starting yaya API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.stripe_configured:
        logger.warning("Stripe is not configured; billing endpoints will answer 503")
    if not settings.OPENAI_API_KEY and not settings.ANTHROPIC_API_KEY:
        logger.warning("No LLM provider key configured; chat will fail")

    yield

    logger.info("Shutting down yaya API")


# Create FastAPI application
app = FastAPI(
    title="yaya API",
    description="""
## AI Agents for Small Businesses

yaya lets freelancers and small companies configure AI agents through an
onboarding wizard, chat with them, and manage their subscription.

### How It Works

1. **Onboard** - Answer the wizard; a system prompt is generated for your sector
2. **Chat** - Talk to your agent; conversations and attachments are stored
3. **Subscribe** - Upgrade through Stripe to unlock agents and premium models

### Plans

| Plan | Agents | Doggos / month | Models |
|------|--------|----------------|--------|
| **Free** | 1 | 1 000 | haiku, gpt-4o-mini |
| **Pro** | 3 | 10 000 | + gpt-4o, sonnet (quota) |
| **Enterprise** | 10 | 30 000 | + opus (quota) |

All `/api/v1` endpoints expect a Supabase access token, either as
`Authorization: Bearer <token>` or in the `sb-access-token` cookie.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Token verification and the sign-in callback"},
        {"name": "Agents", "description": "Create and manage AI agents"},
        {"name": "Business Profiles", "description": "The caller's business profile"},
        {"name": "Conversations", "description": "Conversations, messages and attachments"},
        {"name": "Attachments", "description": "Upload files to conversations"},
        {"name": "Chat", "description": "Talk to an agent"},
        {"name": "Billing", "description": "Stripe checkout, portal and webhook"},
        {"name": "Subscription", "description": "Plan limits, catalogue and monthly budget"},
        {"name": "Onboarding", "description": "Sectors, prompt preview and agent creation"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# Page redirects for signed-in / anonymous browsers
app.add_middleware(GatewayMiddleware)

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(YayaException, yaya_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# =============================================================================
# Routers
# =============================================================================

API_PREFIX = "/api/v1"

# Authentication endpoints (/api/v1/auth/...)
app.include_router(auth_routes.router, prefix=API_PREFIX)

# Sign-in callback, mounted at the site root
app.include_router(auth_routes.callback_router)

# Health check endpoints
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])

# Agents
app.include_router(agents.router, prefix=f"{API_PREFIX}/agents", tags=["Agents"])

# Business profiles
app.include_router(
    business_profiles.router,
    prefix=f"{API_PREFIX}/business-profiles",
    tags=["Business Profiles"]
)

# Conversations and messages
app.include_router(conversations.router, prefix=f"{API_PREFIX}/conversations", tags=["Conversations"])
app.include_router(messages.router, prefix=f"{API_PREFIX}/messages", tags=["Conversations"])

# Attachments
app.include_router(attachments.router, prefix=f"{API_PREFIX}/attachments", tags=["Attachments"])

# Chat
app.include_router(chat.router, prefix=API_PREFIX, tags=["Chat"])

# Stripe billing
app.include_router(billing.router, prefix=f"{API_PREFIX}/stripe", tags=["Billing"])

# Plan limits, catalogue and budget
app.include_router(subscription.router, prefix=API_PREFIX, tags=["Subscription"])

# Onboarding wizard
app.include_router(onboarding.router, prefix=f"{API_PREFIX}/onboarding", tags=["Onboarding"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "yaya API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
