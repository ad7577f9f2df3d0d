# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the DealerAI API.
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

from app.config import settings
from app.exceptions import (
    DealerAIException,
    dealerai_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.middleware import session_middleware
from app.routers import (
    analytics,
    billing,
    chat,
    content,
    dashboard,
    gallery,
    health,
    images,
    listings,
    social,
    webhooks,
)
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _configured(flag: bool) -> str:
    return "set" if flag else "not set"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the environment and which providers have credentials on startup.
    Values are never logged, only whether they're set.
    """
    logger.info(f"Starting DealerAI API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(
        f"Providers: openai={_configured(settings.openai_configured)}, "
        f"cloudinary={_configured(settings.cloudinary_configured)}, "
        f"stripe={_configured(settings.stripe_configured)}, "
        f"jwt_secret={_configured(bool(settings.SUPABASE_JWT_SECRET))}"
    )
    if not settings.SUPABASE_JWT_SECRET:
        logger.warning("SUPABASE_JWT_SECRET not set, HS256 access tokens will be rejected")

    yield

    logger.info("Shutting down DealerAI API")


# Create FastAPI application
app = FastAPI(
    title="DealerAI API",
    description="""
## Car Dealership Listing & Marketing API

DealerAI helps dealerships list vehicles, write listing copy, polish photos
and publish to social channels.

### Features

- **Listings**: Vehicle inventory with images and AI-written copy
- **Content**: Descriptions, highlights, SEO fields and social posts
- **Images**: Cloudinary uploads, enhancement presets and background previews
- **Billing**: Stripe subscriptions with pro, growth and enterprise plans
- **Analytics**: Views, leads and engagement compared period over period

### Quick Start

```bash
# List listings
curl http://localhost:8000/api/v1/listings \\
  -H "Authorization: Bearer <supabase access token>"

# Write copy for a listing
curl -X POST http://localhost:8000/api/v1/listings/listing_123/content \\
  -H "Authorization: Bearer <supabase access token>" \\
  -H "Content-Type: application/json" \\
  -d '{"generateDescription": true, "generateFeatures": true}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Session verification and sign-in callback"},
        {"name": "Listings", "description": "Vehicle listings, images and listing copy"},
        {"name": "Chat", "description": "Dealership chat assistant"},
        {"name": "Content", "description": "AI copywriting and generated backgrounds"},
        {"name": "Images", "description": "Uploads, enhancement and analysis"},
        {"name": "Gallery", "description": "Saved edits and their tags"},
        {"name": "Social", "description": "Social publishing and schedule"},
        {"name": "Billing", "description": "Subscription plans and Stripe sessions"},
        {"name": "Webhooks", "description": "Stripe and Cloudinary notifications"},
        {"name": "Analytics", "description": "Dealership analytics and public tracking"},
        {"name": "Dashboard", "description": "Dashboard summary and page paths"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# Session resolution and page redirects
app.middleware("http")(session_middleware)

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

app.add_exception_handler(DealerAIException, dealerai_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


# =============================================================================
# Routers
# =============================================================================

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Listing endpoints
app.include_router(
    listings.router,
    prefix="/api/v1/listings",
    tags=["Listings"]
)

# Chat assistant
app.include_router(
    chat.router,
    prefix="/api/v1",
    tags=["Chat"]
)

# AI content endpoints
app.include_router(
    content.router,
    prefix="/api/v1",
    tags=["Content"]
)

# Image endpoints
app.include_router(
    images.router,
    prefix="/api/v1",
    tags=["Images"]
)

# Gallery endpoints
app.include_router(
    gallery.router,
    prefix="/api/v1",
    tags=["Gallery"]
)

# Social publishing endpoints
app.include_router(
    social.router,
    prefix="/api/v1",
    tags=["Social"]
)

# Billing endpoints
app.include_router(
    billing.router,
    prefix="/api/v1",
    tags=["Billing"]
)

# Provider webhooks (public)
app.include_router(
    webhooks.router,
    prefix="/api/v1",
    tags=["Webhooks"]
)

# Analytics and public tracking
app.include_router(
    analytics.router,
    prefix="/api/v1",
    tags=["Analytics"]
)

# Dashboard summary and page paths
app.include_router(
    dashboard.router,
    prefix="/api/v1",
    tags=["Dashboard"]
)
app.include_router(
    dashboard.pages_router,
    tags=["Dashboard"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "DealerAI API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
