# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Blanks provider keys so no test reaches OpenAI, Cloudinary or Stripe
# - Resets the in-memory stores between tests
# - Provides TestClient fixtures with and without an authenticated user
# =============================================================================

import os
import time
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://testref.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-hs256-signing-0123456789"
os.environ["OPENAI_API_KEY"] = ""
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["STRIPE_WEBHOOK_SECRET"] = ""
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth import AuthUser, get_current_user
from app.main import app
from core.services.listing_service import listing_store
from core.services.social_service import social_store

TEST_USER_ID = UUID("11111111-2222-3333-4444-555555555555")
TEST_DEALERSHIP_ID = "dealership-001"


# =============================================================================
# Helpers
# =============================================================================

def make_token(
    user_id: UUID = TEST_USER_ID,
    email: str = "dealer@example.com",
    dealership_id: str | None = TEST_DEALERSHIP_ID,
    audience: str = "authenticated",
    expires_in: int = 3600,
    secret: str | None = None,
) -> str:
    """HS256 Supabase-style access token signed with the test secret."""
    claims = {
        "sub": str(user_id),
        "email": email,
        "aud": audience,
        "exp": int(time.time()) + expires_in,
        "user_metadata": {"dealership_id": dealership_id} if dealership_id else {},
    }
    return jwt.encode(claims, secret or os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_stores():
    """Fresh seed data for every test."""
    listing_store.reset()
    social_store.reset()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def auth_user():
    return AuthUser(id=TEST_USER_ID, email="dealer@example.com", dealership_id=TEST_DEALERSHIP_ID)


@pytest.fixture
def client():
    """Unauthenticated client."""
    return TestClient(app)


@pytest.fixture
def authed_client(auth_user):
    """Client whose requests resolve to auth_user."""
    app.dependency_overrides[get_current_user] = lambda: auth_user
    return TestClient(app)


@pytest.fixture
def sample_vehicle():
    """Vehicle info as the frontend sends it."""
    return {
        "make": "Toyota",
        "model": "RAV4",
        "year": 2022,
        "trim": "XLE",
        "mileage": 18000,
        "exteriorColor": "Blueprint",
        "features": ["Apple CarPlay", "Blind Spot Monitor", "Heated Seats"],
        "price": 31999,
        "stockNumber": "STK-1001",
    }


@pytest.fixture
def sample_listing_payload():
    return {
        "title": "2021 Ford F-150 XLT",
        "make": "Ford",
        "model": "F-150",
        "year": 2021,
        "price": 38500,
        "mileage": 24000,
        "features": ["Tow Package", "4x4"],
    }
