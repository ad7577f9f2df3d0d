# =============================================================================
# tests/test_billing.py - Subscription Billing Tests
# =============================================================================
# Supabase and Stripe are patched where core.services.billing_service
# imports them.
# =============================================================================

from unittest.mock import patch

import pytest

from app.config import settings
from core.services.billing_service import subscription_url
from lib.stripe_client import StripeClientError
from tests.conftest import TEST_USER_ID


@pytest.fixture
def mock_supabase():
    with patch("core.services.billing_service.SupabaseClient") as mock:
        yield mock


@pytest.fixture
def mock_stripe():
    with patch("core.services.billing_service.StripeClient") as mock:
        yield mock


class TestPlans:
    """Tests for GET /api/v1/subscription/plans."""

    def test_lists_three_tiers(self, client):
        plans = client.get("/api/v1/subscription/plans").json()
        assert list(plans) == ["pro", "growth", "enterprise"]
        assert plans["pro"]["priceId"] == settings.STRIPE_PRICE_PRO
        assert plans["growth"]["limits"]["socialPlatforms"] == 3
        assert plans["enterprise"]["limits"]["listings"] is None


class TestCheckout:
    """Tests for POST /api/v1/stripe/create-checkout."""

    def test_requires_session(self, client):
        assert client.post("/api/v1/stripe/create-checkout", json={"subscriptionTier": "pro"}).status_code == 401

    def test_returns_checkout_url(self, authed_client, mock_supabase, mock_stripe):
        mock_supabase.fetch_user.return_value = {
            "id": str(TEST_USER_ID),
            "email": "dealer@example.com",
            "dealership_id": "dealership-001",
            "stripe_customer_id": None,
        }
        mock_stripe.create_checkout_session.return_value = "https://checkout.stripe.com/c/pay/cs_test_1"

        response = authed_client.post("/api/v1/stripe/create-checkout", json={"subscriptionTier": "growth"})

        assert response.status_code == 200
        assert response.json() == {"url": "https://checkout.stripe.com/c/pay/cs_test_1"}
        kwargs = mock_stripe.create_checkout_session.call_args.kwargs
        assert kwargs["price_id"] == settings.STRIPE_PRICE_GROWTH
        assert kwargs["user_id"] == str(TEST_USER_ID)
        assert kwargs["dealership_id"] == "dealership-001"
        assert kwargs["email"] == "dealer@example.com"
        assert kwargs["customer_id"] is None
        assert kwargs["success_url"] == subscription_url("/success?session_id={CHECKOUT_SESSION_ID}")
        assert kwargs["cancel_url"].endswith("/dashboard/subscription/canceled")

    def test_user_without_dealership(self, authed_client, mock_supabase, mock_stripe):
        mock_supabase.fetch_user.return_value = {"email": "dealer@example.com"}
        mock_stripe.create_checkout_session.return_value = "https://checkout.stripe.com/x"
        authed_client.post("/api/v1/stripe/create-checkout", json={"subscriptionTier": "pro"})
        assert mock_stripe.create_checkout_session.call_args.kwargs["dealership_id"] == "no_dealership"

    def test_unknown_tier(self, authed_client, mock_supabase, mock_stripe):
        response = authed_client.post("/api/v1/stripe/create-checkout", json={"subscriptionTier": "platinum"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid subscription tier"
        mock_supabase.fetch_user.assert_not_called()

    def test_unknown_user(self, authed_client, mock_supabase, mock_stripe):
        mock_supabase.fetch_user.return_value = None
        response = authed_client.post("/api/v1/stripe/create-checkout", json={"subscriptionTier": "pro"})
        assert response.status_code == 404

    def test_stripe_failure(self, authed_client, mock_supabase, mock_stripe):
        mock_supabase.fetch_user.return_value = {"email": "dealer@example.com"}
        mock_stripe.create_checkout_session.side_effect = StripeClientError("card declined")
        response = authed_client.post("/api/v1/stripe/create-checkout", json={"subscriptionTier": "pro"})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to create checkout session"


class TestBillingPortal:
    """Tests for POST /api/v1/stripe/billing-portal."""

    def test_returns_portal_url(self, authed_client, mock_supabase, mock_stripe):
        mock_supabase.fetch_user.return_value = {"stripe_customer_id": "cus_123"}
        mock_stripe.create_portal_session.return_value = "https://billing.stripe.com/p/session_1"

        response = authed_client.post("/api/v1/stripe/billing-portal")

        assert response.json() == {"url": "https://billing.stripe.com/p/session_1"}
        mock_stripe.create_portal_session.assert_called_once_with("cus_123", subscription_url())

    def test_no_customer(self, authed_client, mock_supabase, mock_stripe):
        mock_supabase.fetch_user.return_value = {"stripe_customer_id": None}
        response = authed_client.post("/api/v1/stripe/billing-portal")
        assert response.status_code == 400
        assert response.json()["detail"] == "No subscription found"
        mock_stripe.create_portal_session.assert_not_called()
