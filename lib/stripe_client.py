# =============================================================================
# lib/stripe_client.py - Stripe Client Wrapper
# =============================================================================
# Thin wrapper around the Stripe SDK for subscription billing:
# - Checkout sessions for new subscriptions
# - Billing portal sessions for existing customers
# - Subscription lookups (price -> tier mapping happens in the caller)
# - Webhook event verification
#
# Usage:
#   from lib.stripe_client import StripeClient
#   url = StripeClient.create_checkout_session(price_id, user_id, ...)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

import stripe

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class StripeClientError(ApplicationError):
    """Error during Stripe operations."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("code", "STRIPE_ERROR")
        super().__init__(message, **kwargs)


class StripeClient:
    """Class-level wrapper around the Stripe SDK."""

    _configured: bool = False

    @classmethod
    def _ensure_config(cls) -> None:
        if cls._configured:
            return
        if not settings.stripe_configured:
            raise StripeClientError(
                message="Stripe is not configured",
                code="STRIPE_NOT_CONFIGURED",
                suggestion="Set STRIPE_SECRET_KEY in your .env file"
            )
        stripe.api_key = settings.STRIPE_SECRET_KEY
        stripe.api_version = settings.STRIPE_API_VERSION
        cls._configured = True
        logger.info("Stripe client configured")

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    @classmethod
    def create_checkout_session(
        cls,
        price_id: str,
        user_id: str,
        dealership_id: str,
        email: str | None,
        success_url: str,
        cancel_url: str,
        customer_id: str | None = None,
    ) -> str:
        """
        Create a subscription checkout session.

        Args:
            price_id: Stripe price for the chosen tier
            user_id: Supabase user ID, stored in metadata
            dealership_id: Dealership ID or "no_dealership", stored in metadata
            email: Prefilled customer email when no customer exists yet
            success_url: Redirect after payment (may contain {CHECKOUT_SESSION_ID})
            cancel_url: Redirect when the customer backs out
            customer_id: Existing Stripe customer, if any

        Returns:
            The hosted checkout URL

        Raises:
            StripeClientError: If Stripe rejects the request
        """
        cls._ensure_config()
        params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": "subscription",
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": {"userId": user_id, "dealershipId": dealership_id},
        }
        if customer_id:
            params["customer"] = customer_id
        elif email:
            params["customer_email"] = email

        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session failed for user {user_id}: {e}")
            raise StripeClientError(
                message=f"Failed to create checkout session: {e}",
                code="CHECKOUT_FAILED",
                details={"price_id": price_id},
            )
        logger.info(f"Created checkout session for user {user_id} ({price_id})")
        return session.url

    @classmethod
    def create_portal_session(cls, customer_id: str, return_url: str) -> str:
        """Create a billing portal session and return its URL."""
        cls._ensure_config()
        try:
            session = stripe.billing_portal.Session.create(customer=customer_id, return_url=return_url)
        except stripe.StripeError as e:
            logger.error(f"Stripe billing portal failed for customer {customer_id}: {e}")
            raise StripeClientError(
                message=f"Failed to create billing portal session: {e}",
                code="PORTAL_FAILED",
            )
        return session.url

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    @classmethod
    def get_subscription_price_id(cls, subscription_id: str) -> str | None:
        """Return the price ID of a subscription's first item, or None if it has no items."""
        cls._ensure_config()
        try:
            subscription = stripe.Subscription.retrieve(subscription_id)
        except stripe.StripeError as e:
            raise StripeClientError(
                message=f"Failed to retrieve subscription: {e}",
                code="SUBSCRIPTION_LOOKUP_FAILED",
                details={"subscription_id": subscription_id},
            )
        items = subscription["items"]["data"]
        if not items:
            return None
        return items[0]["price"]["id"]

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    @staticmethod
    def verify_webhook(payload: bytes, signature: str) -> None:
        """
        Verify a webhook payload against the signing secret.

        Raises:
            ValueError: If the payload is not valid JSON
            stripe.SignatureVerificationError: If the signature does not match
        """
        stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
