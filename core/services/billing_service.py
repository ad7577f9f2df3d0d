# =============================================================================
# core/services/billing_service.py - Subscription Billing Logic
# =============================================================================
# Turns a signed-in user plus a tier into a Stripe checkout session, and a
# paying user into a billing portal session. Plan data lives in
# core.models.subscription; Stripe calls live in lib.stripe_client.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from app.exceptions import (
    InvalidSubscriptionTierError,
    NoSubscriptionError,
    ProviderError,
    UserNotFoundError,
)
from core.models.subscription import SubscriptionPlan, get_subscription_plans
from lib.stripe_client import StripeClient, StripeClientError
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

NO_DEALERSHIP = "no_dealership"


def subscription_url(suffix: str = "") -> str:
    """Dashboard subscription page URL, e.g. <APP_URL>/dashboard/subscription/canceled."""
    return f"{settings.APP_URL.rstrip('/')}/dashboard/subscription{suffix}"


class BillingService:
    """Service for subscription checkout and billing portal sessions."""

    @staticmethod
    def list_plans() -> dict[str, dict[str, Any]]:
        return {tier: plan.to_wire(exclude_none=False) for tier, plan in get_subscription_plans().items()}

    @staticmethod
    def get_plan(tier: str | None) -> SubscriptionPlan:
        """
        Look up a plan by tier.

        Raises:
            InvalidSubscriptionTierError: If tier names no plan
        """
        plans = get_subscription_plans()
        if not tier or tier not in plans:
            raise InvalidSubscriptionTierError(tier, list(plans))
        return plans[tier]

    @staticmethod
    def _load_user(user_id: str) -> dict[str, Any]:
        try:
            user = SupabaseClient.fetch_user(user_id)
        except SupabaseClientError as e:
            logger.error(f"Failed to load user {user_id}: {e.message}")
            raise ProviderError("Failed to load user", error=e.message)
        if not user:
            raise UserNotFoundError(user_id)
        return user

    @staticmethod
    def create_checkout(user_id: str, tier: str | None) -> str:
        """
        Start a subscription checkout for a user.

        Args:
            user_id: Signed-in user's ID
            tier: pro, growth or enterprise

        Returns:
            Hosted checkout URL

        Raises:
            InvalidSubscriptionTierError: Unknown tier
            UserNotFoundError: No users row for this ID
            ProviderError: Stripe or Supabase failed
        """
        plan = BillingService.get_plan(tier)
        user = BillingService._load_user(user_id)

        try:
            url = StripeClient.create_checkout_session(
                price_id=plan.price_id,
                user_id=user_id,
                dealership_id=user.get("dealership_id") or NO_DEALERSHIP,
                email=user.get("email"),
                success_url=subscription_url("/success?session_id={CHECKOUT_SESSION_ID}"),
                cancel_url=subscription_url("/canceled"),
                customer_id=user.get("stripe_customer_id"),
            )
        except StripeClientError as e:
            raise ProviderError("Failed to create checkout session", error=e.message)

        logger.info(f"Checkout started for user {user_id} on tier {tier}")
        return url

    @staticmethod
    def create_portal(user_id: str) -> str:
        """
        Open the Stripe billing portal for a paying user.

        Raises:
            UserNotFoundError: No users row for this ID
            NoSubscriptionError: The user has never checked out
            ProviderError: Stripe or Supabase failed
        """
        user = BillingService._load_user(user_id)
        customer_id = user.get("stripe_customer_id")
        if not customer_id:
            raise NoSubscriptionError()

        try:
            return StripeClient.create_portal_session(customer_id, subscription_url())
        except StripeClientError as e:
            raise ProviderError("Failed to create billing portal session", error=e.message)
