# =============================================================================
# core/models/subscription.py - Subscription Plans
# =============================================================================
# Static table of the three paid tiers. Price IDs come from settings so
# each Stripe account can plug in its own; everything else is fixed.
#
# Limits of None mean unlimited.
# =============================================================================

from enum import Enum

from pydantic import Field

from app.config import settings
from .base import CamelModel


class SubscriptionTier(str, Enum):
    PRO = "pro"
    GROWTH = "growth"
    ENTERPRISE = "enterprise"


class PlanLimits(CamelModel):
    listings: int | None = Field(default=None, description="Max listings (None = unlimited)")
    users: int | None = Field(default=None, description="Max users (None = unlimited)")
    social_platforms: int | None = Field(default=None, description="Max connected platforms (None = unlimited)")


class SubscriptionPlan(CamelModel):
    """One purchasable tier."""
    name: str
    description: str
    price_id: str
    features: list[str]
    limits: PlanLimits


def get_subscription_plans() -> dict[str, SubscriptionPlan]:
    """
    Build the plan table keyed by tier.

    Returns:
        {"pro": SubscriptionPlan, "growth": ..., "enterprise": ...}
    """
    return {
        SubscriptionTier.PRO.value: SubscriptionPlan(
            name="Pro",
            description="For single dealerships with basic needs",
            price_id=settings.STRIPE_PRICE_PRO,
            features=[
                "Up to 100 vehicle listings",
                "Basic AI image enhancement",
                "Single social media platform",
                "5 users maximum",
                "Email support",
            ],
            limits=PlanLimits(listings=100, users=5, social_platforms=1),
        ),
        SubscriptionTier.GROWTH.value: SubscriptionPlan(
            name="Growth",
            description="For growing dealerships with advanced needs",
            price_id=settings.STRIPE_PRICE_GROWTH,
            features=[
                "Up to 500 vehicle listings",
                "Advanced AI image enhancements",
                "All social media platforms",
                "20 users maximum",
                "Email and chat support",
                "Analytics dashboard",
            ],
            limits=PlanLimits(listings=500, users=20, social_platforms=3),
        ),
        SubscriptionTier.ENTERPRISE.value: SubscriptionPlan(
            name="Enterprise",
            description="For auto groups with multiple dealerships",
            price_id=settings.STRIPE_PRICE_ENTERPRISE,
            features=[
                "Unlimited vehicle listings",
                "All AI features",
                "All social media platforms",
                "Unlimited users",
                "Priority support with dedicated account manager",
                "Advanced analytics and reporting",
            ],
            limits=PlanLimits(),
        ),
    }


def tier_for_price_id(price_id: str | None) -> str | None:
    """Map a Stripe price ID back to its tier, or None if it matches no plan."""
    if not price_id:
        return None
    for tier, plan in get_subscription_plans().items():
        if plan.price_id == price_id:
            return tier
    return None
