# =============================================================================
# app/routers/billing.py - Subscription & Stripe Checkout Endpoints
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.base import CamelModel
from core.services.billing_service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter()


class CheckoutRequest(CamelModel):
    subscription_tier: str | None = None


@router.get("/subscription/plans")
async def list_plans():
    """The subscription plan table, keyed by tier."""
    return BillingService.list_plans()


@router.post("/stripe/create-checkout")
async def create_checkout(
    request: CheckoutRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Start a Stripe subscription checkout.

    Returns:
        {url} for the hosted checkout page

    Raises:
        400: Unknown tier
        401: Not authenticated
        404: No users row for the signed-in user
        500: Stripe failed
    """
    url = BillingService.create_checkout(str(user.id), request.subscription_tier)
    return {"url": url}


@router.post("/stripe/billing-portal")
async def billing_portal(user: AuthUser = Depends(get_current_user)):
    """
    Open the Stripe billing portal.

    Raises:
        400: The user has no Stripe customer yet
    """
    url = BillingService.create_portal(str(user.id))
    return {"url": url}
