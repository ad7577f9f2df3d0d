# =============================================================================
# app/routers/dashboard.py - Dashboard & Page Endpoints
# =============================================================================
# The dashboard summary (API and page path) and the sign-in hint that the
# session middleware redirects to. Pages answer with JSON; rendering is
# left to the frontend.
# =============================================================================

import logging
from collections import Counter
from typing import Any

from fastapi import APIRouter, Depends, Query, Request

from app.auth import AuthUser, get_current_user
from core.services.billing_service import BillingService
from core.services.listing_service import listing_store
from lib.formatters import format_currency, format_distance

logger = logging.getLogger(__name__)

router = APIRouter()
pages_router = APIRouter()

RECENT_LISTING_LIMIT = 5


def _recent_entry(listing: dict[str, Any]) -> dict[str, Any]:
    price = listing.get("price")
    mileage = listing.get("mileage")
    return {
        "id": listing["id"],
        "title": listing.get("title") or " ".join(
            str(part) for part in (listing.get("year"), listing.get("make"), listing.get("model")) if part
        ),
        "status": listing.get("status"),
        "price": format_currency(price) if price is not None else None,
        "mileage": format_distance(mileage) if mileage is not None else None,
        "createdAt": listing.get("createdAt"),
    }


def build_dashboard(user: AuthUser) -> dict[str, Any]:
    """
    Summary for the dashboard home.

    Returns:
        {user, listings {total, byStatus}, recent, plans}; recent holds the
        newest listings with display-formatted price and mileage
    """
    listings = listing_store.all()
    total = len(listings)
    by_status = Counter(item.get("status") or "unknown" for item in listings)
    newest = sorted(listings, key=lambda item: item.get("createdAt") or "", reverse=True)
    return {
        "user": {"id": str(user.id), "email": user.email, "dealershipId": user.dealership_id},
        "listings": {"total": total, "byStatus": dict(by_status)},
        "recent": [_recent_entry(item) for item in newest[:RECENT_LISTING_LIMIT]],
        "plans": BillingService.list_plans(),
    }


@router.get("/dashboard")
async def get_dashboard(user: AuthUser = Depends(get_current_user)):
    return build_dashboard(user)


# =============================================================================
# Page Paths
# =============================================================================

@pages_router.get("/dashboard")
async def dashboard_page(request: Request):
    """Dashboard page. The session middleware redirects here only with a session."""
    return {"page": "dashboard", **build_dashboard(request.state.user)}


@pages_router.get("/sign-in")
async def sign_in_page(
    redirect: str | None = Query(default=None),
    error: str | None = Query(default=None),
):
    """Where unauthenticated page requests land, with the path to return to."""
    return {
        "page": "sign-in",
        "message": "Sign in to continue",
        "redirect": redirect or "/dashboard",
        "error": error,
    }
