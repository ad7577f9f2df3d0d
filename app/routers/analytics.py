# =============================================================================
# app/routers/analytics.py - Analytics & Tracking Endpoints
# =============================================================================
# Dealership analytics for signed-in users, plus public endpoints that the
# vehicle pages call to record views and leads.
# =============================================================================

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from app.auth import AuthUser, get_current_user, get_current_user_optional
from app.exceptions import MissingFieldError, NoDealershipError
from core.models.base import CamelModel
from core.services.analytics_service import AnalyticsService, parse_period

logger = logging.getLogger(__name__)

router = APIRouter()


class LeadRequest(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    message: str | None = Field(default=None, max_length=5000)


@router.get("/analytics")
async def get_analytics(
    period: str | None = Query(default="month", description="day, week, month or year"),
    user: AuthUser = Depends(get_current_user),
):
    """
    Analytics for the signed-in user's dealership over the chosen period,
    compared with the period before it.

    Raises:
        400: Invalid period, or no dealership on the account
        401: Not authenticated
        500: Supabase failed
    """
    activity_period = parse_period(period)
    if not user.dealership_id:
        raise NoDealershipError(str(user.id))

    data = AnalyticsService.get_dealership_analytics(str(user.dealership_id), activity_period)
    return {"success": True, "data": data.to_wire(exclude_none=False)}


@router.post("/public/vehicles/{vehicle_id}/views")
async def track_vehicle_view(
    vehicle_id: str,
    user: Optional[AuthUser] = Depends(get_current_user_optional),
):
    """Record a vehicle page view. Signed-in viewers are attributed."""
    AnalyticsService.track_view(vehicle_id, str(user.id) if user else None)
    return {"success": True}


@router.post("/public/vehicles/{vehicle_id}/leads", status_code=201)
async def submit_lead(vehicle_id: str, request: LeadRequest):
    """
    Record an inquiry about a vehicle.

    Raises:
        400: name or email missing
        404: Unknown vehicle
    """
    if not request.name or not request.email:
        raise MissingFieldError("Name and email are required", ["name", "email"])
    AnalyticsService.track_lead(vehicle_id, request.model_dump(exclude_none=True))
    return {"success": True}
