# =============================================================================
# app/routers/social.py - Social Publishing Endpoints
# =============================================================================
# Platform connections, immediate and scheduled posts, and the schedule.
# Posting is simulated; nothing is sent to the networks.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user
from core.models.base import CamelModel
from core.services.social_service import SocialService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/social", dependencies=[Depends(get_current_user)])


# =============================================================================
# Request Models
# =============================================================================

class ConnectPlatformRequest(CamelModel):
    platform_id: str | None = None
    access_token: str | None = None


class PublishRequest(CamelModel):
    listing_id: str | None = None
    platform: str | None = None
    immediate: bool = False
    scheduled_time: str | None = None
    custom_message: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/platforms")
async def list_platforms():
    return {"platforms": SocialService.list_platforms()}


@router.post("/platforms")
async def connect_platform(request: ConnectPlatformRequest):
    """
    Connect a social account.

    Raises:
        400: platformId or accessToken missing
    """
    message = SocialService.connect_platform(request.platform_id, request.access_token)
    return {"success": True, "message": message}


@router.post("/publish")
async def publish(request: PublishRequest):
    """
    Post a listing now or schedule it.

    Scheduled posts need a scheduledTime and are added to the schedule.
    """
    return SocialService.publish(
        request.listing_id,
        request.platform,
        immediate=request.immediate,
        scheduled_time=request.scheduled_time,
        custom_message=request.custom_message,
    )


@router.get("/schedule")
async def list_schedule():
    posts = SocialService.list_schedule()
    return {"scheduledPosts": posts, "count": len(posts)}


@router.delete("/schedule")
async def cancel_scheduled_post(post_id: str | None = Query(default=None, alias="id")):
    message = SocialService.cancel(post_id)
    return {"success": True, "message": message}
