# =============================================================================
# core/models/social.py - Social Media Schemas
# =============================================================================
# Connected platforms and scheduled posts shown on the social media screens.
# =============================================================================

from enum import Enum

from pydantic import Field

from .base import CamelModel


class ScheduledPostStatus(str, Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


class SocialPlatform(CamelModel):
    """
    A social account the dealership can publish to.

    Example:
        {"id": "x", "name": "X (Twitter)", "connected": true,
         "tokenExpires": "2024-02-04T10:30:00+00:00", "username": "cardealerai"}
    """
    id: str = Field(..., description="Platform key (x, facebook, instagram)")
    name: str = Field(..., description="Display name")
    connected: bool = False
    token_expires: str | None = None
    username: str | None = None


class ScheduledPost(CamelModel):
    id: str = Field(..., description="schedule_xxxxxxxx")
    listing_id: str
    platform: str
    scheduled_time: str
    status: ScheduledPostStatus = ScheduledPostStatus.PENDING
    custom_message: str | None = None
    created_at: str
