# =============================================================================
# core/services/social_service.py - Social Media Logic
# =============================================================================
# Mock social publishing for the dashboard's social screens. Platforms and
# the post schedule live in process memory; no platform API is called.
# =============================================================================

import logging
import string
import threading
from datetime import datetime, timedelta, timezone
from typing import Any

from app.exceptions import MissingFieldError
from core.models.social import ScheduledPost, ScheduledPostStatus, SocialPlatform
from lib.formatters import random_string

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits

# Connected platforms get a token valid this long
TOKEN_LIFETIME = timedelta(days=60)


def seed_platforms(now: datetime) -> list[SocialPlatform]:
    return [
        SocialPlatform(
            id="x",
            name="X (Twitter)",
            connected=True,
            token_expires=(now + timedelta(days=30)).isoformat(),
            username="cardealerai",
        ),
        SocialPlatform(
            id="facebook",
            name="Facebook",
            connected=True,
            token_expires=(now + timedelta(days=60)).isoformat(),
            username="cardealerai",
        ),
        SocialPlatform(id="instagram", name="Instagram", connected=False),
    ]


def seed_schedule(now: datetime) -> list[ScheduledPost]:
    return [
        ScheduledPost(
            id="schedule_abc123",
            listing_id="listing_123",
            platform="x",
            scheduled_time=(now + timedelta(days=2)).isoformat(),
            custom_message="Check out this amazing deal!",
            created_at=(now - timedelta(days=1)).isoformat(),
        ),
        ScheduledPost(
            id="schedule_def456",
            listing_id="listing_456",
            platform="facebook",
            scheduled_time=(now + timedelta(days=3)).isoformat(),
            created_at=(now - timedelta(days=2)).isoformat(),
        ),
    ]


class SocialStore:
    """Process-local platforms and schedule, guarded by one lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        now = datetime.now(timezone.utc)
        with self._lock:
            self.platforms = {p.id: p for p in seed_platforms(now)}
            self.schedule = {p.id: p for p in seed_schedule(now)}

    def connect(self, platform_id: str, name: str | None = None) -> SocialPlatform:
        expires = (datetime.now(timezone.utc) + TOKEN_LIFETIME).isoformat()
        with self._lock:
            current = self.platforms.get(platform_id)
            if current is None:
                current = SocialPlatform(id=platform_id, name=name or platform_id.title())
            updated = current.model_copy(update={"connected": True, "token_expires": expires})
            self.platforms[platform_id] = updated
            return updated

    def add_post(self, post: ScheduledPost) -> None:
        with self._lock:
            self.schedule[post.id] = post

    def cancel_post(self, post_id: str) -> bool:
        with self._lock:
            return self.schedule.pop(post_id, None) is not None


social_store = SocialStore()


class SocialService:
    """Service for mock social publishing."""

    @staticmethod
    def list_platforms() -> list[dict[str, Any]]:
        return [p.to_wire() for p in social_store.platforms.values()]

    @staticmethod
    def connect_platform(platform_id: str | None, access_token: str | None) -> str:
        """
        Mark a platform as connected.

        The token itself is only checked for presence and never stored.

        Returns:
            Confirmation message

        Raises:
            MissingFieldError: If either value is missing
        """
        if not platform_id or not access_token:
            raise MissingFieldError("Platform ID and access token are required", ["platformId", "accessToken"])
        social_store.connect(platform_id)
        logger.info(f"Connected social platform {platform_id}")
        return f"Successfully connected {platform_id}"

    @staticmethod
    def publish(
        listing_id: str | None,
        platform: str | None,
        immediate: bool = False,
        scheduled_time: str | None = None,
        custom_message: str | None = None,
    ) -> dict[str, Any]:
        """
        Publish a listing now, or add it to the schedule.

        Returns:
            {success, platform, listingId, immediate} plus postId/postedAt
            for immediate posts, or scheduled/scheduledTime/scheduledId

        Raises:
            MissingFieldError: Missing ids, or a scheduled post without a time
        """
        if not listing_id or not platform:
            raise MissingFieldError("Listing ID and platform are required", ["listingId", "platform"])
        if not immediate and not scheduled_time:
            raise MissingFieldError("Scheduled time is required for scheduled posts", ["scheduledTime"])

        response: dict[str, Any] = {
            "success": True,
            "platform": platform,
            "listingId": listing_id,
            "immediate": immediate,
        }
        now = datetime.now(timezone.utc).isoformat()

        if immediate:
            post_id = f"post_{random_string(8, ID_ALPHABET)}"
            logger.info(f"Published listing {listing_id} to {platform} as {post_id}")
            return {**response, "postId": post_id, "postedAt": now}

        post = ScheduledPost(
            id=f"schedule_{random_string(8, ID_ALPHABET)}",
            listing_id=listing_id,
            platform=platform,
            scheduled_time=scheduled_time,
            status=ScheduledPostStatus.PENDING,
            custom_message=custom_message,
            created_at=now,
        )
        social_store.add_post(post)
        logger.info(f"Scheduled listing {listing_id} on {platform} for {scheduled_time}")
        return {**response, "scheduled": True, "scheduledTime": scheduled_time, "scheduledId": post.id}

    @staticmethod
    def list_schedule() -> list[dict[str, Any]]:
        return [p.to_wire(mode="json") for p in social_store.schedule.values()]

    @staticmethod
    def cancel(post_id: str | None) -> str:
        """
        Cancel a scheduled post.

        Unknown IDs are treated as already cancelled.

        Raises:
            MissingFieldError: If post_id is empty
        """
        if not post_id:
            raise MissingFieldError("Post ID is required", ["id"])
        if social_store.cancel_post(post_id):
            logger.info(f"Cancelled scheduled post {post_id}")
        else:
            logger.info(f"Scheduled post {post_id} not found, nothing to cancel")
        return f"Scheduled post {post_id} has been cancelled"
