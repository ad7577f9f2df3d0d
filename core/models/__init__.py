# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - base.py: CamelModel (camelCase wire format)
# - listing.py: Vehicle listing schemas
# - content.py: Chat and AI copywriting schemas
# - subscription.py: Subscription plan table
# - social.py: Social platform and scheduled post schemas
# - analytics.py: Dealership analytics schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import CamelModel

# -----------------------------------------------------------------------------
# Listing Models
# -----------------------------------------------------------------------------
from .listing import (
    Listing,
    ListingImage,
    ListingStatus,
    ListingWrite,
)

# -----------------------------------------------------------------------------
# Content Models - Chat assistant and copywriting
# -----------------------------------------------------------------------------
from .content import (
    ChatMessage,
    ContentLength,
    ContentStyle,
    GeneratedContent,
    GenerationOptions,
    SocialPlatformName,
    VehicleInfo,
)

# -----------------------------------------------------------------------------
# Billing Models
# -----------------------------------------------------------------------------
from .subscription import (
    PlanLimits,
    SubscriptionPlan,
    SubscriptionTier,
    get_subscription_plans,
    tier_for_price_id,
)

# -----------------------------------------------------------------------------
# Social Models
# -----------------------------------------------------------------------------
from .social import (
    ScheduledPost,
    ScheduledPostStatus,
    SocialPlatform,
)

# -----------------------------------------------------------------------------
# Analytics Models
# -----------------------------------------------------------------------------
from .analytics import (
    ActivityBreakdown,
    ActivityPeriod,
    AnalyticsData,
    AnalyticsMetric,
    ChangeDirection,
    DailyInquiries,
    DailyViews,
    TopListing,
)

__all__ = [
    "CamelModel",
    # Listing
    "Listing",
    "ListingImage",
    "ListingStatus",
    "ListingWrite",
    # Content
    "ChatMessage",
    "ContentLength",
    "ContentStyle",
    "GeneratedContent",
    "GenerationOptions",
    "SocialPlatformName",
    "VehicleInfo",
    # Billing
    "PlanLimits",
    "SubscriptionPlan",
    "SubscriptionTier",
    "get_subscription_plans",
    "tier_for_price_id",
    # Social
    "ScheduledPost",
    "ScheduledPostStatus",
    "SocialPlatform",
    # Analytics
    "ActivityBreakdown",
    "ActivityPeriod",
    "AnalyticsData",
    "AnalyticsMetric",
    "ChangeDirection",
    "DailyInquiries",
    "DailyViews",
    "TopListing",
]
