# =============================================================================
# core/models/analytics.py - Analytics Schemas
# =============================================================================
# Output of GET /analytics: headline metrics with period-over-period change,
# inventory breakdowns, daily series and top listings.
# =============================================================================

from enum import Enum

from pydantic import Field

from .base import CamelModel


class ActivityPeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ChangeDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class AnalyticsMetric(CamelModel):
    label: str
    value: float
    change: float = 0.0
    change_direction: ChangeDirection = ChangeDirection.NEUTRAL


class ActivityBreakdown(CamelModel):
    label: str
    value: int
    percentage: float


class DailyViews(CamelModel):
    date: str
    views: int


class DailyInquiries(CamelModel):
    date: str
    inquiries: int


class TopListing(CamelModel):
    id: str
    title: str
    views: int
    inquiries: int
    engagement_rate: float


class AnalyticsData(CamelModel):
    """Full analytics payload for one dealership and period."""
    total_vehicles: AnalyticsMetric
    active_listings: AnalyticsMetric
    total_views: AnalyticsMetric
    lead_conversion: AnalyticsMetric
    social_engagement: AnalyticsMetric
    search_impressions: AnalyticsMetric
    vehicle_type_breakdown: list[ActivityBreakdown] = Field(default_factory=list)
    price_range_breakdown: list[ActivityBreakdown] = Field(default_factory=list)
    views_by_day: list[DailyViews] = Field(default_factory=list)
    inquiries_by_day: list[DailyInquiries] = Field(default_factory=list)
    top_performing_listings: list[TopListing] = Field(default_factory=list)
    content_generations: int = 0
