# =============================================================================
# core/services/analytics_service.py - Dealership Analytics
# =============================================================================
# Pulls a dealership's vehicles and event rows from Supabase and aggregates
# them with pandas into the dashboard's analytics payload.
#
# Every headline metric is compared with the window of the same length that
# ends where the current one starts (month -> the month before, etc.).
# Also records public view and lead events.
# =============================================================================

import logging
from typing import Any

import pandas as pd

from app.exceptions import InvalidRequestError, ProviderError, VehicleNotFoundError
from core.models.analytics import (
    ActivityBreakdown,
    ActivityPeriod,
    AnalyticsData,
    AnalyticsMetric,
    ChangeDirection,
    DailyInquiries,
    DailyViews,
    TopListing,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

PERIOD_OFFSETS = {
    ActivityPeriod.DAY: pd.DateOffset(days=1),
    ActivityPeriod.WEEK: pd.DateOffset(days=7),
    ActivityPeriod.MONTH: pd.DateOffset(months=1),
    ActivityPeriod.YEAR: pd.DateOffset(years=1),
}

# Lower bound inclusive, upper bound exclusive
PRICE_BINS = [0, 10_000, 20_000, 30_000, 50_000, float("inf")]
PRICE_LABELS = ["Under $10k", "$10k-$20k", "$20k-$30k", "$30k-$50k", "Over $50k"]

TOP_LISTING_LIMIT = 10
ACTIVE_STATUS = "active"

VEHICLE_COLUMNS = ["id", "make", "model", "year", "trim", "body_type", "price", "status", "created_at"]


def parse_period(value: str | None) -> ActivityPeriod:
    """
    Parse the period query value (default month).

    Raises:
        InvalidRequestError: If the value isn't day, week, month or year
    """
    try:
        return ActivityPeriod(value or ActivityPeriod.MONTH.value)
    except ValueError:
        raise InvalidRequestError(
            "Invalid period parameter. Must be one of: day, week, month, year",
            details={"period": value},
        )


def percent_change(current: float, previous: float) -> float:
    """Relative change in percent; 0 when there's no previous value to compare to."""
    if previous > 0:
        return (current - previous) / previous * 100
    return 0.0


def direction(current: float, previous: float) -> ChangeDirection:
    if current > previous:
        return ChangeDirection.UP
    if current < previous:
        return ChangeDirection.DOWN
    return ChangeDirection.NEUTRAL


def metric(label: str, value: float, previous: float) -> AnalyticsMetric:
    change = percent_change(value, previous)
    return AnalyticsMetric(
        label=label,
        value=value,
        change=change,
        change_direction=direction(change, 0),
    )


def frame(rows: list[dict[str, Any]], columns: list[str]) -> pd.DataFrame:
    """DataFrame with the given columns guaranteed, even when rows is empty."""
    return pd.DataFrame(rows, columns=columns)


def column_sum(df: pd.DataFrame, columns: list[str]) -> float:
    if df.empty:
        return 0
    return float(df[columns].apply(pd.to_numeric, errors="coerce").fillna(0).to_numpy().sum())


def count_by_day(df: pd.DataFrame, time_column: str) -> pd.Series:
    """Rows per UTC calendar day, keyed by YYYY-MM-DD, oldest first."""
    if df.empty:
        return pd.Series(dtype="int64")
    days = pd.to_datetime(df[time_column], utc=True, format="ISO8601").dt.strftime("%Y-%m-%d")
    return days.value_counts().sort_index()


def breakdown(counts: pd.Series, total: int) -> list[ActivityBreakdown]:
    return [
        ActivityBreakdown(
            label=str(label),
            value=int(count),
            percentage=(int(count) / total * 100) if total > 0 else 0.0,
        )
        for label, count in counts.items()
    ]


def vehicle_type_breakdown(active: pd.DataFrame) -> list[ActivityBreakdown]:
    counts = active["body_type"].fillna("Unknown").replace("", "Unknown").value_counts()
    return breakdown(counts, int(counts.sum()))


def price_range_breakdown(active: pd.DataFrame) -> list[ActivityBreakdown]:
    """
    Count active vehicles per price band.

    Vehicles without a price fall in no band but still count toward the
    percentage denominator.
    """
    prices = pd.to_numeric(active["price"], errors="coerce")
    bands = pd.cut(prices, bins=PRICE_BINS, labels=PRICE_LABELS, right=False)
    counts = bands.value_counts().reindex(PRICE_LABELS, fill_value=0)
    return breakdown(counts, len(active))


def top_listings(active: pd.DataFrame, views: pd.DataFrame, leads: pd.DataFrame) -> list[TopListing]:
    """
    The most recently created active vehicles, ranked by views.

    Views and inquiries are counted over the current window rather than
    all time, so the ranking follows the selected period.
    """
    if active.empty:
        return []

    recent = active.sort_values("created_at", ascending=False).head(TOP_LISTING_LIMIT)
    view_counts = views["vehicle_id"].value_counts()
    lead_counts = leads["vehicle_id"].value_counts()

    listings = []
    for vehicle in recent.to_dict("records"):
        vehicle_views = int(view_counts.get(vehicle["id"], 0))
        vehicle_leads = int(lead_counts.get(vehicle["id"], 0))
        parts = [vehicle.get("year"), vehicle.get("make"), vehicle.get("model"), vehicle.get("trim")]
        title = " ".join("" if pd.isna(p) else str(p) for p in parts).strip()
        listings.append(TopListing(
            id=str(vehicle["id"]),
            title=" ".join(title.split()),
            views=vehicle_views,
            inquiries=vehicle_leads,
            engagement_rate=(vehicle_leads / vehicle_views * 100) if vehicle_views > 0 else 0.0,
        ))
    return sorted(listings, key=lambda item: item.views, reverse=True)


class AnalyticsService:
    """Service for dealership analytics and event tracking."""

    @staticmethod
    def _events(table: str, dealership_id: str, time_column: str, start, end, columns: list[str]) -> pd.DataFrame:
        rows = SupabaseClient.fetch_events(table, dealership_id, time_column, start, end)
        return frame(rows, columns)

    @staticmethod
    def get_dealership_analytics(
        dealership_id: str,
        period: ActivityPeriod = ActivityPeriod.MONTH,
        now: pd.Timestamp | None = None,
    ) -> AnalyticsData:
        """
        Build the analytics payload for a dealership.

        Args:
            dealership_id: Dealership UUID
            period: Window length
            now: End of the current window (defaults to the current time)

        Returns:
            AnalyticsData

        Raises:
            ProviderError: If any Supabase query fails
        """
        now = now if now is not None else pd.Timestamp.now(tz="UTC")
        offset = PERIOD_OFFSETS[period]
        start = now - offset
        previous_start, previous_end = start - offset, now - offset

        def windows(table: str, time_column: str, columns: list[str]) -> tuple[pd.DataFrame, pd.DataFrame]:
            return (
                AnalyticsService._events(table, dealership_id, time_column, start, now, columns),
                AnalyticsService._events(table, dealership_id, time_column, previous_start, previous_end, columns),
            )

        try:
            vehicles = frame(SupabaseClient.fetch_vehicles(dealership_id), VEHICLE_COLUMNS)
            views, previous_views = windows("vehicle_views", "viewed_at", ["vehicle_id", "viewed_at"])
            leads, previous_leads = windows("leads", "created_at", ["vehicle_id", "created_at"])
            social, previous_social = windows(
                "social_engagement", "created_at", ["likes", "shares", "comments", "created_at"]
            )
            search, previous_search = windows("search_impressions", "created_at", ["impressions", "created_at"])
            content = AnalyticsService._events(
                "vehicle_content", dealership_id, "generated_at", start, now, ["vehicle_id", "generated_at"]
            )
        except SupabaseClientError as e:
            logger.error(f"Failed to fetch analytics data for dealership {dealership_id}: {e.message}")
            raise ProviderError("Failed to fetch analytics data", error=e.message)

        # Nullable ints so a missing year doesn't turn 2022 into "2022.0" in titles
        vehicles["year"] = pd.to_numeric(vehicles["year"], errors="coerce").astype("Int64")
        active = vehicles[vehicles["status"] == ACTIVE_STATUS]
        created = pd.to_datetime(active["created_at"], utc=True, format="ISO8601")
        active_count = len(active)
        previous_active = int((created < start).sum())

        total_views, previous_total_views = len(views), len(previous_views)
        conversion = len(leads) / total_views * 100 if total_views else 0.0
        previous_conversion = len(previous_leads) / previous_total_views * 100 if previous_total_views else 0.0

        engagement_columns = ["likes", "shares", "comments"]
        active_change = percent_change(active_count, previous_active)

        daily_views = count_by_day(views, "viewed_at")
        daily_leads = count_by_day(leads, "created_at")

        logger.info(
            f"Analytics for dealership {dealership_id} ({period.value}): "
            f"{len(vehicles)} vehicles, {total_views} views, {len(leads)} leads"
        )
        return AnalyticsData(
            total_vehicles=AnalyticsMetric(
                label="Total Vehicles",
                value=len(vehicles),
                change=active_change,
                change_direction=direction(active_count, previous_active),
            ),
            active_listings=AnalyticsMetric(
                label="Active Listings",
                value=active_count,
                change=active_change,
                change_direction=direction(active_count, previous_active),
            ),
            total_views=metric("Total Views", total_views, previous_total_views),
            lead_conversion=metric("Lead Conversion", conversion, previous_conversion),
            social_engagement=metric(
                "Social Engagement",
                column_sum(social, engagement_columns),
                column_sum(previous_social, engagement_columns),
            ),
            search_impressions=metric(
                "Search Impressions",
                column_sum(search, ["impressions"]),
                column_sum(previous_search, ["impressions"]),
            ),
            vehicle_type_breakdown=vehicle_type_breakdown(active),
            price_range_breakdown=price_range_breakdown(active),
            views_by_day=[DailyViews(date=d, views=int(n)) for d, n in daily_views.items()],
            inquiries_by_day=[DailyInquiries(date=d, inquiries=int(n)) for d, n in daily_leads.items()],
            top_performing_listings=top_listings(active, views, leads),
            content_generations=len(content),
        )

    # -------------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------------

    @staticmethod
    def _vehicle_dealership(vehicle_id: str) -> str:
        try:
            vehicle = SupabaseClient.fetch_vehicle(vehicle_id)
        except SupabaseClientError as e:
            raise ProviderError("Failed to look up vehicle", error=e.message)
        if not vehicle:
            raise VehicleNotFoundError(vehicle_id)
        return vehicle["dealership_id"]

    @staticmethod
    def track_view(vehicle_id: str, user_id: str | None = None) -> None:
        dealership_id = AnalyticsService._vehicle_dealership(vehicle_id)
        try:
            SupabaseClient.insert_vehicle_view(vehicle_id, dealership_id, user_id)
        except SupabaseClientError as e:
            raise ProviderError("Failed to record view", error=e.message)
        logger.info(f"Recorded view for vehicle {vehicle_id}")

    @staticmethod
    def track_lead(vehicle_id: str, lead: dict[str, Any]) -> None:
        """
        Record an inquiry from the public vehicle page.

        Args:
            vehicle_id: Vehicle the inquiry is about
            lead: {name, email, phone?, message?}
        """
        dealership_id = AnalyticsService._vehicle_dealership(vehicle_id)
        try:
            SupabaseClient.insert_lead(vehicle_id, dealership_id, lead)
        except SupabaseClientError as e:
            raise ProviderError("Failed to record lead", error=e.message)
        logger.info(f"Recorded lead for vehicle {vehicle_id}")
