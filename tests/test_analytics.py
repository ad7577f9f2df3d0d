# =============================================================================
# tests/test_analytics.py - Analytics Tests
# =============================================================================
# The pandas aggregation runs for real over rows served by a patched
# SupabaseClient. The clock is pinned so the month windows are:
#   current  2024-05-15T12:00Z .. 2024-06-15T12:00Z
#   previous 2024-04-15T12:00Z .. 2024-05-15T12:00Z
# =============================================================================

from unittest.mock import patch

import pandas as pd
import pytest

from app.auth import AuthUser, get_current_user
from app.exceptions import InvalidRequestError
from app.main import app
from core.models.analytics import ActivityPeriod, ChangeDirection
from core.services.analytics_service import AnalyticsService, parse_period, percent_change
from lib.supabase_client import SupabaseClientError
from tests.conftest import TEST_DEALERSHIP_ID, TEST_USER_ID

NOW = pd.Timestamp("2024-06-15T12:00:00Z")
SUPABASE = "core.services.analytics_service.SupabaseClient"

VEHICLES = [
    {"id": "v1", "make": "Toyota", "model": "RAV4", "year": 2022, "trim": "XLE", "body_type": "SUV",
     "price": 25000, "status": "active", "created_at": "2024-01-01T00:00:00+00:00"},
    {"id": "v2", "make": "Honda", "model": "Civic", "year": 2023, "trim": None, "body_type": "Sedan",
     "price": 15000, "status": "active", "created_at": "2024-06-01T00:00:00+00:00"},
    {"id": "v3", "make": "Kia", "model": "Soul", "year": None, "trim": None, "body_type": None,
     "price": None, "status": "active", "created_at": "2024-03-01T00:00:00+00:00"},
    {"id": "v4", "make": "Ford", "model": "F-150", "year": 2021, "trim": "XLT", "body_type": "Truck",
     "price": 40000, "status": "sold", "created_at": "2023-12-01T00:00:00+00:00"},
]

EVENTS = {
    "vehicle_views": [
        {"vehicle_id": "v1", "viewed_at": "2024-06-10T09:00:00+00:00"},
        {"vehicle_id": "v1", "viewed_at": "2024-06-10T15:00:00+00:00"},
        {"vehicle_id": "v1", "viewed_at": "2024-06-11T09:00:00+00:00"},
        {"vehicle_id": "v2", "viewed_at": "2024-06-12T09:00:00+00:00"},
        {"vehicle_id": "v1", "viewed_at": "2024-05-01T09:00:00+00:00"},
        {"vehicle_id": "v1", "viewed_at": "2024-05-02T09:00:00+00:00"},
    ],
    "leads": [
        {"vehicle_id": "v1", "created_at": "2024-06-10T10:00:00+00:00"},
    ],
    "social_engagement": [
        {"likes": 10, "shares": 2, "comments": 3, "created_at": "2024-06-01T00:00:00+00:00"},
        {"likes": 5, "shares": 0, "comments": None, "created_at": "2024-05-01T00:00:00+00:00"},
    ],
    "search_impressions": [],
    "vehicle_content": [
        {"vehicle_id": "v1", "generated_at": "2024-06-05T00:00:00+00:00"},
    ],
}


def fetch_events(table, dealership_id, time_column, start, end):
    """Serve EVENTS rows whose timestamp falls inside [start, end]."""
    return [row for row in EVENTS[table] if start <= pd.Timestamp(row[time_column]) <= end]


@pytest.fixture
def mock_supabase():
    with patch(SUPABASE) as mock:
        mock.fetch_vehicles.return_value = VEHICLES
        mock.fetch_events.side_effect = fetch_events
        yield mock


# =============================================================================
# Helper Tests
# =============================================================================

class TestHelpers:
    def test_parse_period_default(self):
        assert parse_period(None) == ActivityPeriod.MONTH

    def test_parse_period_invalid(self):
        with pytest.raises(InvalidRequestError):
            parse_period("fortnight")

    @pytest.mark.parametrize("current,previous,expected", [
        (150, 100, 50.0),
        (50, 100, -50.0),
        (10, 0, 0.0),
    ])
    def test_percent_change(self, current, previous, expected):
        assert percent_change(current, previous) == expected


# =============================================================================
# Aggregation Tests
# =============================================================================

class TestDealershipAnalytics:
    """Tests for AnalyticsService.get_dealership_analytics."""

    @pytest.fixture
    def data(self, mock_supabase):
        return AnalyticsService.get_dealership_analytics(TEST_DEALERSHIP_ID, ActivityPeriod.MONTH, now=NOW)

    def test_inventory_metrics(self, data):
        assert data.total_vehicles.value == 4
        assert data.active_listings.value == 3
        # v1 and v3 were already active when the window opened
        assert data.active_listings.change == 50.0
        assert data.active_listings.change_direction == ChangeDirection.UP

    def test_views_and_conversion(self, data):
        assert data.total_views.value == 4
        assert data.total_views.change == 100.0
        assert data.lead_conversion.value == 25.0
        assert data.lead_conversion.change == 0.0
        assert data.lead_conversion.change_direction == ChangeDirection.NEUTRAL

    def test_engagement_sums(self, data):
        assert data.social_engagement.value == 15
        assert data.social_engagement.change == 200.0
        assert data.search_impressions.value == 0
        assert data.content_generations == 1

    def test_breakdowns(self, data):
        types = {b.label: b.value for b in data.vehicle_type_breakdown}
        assert types == {"SUV": 1, "Sedan": 1, "Unknown": 1}

        prices = {b.label: b.value for b in data.price_range_breakdown}
        assert prices["$20k-$30k"] == 1
        assert prices["$10k-$20k"] == 1
        assert prices["Over $50k"] == 0
        # The unpriced vehicle still counts toward the denominator
        assert data.price_range_breakdown[1].percentage == pytest.approx(100 / 3)

    def test_daily_series(self, data):
        assert [(d.date, d.views) for d in data.views_by_day] == [
            ("2024-06-10", 2),
            ("2024-06-11", 1),
            ("2024-06-12", 1),
        ]
        assert [(d.date, d.inquiries) for d in data.inquiries_by_day] == [("2024-06-10", 1)]

    def test_top_listings_ranked_by_views(self, data):
        top = data.top_performing_listings
        assert [t.id for t in top] == ["v1", "v2", "v3"]
        assert top[0].title == "2022 Toyota RAV4 XLE"
        assert top[0].engagement_rate == pytest.approx(100 / 3)
        assert top[1].title == "2023 Honda Civic"
        assert top[2].title == "Kia Soul"
        assert top[2].engagement_rate == 0.0

    def test_empty_dealership(self):
        with patch(SUPABASE) as mock_supabase:
            mock_supabase.fetch_vehicles.return_value = []
            mock_supabase.fetch_events.return_value = []
            data = AnalyticsService.get_dealership_analytics(TEST_DEALERSHIP_ID, now=NOW)
        assert data.total_vehicles.value == 0
        assert data.vehicle_type_breakdown == []
        assert [b.value for b in data.price_range_breakdown] == [0, 0, 0, 0, 0]
        assert data.top_performing_listings == []


# =============================================================================
# Endpoint Tests
# =============================================================================

class TestAnalyticsEndpoint:
    """Tests for GET /api/v1/analytics."""

    def test_returns_wire_payload(self, authed_client, mock_supabase):
        body = authed_client.get("/api/v1/analytics", params={"period": "week"}).json()
        assert body["success"] is True
        assert set(body["data"]) >= {"totalVehicles", "leadConversion", "topPerformingListings"}
        assert body["data"]["totalVehicles"]["label"] == "Total Vehicles"
        mock_supabase.fetch_vehicles.assert_called_once_with(TEST_DEALERSHIP_ID)

    def test_invalid_period(self, authed_client, mock_supabase):
        response = authed_client.get("/api/v1/analytics", params={"period": "decade"})
        assert response.status_code == 400

    def test_user_without_dealership(self, client):
        app.dependency_overrides[get_current_user] = lambda: AuthUser(id=TEST_USER_ID)
        response = client.get("/api/v1/analytics")
        assert response.status_code == 400
        assert response.json()["code"] == "NO_DEALERSHIP"

    def test_database_failure(self, authed_client):
        with patch(SUPABASE) as mock_supabase:
            mock_supabase.fetch_vehicles.side_effect = SupabaseClientError("db down")
            response = authed_client.get("/api/v1/analytics")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch analytics data"


class TestTrackingEndpoints:
    """Tests for the public view and lead endpoints."""

    def test_anonymous_view(self, client, mock_supabase):
        mock_supabase.fetch_vehicle.return_value = {"id": "v1", "dealership_id": TEST_DEALERSHIP_ID}
        assert client.post("/api/v1/public/vehicles/v1/views").json() == {"success": True}
        mock_supabase.insert_vehicle_view.assert_called_once_with("v1", TEST_DEALERSHIP_ID, None)

    def test_unknown_vehicle(self, client, mock_supabase):
        mock_supabase.fetch_vehicle.return_value = None
        assert client.post("/api/v1/public/vehicles/nope/views").status_code == 404

    def test_lead(self, client, mock_supabase):
        mock_supabase.fetch_vehicle.return_value = {"id": "v1", "dealership_id": TEST_DEALERSHIP_ID}
        response = client.post(
            "/api/v1/public/vehicles/v1/leads",
            json={"name": "Sam Buyer", "email": "sam@example.com", "message": "Still available?"},
        )
        assert response.status_code == 201
        mock_supabase.insert_lead.assert_called_once_with(
            "v1", TEST_DEALERSHIP_ID,
            {"name": "Sam Buyer", "email": "sam@example.com", "message": "Still available?"},
        )

    def test_lead_requires_name_and_email(self, client, mock_supabase):
        response = client.post("/api/v1/public/vehicles/v1/leads", json={"name": "Sam Buyer"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Name and email are required"
        mock_supabase.insert_lead.assert_not_called()
